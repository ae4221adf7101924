# Routes package init
"""
Chartwise Backend — API Routes Package
========================================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - charts.py:         /api/saved-charts     (saved chart CRUD + statistics)
    - profiles.py:       /api/user-profile     (profiles, nicknames, avatars)
    - notifications.py:  /api/notifications    (in-app notifications)
    - auth.py:           POST /api/auth/login  (login event → profile + welcome)
    - health.py:         GET  /health          (service health check)

Routes stay THIN: they extract path/query/body values, call a service and
pick the status code. Business logic lives in app/services.
"""
