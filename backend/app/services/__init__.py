# Services package init
"""
Chartwise Backend — Services Layer
====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP; services hold the business rules.

Service Inventory:
    - avatar_service:        Random avatar / nickname generators (pure functions)
    - ChartService:          Saved chart CRUD, pagination and statistics
    - ProfileService:        Profile get-or-create, update, nickname availability
    - NotificationService:   Notification CRUD and best-effort event dispatch
"""
