# Middleware package init
"""
Chartwise Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (outermost first):
    Request → [Rate Limit] → [Request ID] → [Access Log] → [GZip] → [CORS] → Route

    - Rate Limit rejects abusive clients before any other work is done
    - Request ID assigns the correlation id used by every log line and error body
    - Access Log records method, path, status and duration with that id
"""
