# Middleware package init
"""
TaskBoard Backend — Middleware Package
========================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: correlation id for every log line of the request
    2. Logging: method, path, status and duration, tagged with the id
    3. GZip / CORS: added by FastAPI's stock middleware

    Responses pass back through the chain in reverse, so the request id
    header is set and the duration covers the whole handler.
"""
