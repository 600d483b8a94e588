# Middleware package init
"""
DysNote Backend — Middleware Package
=====================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation ID
    2. Logging: records method, path, status and duration with that ID
    3. GZip / CORS: Starlette's stock middleware

    Responses travel back through the chain in reverse, so the request ID
    header is added after the route handler and logging sees the final status.
"""
