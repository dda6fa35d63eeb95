# Middleware package init
"""
Mongo API — Middleware Package
===============================

Middleware Chain:
    Request → [Request ID] → [Logging] → [CORS] → [Catch-All] → Route Handler

    Request ID runs first so the access log line and any error response
    carry the same correlation ID. CORS answers preflight OPTIONS requests
    before routing. Catch-All is innermost so that an unexpected 500 still
    passes back through CORS and Request ID.
"""
