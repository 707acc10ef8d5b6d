# Middleware package init
"""
FoodHub Backend - Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    The request ID is set first so the access log line and every error
    response of the request carry the same correlation ID.
"""
