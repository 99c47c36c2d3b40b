"""
Notes Service - Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: method, path, status and duration, tagged with the request ID
    3. CORS: handles preflight for the browser client on another origin
"""
