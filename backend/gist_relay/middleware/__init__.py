# Middleware package init
"""
Gist Relay — Middleware Package
================================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID: Generate correlation ID for logging and tracing
    2. Logging: Log request details with the generated request ID
    3. GZip: Compresses responses of 500 bytes or more
    4. CORS: Applied by FastAPI's CORSMiddleware (handles preflight)
"""
