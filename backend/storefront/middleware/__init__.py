# Middleware package init
"""
Storefront Gateway: Middleware Package
========================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [Origin Policy] → [CORS] → Route Handler

    1. Request ID first so every later log line and error body can carry it
    2. Logging wraps everything below it, including origin rejections
    3. Origin Policy rejects disallowed origins before any route logic runs
    4. CORS (Starlette's CORSMiddleware) adds headers and answers preflights
"""
