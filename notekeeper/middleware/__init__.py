# Middleware package init
"""
Notekeeper Backend: Middleware Package
=======================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assigns the correlation id used by everything below
    2. Logging: one access line per request, tagged with the request id
    3. CORS: FastAPI's CORSMiddleware, answers preflight for the single
       configured origin
"""
