# Middleware package init
"""
OrderDesk Backend: Middleware Package
=======================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    1. Request ID first: every later log line can carry the correlation id
    2. Logging: one access line per request with status and duration
    3. GZip and CORS: added by FastAPI's built-in middleware

Authentication is NOT middleware. It is the `require_token` dependency
attached to the resource routers, so /login, /register and /health stay
open without a path allow-list.
"""
