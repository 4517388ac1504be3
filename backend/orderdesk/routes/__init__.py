# Routes package init
"""
OrderDesk Backend: API Routes Package
=======================================

Route Inventory:
    - auth.py:       POST /login, POST /register                (no token)
    - accounts.py:   GET|POST /account, GET|PUT|DELETE /account/{id}
    - customers.py:  GET|POST /customer, GET|PUT|DELETE /customer/{id}
    - orders.py:     GET|POST /order, GET|PUT|DELETE /order/{id}
    - health.py:     GET /health                                (no token)

Routes are thin: parse the request, call one service method, shape the
response. The resource routers carry the auth gate as a router-level
dependency, so no handler can forget it.
"""
