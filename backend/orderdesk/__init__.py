"""
OrderDesk Backend: Application Package
========================================

A small order-management REST service: accounts that log in with a password,
customers, and orders placed by customers, each with paginated search.

Layers:

    ┌─────────────────────────────────────┐
    │   Routes + auth gate (API layer)    │  ← HTTP concerns, token check
    ├─────────────────────────────────────┤
    │        Services (business rules)    │  ← pagination, hashing, NotFound
    ├─────────────────────────────────────┤
    │     Models & Schemas (data shapes)  │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │      Database (async sessions)      │  ← one session per request
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
