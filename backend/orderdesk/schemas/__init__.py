"""
OrderDesk Backend: Pydantic Request/Response Schemas
======================================================

Schemas are kept separate from the SQLAlchemy models so the API contract
controls exactly what is exposed. In particular the account password hash is
a model column but never a response field.
"""
