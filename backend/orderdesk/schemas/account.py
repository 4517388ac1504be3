"""
OrderDesk Backend: Account & Authentication Schemas
=====================================================

What:  Request bodies for register/login/create/update and the public account
       representation.

The plaintext password only ever appears in request models. AccountResponse
has no password field at all, so it cannot be serialized by accident.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class AccountCreate(BaseModel):
    """
    Body for POST /register and POST /account.

    Client-supplied `id` or `created_at` fields are ignored (pydantic drops
    unknown fields); both are assigned server-side.
    """
    name: str = Field(default="", description="Display name")
    phone: str = Field(default="", description="Contact phone number")
    username: str = Field(description="Unique login name")
    password: str = Field(description="Plaintext password (max 72 bytes UTF-8)")


# Registration and authenticated creation accept the same payload
RegisterRequest = AccountCreate


class AccountUpdate(BaseModel):
    """
    Body for PUT /account/{id}: a full replace of the mutable fields.

    The username is not mutable. The password is always rehashed.
    """
    name: str = Field(default="", description="Display name")
    phone: str = Field(default="", description="Contact phone number")
    password: str = Field(description="New plaintext password")


class LoginRequest(BaseModel):
    """Body for POST /login."""
    username: str
    password: str


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class AccountResponse(BaseModel):
    """Public representation of an account. Never includes the password hash."""
    id: int = Field(description="Account identifier")
    name: str
    phone: str
    username: str
    created_at: datetime = Field(description="When the account was created (UTC)")

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    """Returned by POST /login: the account's public fields plus a signed token."""
    id: int
    name: str
    username: str
    phone: str
    token: str = Field(description="Signed bearer token; send it in the auth header")
