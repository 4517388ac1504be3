"""
OrderDesk Backend: Custom Exception Hierarchy
===============================================

What:  Defines application-specific exceptions for the API's failure modes.
How:   Each exception class carries a message and an optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return `{"error": <message>, "request_id": <id>}` with the mapped
       HTTP status code.
Who:   Raised by services, dependencies and route helpers.

Exception Hierarchy:
    OrderDeskError (base)
    ├── ValidationError     → 400 Bad Request (malformed id/page/limit/body)
    ├── NotFoundError       → 404 Not Found
    ├── UnauthorizedError   → 403 Forbidden (bad credential or token)
    ├── PersistenceError    → 400 Bad Request (store failure, constraint violation)
    └── HashingError        → 400 Bad Request (password exceeds bcrypt limit)

The message is always safe to return to the client. Anything that could leak
internals (SQL, constraint names, exception types) goes into `context`, which
is logged server-side only.
"""

from typing import Any, Dict, Optional


class OrderDeskError(Exception):
    """
    Base exception for all OrderDesk application errors.

    Attributes:
        message:  User-facing error description (returned in the API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(OrderDeskError):
    """
    Raised when client input fails validation.

    When:    Non-integer id path segment, non-integer page/limit query values,
             malformed request body, order pointing at a missing customer.
    HTTP:    400 Bad Request

    Example response:
        {"error": "Invalid ID given abc", "request_id": "1f0c2a9e"}
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(OrderDeskError):
    """
    Raised when a requested resource does not exist.

    When:    GET /customer/{id} with an unknown id, login with an unknown
             username, or an UPDATE/DELETE that affected zero rows.
    HTTP:    404 Not Found

    SQLAlchemy returns None (or rowcount 0) for misses rather than raising;
    the service layer converts that into this exception.
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        key: str = "id",
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with {key} [{resource_id}] not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class UnauthorizedError(OrderDeskError):
    """
    Raised when a credential or bearer token is rejected.

    When:    Password mismatch at login; missing, malformed, expired or
             wrongly-signed token at the auth gate.
    HTTP:    403 Forbidden

    The gate always uses the fixed message "Permission denied" so clients
    cannot distinguish a forged token from an expired one. The concrete
    reason is kept in context for the server log.
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Permission denied",
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(message=message, context=ctx)
        self.reason = reason


class PersistenceError(OrderDeskError):
    """
    Raised when a database operation fails.

    When:    Constraint violation (duplicate username), lost connection,
             any other SQLAlchemyError during a query.
    HTTP:    400 Bad Request

    The message is generic or names the violated business rule; the underlying
    exception type is logged with the context dict only.
    """

    status_code = 400

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class HashingError(OrderDeskError):
    """
    Raised when a password cannot be hashed.

    When:    The UTF-8 encoded password is longer than bcrypt's 72-byte input
             limit. The password is rejected instead of silently truncated.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Password could not be hashed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
