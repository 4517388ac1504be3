"""
OrderDesk Backend: Shared Response Schemas
============================================

What:  Envelopes shared by every resource: the paginated list wrapper, the
       error body and the health check body.
"""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """
    What:  Wrapper returned by every list endpoint.
    Who:   GET /account, GET /customer, GET /order.

    Example:
        {"data": [...], "page": 2, "limit": 10, "count": 37, "total": 4}

    `page` and `limit` echo the effective values after defaulting, so a
    request without query parameters reports page=1, limit=10.
    """
    data: List[T] = Field(description="Items on the requested page")
    page: int = Field(description="Page number (1-based)")
    limit: int = Field(description="Maximum items per page")
    count: int = Field(description="Number of rows matching the search, before pagination")
    total: int = Field(description="Total number of pages: ceil(count / limit)")


class ErrorResponse(BaseModel):
    """
    What:  Error body for every failure.

    Example:
        {"error": "Permission denied", "request_id": "9b1f03aa"}
    """
    error: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
