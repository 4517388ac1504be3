"""
OrderDesk Backend: Pagination & Search Contract
=================================================

What:  The rules shared by the three list endpoints: how page/limit are
       defaulted, how offsets and page counts are computed, and how a search
       term becomes a case-insensitive substring pattern.
Who:   Built by the `page_request` dependency from query parameters and
       consumed by ResourceService.search().

Rules:
    page  absent, 0 or negative  → 1
    limit absent, 0 or negative  → 10
    non-integer page/limit       → ValidationError (400)
    offset      = (page - 1) * limit
    total pages = count // limit, plus one if there is a remainder
"""

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from orderdesk.exceptions import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# Escape character used in LIKE patterns built by search_pattern()
LIKE_ESCAPE = "\\"

# Range of the INTEGER columns and of every integer the API accepts
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


class PageRequest(BaseModel):
    """
    A normalized list request: search term plus effective page and limit.

    Non-positive values are replaced by the defaults during validation, so
    every PageRequest instance satisfies page >= 1 and limit >= 1.
    """

    search: str = Field(default="", description="Case-insensitive substring filter")
    page: int = Field(default=DEFAULT_PAGE, le=INT32_MAX, description="1-based page number")
    limit: int = Field(default=DEFAULT_LIMIT, le=INT32_MAX, description="Items per page")

    @field_validator("page")
    @classmethod
    def default_page(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_PAGE

    @field_validator("limit")
    @classmethod
    def default_limit(cls, v: int) -> int:
        return v if v > 0 else DEFAULT_LIMIT

    @property
    def offset(self) -> int:
        """Rows to skip before the requested page."""
        return (self.page - 1) * self.limit

    @classmethod
    def from_query(
        cls,
        search: Optional[str] = None,
        page: Optional[str] = None,
        limit: Optional[str] = None,
    ) -> "PageRequest":
        """
        Build a PageRequest from raw query-string values.

        Raises:
            ValidationError: page or limit is present but not an integer.
        """
        return cls(
            search=search or "",
            page=parse_int_param("page", page, DEFAULT_PAGE),
            limit=parse_int_param("limit", limit, DEFAULT_LIMIT),
        )


def to_int32(raw: str) -> int:
    """
    Parse a plain ASCII base-10 integer that fits an INTEGER column.

    Digit separators ("1_000") and non-ASCII digits are refused, unlike int().

    Raises:
        ValueError: not an integer, or outside INT32_MIN..INT32_MAX
    """
    text = raw.strip()
    if not _INTEGER_RE.fullmatch(text):
        raise ValueError(f"not a base-10 integer: {raw!r}")
    value = int(text)
    if not INT32_MIN <= value <= INT32_MAX:
        raise ValueError(f"integer out of range: {raw!r}")
    return value


def parse_int_param(name: str, raw: Optional[str], default: int) -> int:
    """
    Parse an optional integer query parameter.

    An absent or blank value yields `default`; anything that is not a base-10
    integer raises ValidationError naming the parameter.
    Values outside the 32-bit range are rejected the same way, so page and
    limit (and therefore the offset, at most 2**62) always bind safely.
    """
    if raw is None or raw.strip() == "":
        return default
    try:
        return to_int32(raw)
    except ValueError:
        raise ValidationError(
            message=f"Invalid {name} given {raw}",
            field=name,
        )


def total_pages(count: int, limit: int) -> int:
    """
    Number of pages needed to show `count` rows, `limit` per page.

    Equivalent to ceil(count / limit) using integer arithmetic only; 0 rows
    means 0 pages.

        >>> total_pages(0, 10), total_pages(10, 10), total_pages(11, 10)
        (0, 1, 2)
    """
    if limit <= 0:
        raise ValueError("limit must be positive")
    pages = count // limit
    if count % limit != 0:
        pages += 1
    return pages


def search_pattern(term: str) -> str:
    """
    Wrap a search term as a LIKE/ILIKE substring pattern.

    LIKE metacharacters in the term (`%`, `_` and the escape character
    itself) are escaped so they only match literally; use the pattern with
    `escape=LIKE_ESCAPE`.

        >>> search_pattern("50%_off")
        '%50\\\\%\\\\_off%'
    """
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"
