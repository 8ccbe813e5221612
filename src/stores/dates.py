"""Service date parsing for store lookups."""
from __future__ import annotations

from datetime import date, datetime

SERVICE_DATE_FORMAT = "%Y-%m-%d"


class InvalidDateError(ValueError):
    """Raised when a service date token cannot be parsed."""


def parse_service_date(token: str) -> date:
    """Parse a ``YYYY-MM-DD`` service date token."""
    try:
        return datetime.strptime(token, SERVICE_DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"invalid service date {token!r}, expected YYYY-MM-DD") from exc
