"""Helpers shared by the Supabase repositories."""

from datetime import datetime

from postgrest.exceptions import APIError

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: APIError) -> bool:
    """Return True when PostgREST reports a unique constraint violation."""
    return str(getattr(exc, "code", "")) == UNIQUE_VIOLATION


def parse_timestamp(raw: object) -> datetime | None:
    """Parse an ISO timestamp column, tolerating nulls."""
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp for insertion."""
    return value.isoformat() if value is not None else None
