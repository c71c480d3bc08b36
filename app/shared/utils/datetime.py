"""UTC datetime helpers. All datetimes in the system are timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current time as an aware UTC datetime (never naive local time)."""
    return datetime.now(UTC)
