"""Timezone-aware timestamps for stored rows."""

from datetime import UTC, datetime


def utcnow() -> datetime:
    """Current UTC time; the default for every ``created_at`` column."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp read back from SQLite."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)
