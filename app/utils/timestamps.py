from datetime import datetime, timezone


def format_timestamp(value: datetime) -> str:
    """Render ``value`` in UTC with fixed microsecond precision.

    ``createdAt`` is stored as text and sorted as text, so every writer must
    produce this exact shape.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utc_now() -> str:
    return format_timestamp(datetime.now(timezone.utc))


def normalize_timestamp(value: str) -> str:
    """Parse an ISO-8601 or ``YYYY-MM-DD HH:MM:SS`` string; naive values are UTC."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return format_timestamp(datetime.fromisoformat(value))
