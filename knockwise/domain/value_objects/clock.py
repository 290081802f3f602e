"""Clock helpers — all domain timestamps are timezone-aware UTC."""

from collections.abc import Callable
from datetime import UTC, datetime

NowFn = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    """Treat naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
