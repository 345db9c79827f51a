"""Time helpers. Services receive a clock callable so tests can pin "now"."""
from datetime import UTC, datetime
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(UTC)


def to_naive_utc(value: datetime) -> datetime:
    """Convert to a naive UTC datetime, the form stored in the database."""
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value


def day_start(value: datetime) -> datetime:
    """Start of the UTC day containing ``value`` (naive)."""
    return to_naive_utc(value).replace(hour=0, minute=0, second=0, microsecond=0)


def naive_utc_now() -> datetime:
    """Column default: current UTC time without tzinfo."""
    return to_naive_utc(utc_now())
