"""Timestamp parsing, observation age and payload staleness checks."""

import math
from datetime import UTC, datetime

from airwx.core.fields import is_number


def parse_timestamp(value: object) -> datetime | None:
    """Parse an ISO string or unix-seconds number into an aware UTC datetime."""
    if is_number(value):
        try:
            return datetime.fromtimestamp(value, UTC)
        except (OverflowError, OSError, ValueError):
            return None
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        dt = datetime.fromisoformat(value.strip())
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt


def minutes_since(value: object, now: datetime | None = None) -> int | None:
    """Whole minutes elapsed since a timestamp, None if it can't be parsed."""
    if now is None:
        now = datetime.now(UTC)
    ts = parse_timestamp(value)
    if ts is None:
        return None
    return math.floor((now - ts).total_seconds() / 60)


def is_payload_stale(saved_at_ms: object, ttl_seconds: int, now_ms: float) -> bool:
    """A cached payload is fresh while now - savedAt <= TTL."""
    if not is_number(saved_at_ms):
        return True
    return (now_ms - saved_at_ms) > ttl_seconds * 1000
