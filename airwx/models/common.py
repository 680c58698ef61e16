"""Common types and helpers shared across models."""

from datetime import UTC, datetime
from enum import StrEnum


class FlightCategory(StrEnum):
    VFR = "vfr"
    MVFR = "mvfr"
    IFR = "ifr"
    LIFR = "lifr"
    UNK = "unk"

    @classmethod
    def parse(cls, value: object) -> "FlightCategory":
        """Map a loosely-typed category string onto the enum, unknown -> UNK."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.UNK

    @property
    def is_instrument(self) -> bool:
        return self in (FlightCategory.IFR, FlightCategory.LIFR)


KNOWN_CATEGORIES = frozenset(
    {FlightCategory.VFR, FlightCategory.MVFR, FlightCategory.IFR, FlightCategory.LIFR}
)


def norm_id(value: object) -> str:
    """Normalize a station identifier: trimmed, uppercased, '' for None."""
    if value is None:
        return ""
    return str(value).strip().upper()


def utc_now() -> datetime:
    return datetime.now(UTC)


def iso_z(dt: datetime) -> str:
    """Render an aware datetime as an ISO UTC string with millisecond precision."""
    dt = dt.astimezone(UTC)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"
