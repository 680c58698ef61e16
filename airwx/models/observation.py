"""Current-observation snapshot model."""

from dataclasses import dataclass
from enum import StrEnum

from airwx.models.common import FlightCategory


class ObservationSource(StrEnum):
    METAR = "metar"
    ASOS = "asos"
    NONE = "none"


@dataclass(frozen=True)
class ObservationSnapshot:
    visibility: float  # statute miles, 10 when not reported
    ceiling: int  # feet, 10000 when no ceiling layer
    category: FlightCategory
    has_obs: bool
    source: ObservationSource
    wind_speed: float | None = None
    wind_gust: float | None = None
    age_minutes: int | None = None
