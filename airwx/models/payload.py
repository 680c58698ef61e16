"""Assembled payload, alert and per-airport display record models."""

from dataclasses import dataclass, field
from enum import StrEnum

from airwx.models.common import FlightCategory
from airwx.models.forecast import HourSlot
from airwx.models.observation import ObservationSnapshot
from airwx.models.station import Station


@dataclass(frozen=True)
class Payload:
    fetched_at: str
    metars: tuple[dict, ...] = ()
    taf_data: tuple[dict, ...] = ()
    asos_rows: tuple[dict, ...] = ()

    def to_dict(self) -> dict:
        return {
            "fetchedAt": self.fetched_at,
            "metars": list(self.metars),
            "tafData": list(self.taf_data),
            "asosRows": list(self.asos_rows),
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "Payload":
        """Rebuild a payload; raises ValueError when the shape is wrong."""
        if not isinstance(raw, dict) or "fetchedAt" not in raw:
            raise ValueError("payload missing fetchedAt")

        def _records(key: str) -> tuple[dict, ...]:
            value = raw.get(key) or []
            if not isinstance(value, list):
                raise ValueError(f"payload field {key} is not a list")
            return tuple(r for r in value if isinstance(r, dict))

        return cls(
            fetched_at=str(raw["fetchedAt"]),
            metars=_records("metars"),
            taf_data=_records("tafData"),
            asos_rows=_records("asosRows"),
        )


class AlertType(StrEnum):
    NOW = "now"
    FORECAST = "forecast"


@dataclass(frozen=True)
class Alert:
    type: AlertType
    station_name: str
    category: FlightCategory
    hour_iso: str | None = None


@dataclass(frozen=True)
class AirportView:
    station: Station
    observation: ObservationSnapshot
    timeline: tuple[HourSlot, ...]
    alerts: tuple[Alert, ...] = field(default_factory=tuple)

    @property
    def category(self) -> FlightCategory:
        return self.observation.category

    @property
    def has_taf(self) -> bool:
        return len(self.timeline) > 0
