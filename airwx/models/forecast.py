"""TAF forecast segment and hourly timeline models."""

from dataclasses import dataclass

from airwx.models.common import FlightCategory, norm_id

NO_TAF_MARKER = "No TAF returned"


@dataclass(frozen=True)
class ForecastSegment:
    time_from: int  # unix seconds, inclusive
    time_to: int  # unix seconds, exclusive
    visibility: float | None = None
    ceiling: int | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    wind_dir: float | None = None
    category_hint: str | None = None

    def covers(self, instant: int) -> bool:
        return self.time_from <= instant < self.time_to


@dataclass(frozen=True)
class HourSlot:
    hour_iso: str
    category: FlightCategory = FlightCategory.UNK
    visibility: float | None = None
    ceiling: int | None = None
    wind_speed: float | None = None
    wind_gust: float | None = None
    wind_dir: float | None = None

    def to_dict(self) -> dict:
        return {
            "hourIso": self.hour_iso,
            "cat": self.category.value,
            "vis": self.visibility,
            "ceil": self.ceiling,
            "windSpeed": self.wind_speed,
            "windGust": self.wind_gust,
            "windDir": self.wind_dir,
        }

    @classmethod
    def from_dict(cls, raw: dict) -> "HourSlot":
        return cls(
            hour_iso=str(raw.get("hourIso", "")),
            category=FlightCategory.parse(raw.get("cat") or "unk"),
            visibility=raw.get("vis"),
            ceiling=raw.get("ceil"),
            wind_speed=raw.get("windSpeed"),
            wind_gust=raw.get("windGust"),
            wind_dir=raw.get("windDir"),
        )


@dataclass(frozen=True)
class StationTimeline:
    icao_id: str
    slots: tuple[HourSlot, ...] = ()
    parse_error: str | None = None

    def to_dict(self) -> dict:
        out: dict = {
            "icaoId": self.icao_id,
            "timeline": [s.to_dict() for s in self.slots],
        }
        if self.parse_error:
            out["parseError"] = self.parse_error
        return out

    @classmethod
    def from_dict(cls, raw: dict) -> "StationTimeline":
        icao = norm_id(raw.get("icaoId") or raw.get("stationId") or raw.get("station"))
        timeline = raw.get("timeline")
        slots: list[HourSlot] = []
        if isinstance(timeline, list):
            slots = [HourSlot.from_dict(h) for h in timeline if isinstance(h, dict)]
        return cls(icao_id=icao, slots=tuple(slots), parse_error=raw.get("parseError"))
