"""Station model and list normalization."""

from collections.abc import Iterable
from dataclasses import dataclass

from airwx.models.common import norm_id

MIN_STATION_ID_LENGTH = 3


@dataclass(frozen=True)
class Station:
    id: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name}


def normalize_station(raw: object) -> Station | None:
    """Build a Station from a loose {id, name} mapping.

    Returns None when the id is shorter than three characters after
    trimming and upper-casing.
    """
    if isinstance(raw, Station):
        raw = raw.to_dict()
    if not isinstance(raw, dict):
        return None
    sid = norm_id(raw.get("id"))
    if len(sid) < MIN_STATION_ID_LENGTH:
        return None
    name = raw.get("name")
    name = str(name).strip() if name else ""
    return Station(id=sid, name=name or sid)


def normalize_stations(raw: Iterable[object]) -> list[Station]:
    """Normalize a station list, dropping invalid entries and duplicate ids."""
    seen: set[str] = set()
    out: list[Station] = []
    for item in raw:
        st = normalize_station(item)
        if st is None or st.id in seen:
            continue
        seen.add(st.id)
        out.append(st)
    return out


def to_asos_id(icao: str) -> str:
    """IEM ASOS ids drop the leading K of four-letter US ICAO codes."""
    sid = norm_id(icao)
    if sid.startswith("K") and len(sid) == 4:
        return sid[1:]
    return sid
