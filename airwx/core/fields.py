"""Field normalization at the ingestion boundary.

Upstream records name the same concept in several ways (wind speed may be
``wspd`` or ``wspdKt``, the station id may be ``icaoId`` or ``stationId``).
Each concept gets an ordered tuple of candidate names; the first usable
value wins.
"""

import math
import re

STATION_ID_FIELDS = ("icaoId", "stationId", "station", "id")
STATION_NAME_FIELDS = ("name", "stationName", "site", "airport", "facilityName")
WIND_SPEED_FIELDS = ("wspd", "wspdKt")
WIND_GUST_FIELDS = ("wgst", "wgstKt")
WIND_DIR_FIELDS = ("wdir",)
TAF_LIST_FIELDS = ("data", "tafs", "items")
SEGMENT_LIST_FIELDS = ("fcsts", "forecasts")

CEILING_COVERS = frozenset({"BKN", "OVC", "VV"})

_LEADING_NUMBER = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")


def is_number(value: object) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def first_number(record: dict | None, fields: tuple[str, ...]) -> float | None:
    if not record:
        return None
    for name in fields:
        value = record.get(name)
        if is_number(value):
            return value
    return None


def first_text(record: dict | None, fields: tuple[str, ...]) -> str | None:
    if not record:
        return None
    for name in fields:
        value = record.get(name)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def first_list(record: object, fields: tuple[str, ...]) -> list:
    if isinstance(record, list):
        return record
    if isinstance(record, dict):
        for name in fields:
            value = record.get(name)
            if isinstance(value, list):
                return value
    return []


def parse_visibility(value: object) -> float | None:
    """Parse a visibility value in statute miles.

    Numbers pass through; strings lose a "+" marker ("10+" -> 10) and are
    read up to the first non-numeric character. Returns None if unusable.
    """
    if is_number(value):
        return value
    if not isinstance(value, str):
        return None
    m = _LEADING_NUMBER.match(value.replace("+", ""))
    if m is None:
        return None
    parsed = float(m.group(1))
    return parsed if math.isfinite(parsed) else None


def ceiling_from_clouds(clouds: object) -> int | None:
    """Lowest base among BKN/OVC/VV layers of a METAR/TAF cloud list."""
    if not isinstance(clouds, list):
        return None
    bases = [
        layer.get("base")
        for layer in clouds
        if isinstance(layer, dict) and layer.get("cover") in CEILING_COVERS
    ]
    bases = [b for b in bases if is_number(b)]
    return min(bases) if bases else None


def ceiling_from_asos(row: dict | None) -> int | None:
    """Lowest base among the four skycN/skylN pairs of an ASOS row.

    Cover codes compare case-insensitively; zero or missing bases are ignored.
    """
    if not row:
        return None
    bases = []
    for n in range(1, 5):
        cover = str(row.get(f"skyc{n}") or "").strip().upper()
        base = row.get(f"skyl{n}")
        if cover in CEILING_COVERS and is_number(base) and base > 0:
            bases.append(base)
    return min(bases) if bases else None
