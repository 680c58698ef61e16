"""Display-name enrichment for stations still named by their bare id."""

import re
from collections.abc import Mapping

from airwx.config.defaults import AIRPORT_NAMES
from airwx.core.fields import STATION_NAME_FIELDS, first_text
from airwx.models.common import norm_id
from airwx.models.station import Station

_SUFFIXES = (
    re.compile(r",\s*[A-Z]{2}\s*$"),
    re.compile(r",\s*United States\s*$", re.IGNORECASE),
    re.compile(r",\s*USA\s*$", re.IGNORECASE),
    re.compile(r",\s*US\s*$", re.IGNORECASE),
)


def clean_airport_name(name: str) -> str:
    """Strip trailing state / country suffixes ("Trenton, NJ, US" -> "Trenton")."""
    prev = None
    while prev != name:
        prev = name
        for pattern in _SUFFIXES:
            name = pattern.sub("", name)
    return name.strip()


def enrich_names(
    stations: list[Station],
    metars: Mapping[str, dict],
    lookup: Mapping[str, str] = AIRPORT_NAMES,
) -> tuple[list[Station], bool]:
    """Replace id-only names from METAR data or the lookup table.

    Names the user chose are left alone. Returns the new list and whether
    anything changed.
    """
    changed = False
    out = []
    for st in stations:
        sid = norm_id(st.id)
        if norm_id(st.name) != sid:
            out.append(st)
            continue
        found = first_text(metars.get(sid), STATION_NAME_FIELDS) or lookup.get(sid)
        cleaned = clean_airport_name(found) if found else ""
        if cleaned and cleaned != st.name:
            out.append(Station(id=st.id, name=cleaned))
            changed = True
        else:
            out.append(st)
    return out, changed
