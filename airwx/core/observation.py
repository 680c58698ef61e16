"""Current-observation resolution: METAR first, ASOS row as fallback.

Exactly one source backs a snapshot; fields are never mixed across
sources. Defaults for missing visibility/ceiling are applied once, at the
end, for both paths.
"""

from datetime import datetime

from airwx.core.classifier import UNLIMITED_CEILING_FT, UNLIMITED_VISIBILITY_SM, classify
from airwx.core.fields import (
    WIND_GUST_FIELDS,
    WIND_SPEED_FIELDS,
    ceiling_from_asos,
    ceiling_from_clouds,
    first_number,
    is_number,
    parse_visibility,
)
from airwx.core.staleness import minutes_since
from airwx.models.observation import ObservationSnapshot, ObservationSource


def resolve_observation(
    metar: dict | None,
    asos: dict | None,
    now: datetime | None = None,
) -> ObservationSnapshot:
    visibility: float | None = None
    ceiling: int | None = None
    wind = gust = None
    age = None

    if metar:
        source = ObservationSource.METAR
        visibility = parse_visibility(metar.get("visib"))
        if visibility is None:
            visibility = UNLIMITED_VISIBILITY_SM
        # No BKN/OVC/VV layer on a METAR means clear, which still counts as reported.
        ceiling = ceiling_from_clouds(metar.get("clouds") or [])
        if ceiling is None:
            ceiling = UNLIMITED_CEILING_FT
        wind = first_number(metar, WIND_SPEED_FIELDS)
        gust = first_number(metar, WIND_GUST_FIELDS)
        age = minutes_since(metar.get("obsTime"), now)
    elif asos:
        source = ObservationSource.ASOS
        vsby = asos.get("vsby")
        visibility = vsby if is_number(vsby) else None
        ceiling = ceiling_from_asos(asos)
        wind = first_number(asos, ("sped",))
        gust = first_number(asos, ("gust",))
        age = minutes_since(asos.get("validUtc"), now)
    else:
        source = ObservationSource.NONE

    has_obs = visibility is not None or ceiling is not None
    if visibility is None:
        visibility = UNLIMITED_VISIBILITY_SM
    if ceiling is None:
        ceiling = UNLIMITED_CEILING_FT

    return ObservationSnapshot(
        visibility=visibility,
        ceiling=ceiling,
        category=classify(visibility, ceiling),
        has_obs=has_obs,
        source=source,
        wind_speed=wind,
        wind_gust=gust,
        age_minutes=age,
    )
