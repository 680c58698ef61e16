"""TAF override routing between airports that share a forecast source."""

from collections.abc import Mapping

from airwx.models.common import norm_id
from airwx.models.forecast import HourSlot

Timeline = tuple[HourSlot, ...]


def forecast_ids(station_ids: list[str], overrides: Mapping[str, str]) -> list[str]:
    """Station ids plus every override target, deduplicated in first-seen order."""
    ids = dict.fromkeys(norm_id(s) for s in station_ids)
    for target in overrides.values():
        ids.setdefault(norm_id(target))
    return [i for i in ids if i]


def resolve_timeline(
    station_id: str,
    timelines: Mapping[str, Timeline],
    overrides: Mapping[str, str],
) -> Timeline:
    """Pick the timeline a station should display.

    With an override: the target's timeline if non-empty, else the station's
    own if non-empty, else empty. Without one: always the station's own.
    """
    sid = norm_id(station_id)
    target = overrides.get(sid)
    if target:
        borrowed = timelines.get(norm_id(target))
        if borrowed:
            return borrowed
        return timelines.get(sid) or ()
    return timelines.get(sid, ())
