"""TAF timeline reconstruction.

Turns a raw TAF record (time-bounded forecast segments) into a fixed number
of hourly slots starting at the current top of the hour, each with a flight
category and the raw values shown in tooltips.
"""

import logging
import re
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from airwx.core.classifier import UNLIMITED_CEILING_FT, UNLIMITED_VISIBILITY_SM, classify
from airwx.core.fields import (
    SEGMENT_LIST_FIELDS,
    STATION_ID_FIELDS,
    TAF_LIST_FIELDS,
    WIND_DIR_FIELDS,
    WIND_GUST_FIELDS,
    WIND_SPEED_FIELDS,
    ceiling_from_clouds,
    first_list,
    first_number,
    is_number,
    parse_visibility,
)
from airwx.core.staleness import parse_timestamp
from airwx.models.common import KNOWN_CATEGORIES, FlightCategory, iso_z, norm_id
from airwx.models.forecast import NO_TAF_MARKER, ForecastSegment, HourSlot, StationTimeline

logger = logging.getLogger(__name__)

DEFAULT_HOURS = 24
MIN_HOURS = 1
MAX_HOURS = 48

_LEADING_INT = re.compile(r"^\s*([-+]?\d+)")


def clamp_hours(raw: object, default: int = DEFAULT_HOURS) -> int:
    """Parse the leading integer of an hour count ("2.5" -> 2), falling back
    to the default, clamped to 1..48."""
    m = _LEADING_INT.match(str(raw)) if raw is not None else None
    hours = int(m.group(1)) if m else default
    return min(max(hours, MIN_HOURS), MAX_HOURS)


def top_of_hour(now: datetime | None = None) -> datetime:
    if now is None:
        now = datetime.now(UTC)
    return now.astimezone(UTC).replace(minute=0, second=0, microsecond=0)


def _epoch(value: object) -> int | None:
    if is_number(value):
        return int(value)
    if isinstance(value, str):
        ts = parse_timestamp(value)
        if ts is not None:
            return int(ts.timestamp())
    return None


def parse_segment(raw: object) -> ForecastSegment | None:
    """Parse one upstream forecast segment; None when its time bounds are unusable."""
    if not isinstance(raw, dict):
        return None
    time_from = _epoch(raw.get("timeFrom"))
    time_to = _epoch(raw.get("timeTo"))
    if time_from is None or time_to is None:
        return None
    hint = raw.get("flightCat")
    return ForecastSegment(
        time_from=time_from,
        time_to=time_to,
        visibility=parse_visibility(raw.get("visib")),
        ceiling=ceiling_from_clouds(raw.get("clouds") or []),
        wind_speed=first_number(raw, WIND_SPEED_FIELDS),
        wind_gust=first_number(raw, WIND_GUST_FIELDS),
        wind_dir=first_number(raw, WIND_DIR_FIELDS),
        category_hint=str(hint) if hint else None,
    )


def parse_segments(raw_segments: Iterable[object]) -> list[ForecastSegment]:
    segments = []
    for raw in raw_segments:
        seg = parse_segment(raw)
        if seg is None:
            logger.debug("Skipping forecast segment with bad time bounds: %r", raw)
            continue
        segments.append(seg)
    return segments


def segment_category(seg: ForecastSegment) -> FlightCategory:
    """Resolve a segment's category: explicit hint, then vis/ceiling with assumptions."""
    if seg.category_hint:
        hinted = FlightCategory.parse(seg.category_hint)
        if hinted in KNOWN_CATEGORIES:
            return hinted
    vis, ceil = seg.visibility, seg.ceiling
    if vis is not None and ceil is not None:
        return classify(vis, ceil)
    if vis is not None:
        return classify(vis, UNLIMITED_CEILING_FT)
    if ceil is not None:
        return classify(UNLIMITED_VISIBILITY_SM, ceil)
    return FlightCategory.UNK


def active_segment(
    segments: Iterable[ForecastSegment], instant: int
) -> ForecastSegment | None:
    """First segment whose [from, to) window contains the instant."""
    for seg in segments:
        if seg.covers(instant):
            return seg
    return None


def build_timeline(
    segments: list[ForecastSegment], hours: int, reference: datetime
) -> tuple[HourSlot, ...]:
    """Exactly `hours` slots from `reference` (a top of hour), in order."""
    hours = clamp_hours(hours)
    slots = []
    for i in range(hours):
        hour = reference + timedelta(hours=i)
        seg = active_segment(segments, int(hour.timestamp()))
        if seg is None:
            slots.append(HourSlot(hour_iso=iso_z(hour)))
            continue
        slots.append(
            HourSlot(
                hour_iso=iso_z(hour),
                category=segment_category(seg),
                visibility=seg.visibility,
                ceiling=seg.ceiling,
                wind_speed=seg.wind_speed,
                wind_gust=seg.wind_gust,
                wind_dir=seg.wind_dir,
            )
        )
    return tuple(slots)


def build_timelines(
    taf_json: object,
    wanted_ids: Iterable[str],
    hours: int,
    reference: datetime | None = None,
) -> list[StationTimeline]:
    """Build a timeline per TAF record, plus an empty marked entry for each
    requested id the upstream did not return."""
    reference = top_of_hour(reference)
    out: list[StationTimeline] = []

    for record in first_list(taf_json, TAF_LIST_FIELDS):
        if not isinstance(record, dict):
            continue
        icao = ""
        for name in STATION_ID_FIELDS:
            icao = norm_id(record.get(name))
            if icao:
                break
        segments = parse_segments(first_list(record, SEGMENT_LIST_FIELDS))
        out.append(
            StationTimeline(icao_id=icao, slots=build_timeline(segments, hours, reference))
        )

    got = {t.icao_id for t in out}
    for sid in wanted_ids:
        sid = norm_id(sid)
        if sid and sid not in got:
            out.append(StationTimeline(icao_id=sid, parse_error=NO_TAF_MARKER))
            got.add(sid)
    return out
