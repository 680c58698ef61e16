"""Tests for TAF timeline reconstruction."""

from datetime import UTC, datetime, timedelta

import pytest

from airwx.core.timeline import (
    build_timeline,
    build_timelines,
    clamp_hours,
    parse_segment,
    parse_segments,
    segment_category,
    top_of_hour,
)
from airwx.models.common import FlightCategory
from airwx.models.forecast import NO_TAF_MARKER, ForecastSegment

REFERENCE = datetime(2026, 2, 10, 12, 0, tzinfo=UTC)
T0 = int(REFERENCE.timestamp())
HOUR = 3600


def _seg(start_hour: int, end_hour: int, **kwargs) -> ForecastSegment:
    return ForecastSegment(time_from=T0 + start_hour * HOUR, time_to=T0 + end_hour * HOUR, **kwargs)


class TestClampHours:
    def test_defaults_and_bounds(self):
        assert clamp_hours(None) == 24
        assert clamp_hours("12") == 12
        assert clamp_hours("0") == 1
        assert clamp_hours("100") == 48
        assert clamp_hours("abc") == 24
        assert clamp_hours("2.5") == 2
        assert clamp_hours(" 6h") == 6
        assert clamp_hours(12) == 12


class TestTopOfHour:
    def test_truncates(self):
        now = datetime(2026, 2, 10, 12, 47, 13, 500, tzinfo=UTC)
        assert top_of_hour(now) == REFERENCE


class TestSegmentCategory:
    def test_hint_wins(self):
        seg = _seg(0, 1, visibility=0.5, category_hint="VFR")
        assert segment_category(seg) == FlightCategory.VFR

    def test_unknown_hint_falls_through(self):
        seg = _seg(0, 1, visibility=2, ceiling=5000, category_hint="???")
        assert segment_category(seg) == FlightCategory.IFR

    def test_visibility_only_assumes_unlimited_ceiling(self):
        assert segment_category(_seg(0, 1, visibility=0.5)) == FlightCategory.LIFR
        assert segment_category(_seg(0, 1, visibility=6)) == FlightCategory.VFR

    def test_ceiling_only_assumes_unlimited_visibility(self):
        assert segment_category(_seg(0, 1, ceiling=800)) == FlightCategory.IFR

    def test_nothing_is_unknown(self):
        assert segment_category(_seg(0, 1)) == FlightCategory.UNK


class TestBuildTimeline:
    @pytest.mark.parametrize("hours", [1, 2, 24, 47, 48])
    def test_exact_length_without_segments(self, hours):
        slots = build_timeline([], hours, REFERENCE)
        assert len(slots) == hours
        assert all(s.category == FlightCategory.UNK for s in slots)
        assert all(s.visibility is None and s.wind_speed is None for s in slots)

    def test_exact_length_with_sparse_segments(self):
        slots = build_timeline([_seg(5, 6, visibility=6)], 24, REFERENCE)
        assert len(slots) == 24
        assert slots[5].category == FlightCategory.VFR
        assert slots[4].category == FlightCategory.UNK

    def test_hour_stamps(self):
        slots = build_timeline([], 3, REFERENCE)
        assert [s.hour_iso for s in slots] == [
            "2026-02-10T12:00:00.000Z",
            "2026-02-10T13:00:00.000Z",
            "2026-02-10T14:00:00.000Z",
        ]

    def test_half_open_interval(self):
        segments = [_seg(0, 2, visibility=2), _seg(2, 4, visibility=6)]
        slots = build_timeline(segments, 4, REFERENCE)
        assert [s.category for s in slots] == [
            FlightCategory.IFR,
            FlightCategory.IFR,
            FlightCategory.VFR,
            FlightCategory.VFR,
        ]

    def test_overlap_takes_first_match(self):
        segments = [_seg(0, 3, visibility=6), _seg(1, 3, visibility=0.5)]
        slots = build_timeline(segments, 3, REFERENCE)
        assert all(s.category == FlightCategory.VFR for s in slots)

    def test_hour_three_low_visibility(self):
        segments = [_seg(0, 3, visibility=6), _seg(3, 4, visibility=0.5)]
        slots = build_timeline(segments, 6, REFERENCE)
        assert slots[3].category == FlightCategory.LIFR
        assert slots[3].ceiling is None
        assert slots[3].hour_iso == "2026-02-10T15:00:00.000Z"

    def test_raw_fields_kept_when_unknown(self):
        seg = _seg(0, 1, wind_speed=12, wind_gust=20, wind_dir=240)
        slot = build_timeline([seg], 1, REFERENCE)[0]
        assert slot.category == FlightCategory.UNK
        assert (slot.wind_speed, slot.wind_gust, slot.wind_dir) == (12, 20, 240)

    def test_idempotent(self):
        segments = [_seg(0, 5, visibility=2, ceiling=700), _seg(5, 30, visibility=6)]
        first = build_timeline(segments, 24, REFERENCE)
        second = build_timeline(segments, 24, REFERENCE)
        assert first == second
        assert [s.to_dict() for s in first] == [s.to_dict() for s in second]


class TestParseSegment:
    def test_awc_shape(self):
        seg = parse_segment({
            "timeFrom": T0, "timeTo": T0 + HOUR, "visib": "6+",
            "clouds": [{"cover": "BKN", "base": 2500}],
            "wdir": 240, "wspd": 12, "wgst": 22, "flightCat": "MVFR",
        })
        assert seg.visibility == 6.0
        assert seg.ceiling == 2500
        assert seg.wind_gust == 22
        assert seg.category_hint == "MVFR"

    def test_iso_bounds_accepted(self):
        seg = parse_segment({"timeFrom": "2026-02-10T12:00:00Z", "timeTo": T0 + HOUR})
        assert seg.time_from == T0

    def test_bad_bounds_skipped(self):
        assert parse_segment({"timeFrom": "bad", "timeTo": T0}) is None
        assert parse_segment({"timeTo": T0}) is None
        assert parse_segments([{"timeFrom": None, "timeTo": T0}, "x"]) == []


class TestBuildTimelines:
    def test_fixture(self, taf_sample):
        out = build_timelines(taf_sample, ["KWRI", "KACY", "KTTN"], 24, REFERENCE)
        by_id = {t.icao_id: t for t in out}

        wri = by_id["KWRI"].slots
        assert len(wri) == 24
        assert wri[0].category == FlightCategory.VFR
        assert wri[2].category == FlightCategory.IFR
        assert wri[2].wind_gust == 22
        assert wri[4].category == FlightCategory.MVFR
        assert wri[23].category == FlightCategory.MVFR

        assert all(s.category == FlightCategory.VFR for s in by_id["KACY"].slots)

        ttn = by_id["KTTN"].slots
        assert ttn[0].category == FlightCategory.LIFR
        # the malformed segment is dropped, so later hours have no forecast
        assert ttn[3].category == FlightCategory.UNK

    def test_missing_ids_get_marked_empty_entry(self, taf_sample):
        out = build_timelines(taf_sample, ["kwri", "KPHL"], 24, REFERENCE)
        phl = [t for t in out if t.icao_id == "KPHL"]
        assert len(phl) == 1
        assert phl[0].slots == ()
        assert phl[0].parse_error == NO_TAF_MARKER
        assert phl[0].to_dict() == {
            "icaoId": "KPHL", "timeline": [], "parseError": NO_TAF_MARKER,
        }

    def test_wrapped_array_and_aliases(self):
        raw = {"data": [{"stationId": "kacy", "forecasts": [
            {"timeFrom": T0, "timeTo": T0 + 2 * HOUR, "visib": 4}
        ]}]}
        out = build_timelines(raw, ["KACY"], 2, REFERENCE)
        assert len(out) == 1
        assert out[0].icao_id == "KACY"
        assert out[0].slots[1].category == FlightCategory.MVFR

    def test_reference_truncated_to_hour(self, taf_sample):
        late = REFERENCE + timedelta(minutes=59)
        out = build_timelines(taf_sample, [], 1, late)
        assert out[0].slots[0].hour_iso == "2026-02-10T12:00:00.000Z"

    def test_unrecognized_body(self):
        assert build_timelines({"unexpected": True}, ["KWRI"], 3, REFERENCE)[0].parse_error
