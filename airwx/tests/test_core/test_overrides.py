"""Tests for TAF override routing."""

from airwx.core.overrides import forecast_ids, resolve_timeline
from airwx.models.common import FlightCategory
from airwx.models.forecast import HourSlot

OVERRIDES = {"KMJX": "KWRI", "KSMQ": "KTTN"}


def _timeline(cat: FlightCategory, n: int = 3) -> tuple[HourSlot, ...]:
    return tuple(HourSlot(hour_iso=f"h{i}", category=cat) for i in range(n))


class TestResolveTimeline:
    def test_override_target_used(self):
        timelines = {
            "KWRI": _timeline(FlightCategory.IFR),
            "KMJX": _timeline(FlightCategory.VFR),
        }
        assert resolve_timeline("KMJX", timelines, OVERRIDES) == timelines["KWRI"]

    def test_empty_target_falls_back_to_own(self):
        timelines = {"KWRI": (), "KMJX": _timeline(FlightCategory.VFR)}
        assert resolve_timeline("kmjx", timelines, OVERRIDES) == timelines["KMJX"]

    def test_missing_target_falls_back_to_own(self):
        timelines = {"KMJX": _timeline(FlightCategory.MVFR)}
        assert resolve_timeline("KMJX", timelines, OVERRIDES) == timelines["KMJX"]

    def test_neither_is_empty(self):
        assert resolve_timeline("KMJX", {}, OVERRIDES) == ()
        assert resolve_timeline("KMJX", {"KWRI": (), "KMJX": ()}, OVERRIDES) == ()

    def test_no_override_never_borrows(self):
        timelines = {"KACY": (), "KWRI": _timeline(FlightCategory.IFR)}
        assert resolve_timeline("KACY", timelines, OVERRIDES) == ()
        assert resolve_timeline("KPHL", timelines, OVERRIDES) == ()

    def test_overrides_are_one_directional(self):
        timelines = {"KWRI": (), "KMJX": _timeline(FlightCategory.IFR)}
        assert resolve_timeline("KWRI", timelines, OVERRIDES) == ()


class TestForecastIds:
    def test_includes_override_targets_once(self):
        ids = forecast_ids(["kmjx", "KWRI", "KACY"], OVERRIDES)
        assert ids == ["KMJX", "KWRI", "KACY", "KTTN"]
