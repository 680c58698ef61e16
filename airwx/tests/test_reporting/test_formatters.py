"""Tests for text and JSON dashboard formatting."""

import json
from datetime import timedelta, timezone

import pytest

from airwx.models.common import FlightCategory
from airwx.models.forecast import HourSlot
from airwx.models.observation import ObservationSnapshot, ObservationSource
from airwx.models.payload import AirportView, Alert, AlertType
from airwx.models.station import Station
from airwx.reporting.card_state import CardState
from airwx.reporting.formatters import (
    age_class,
    format_age,
    format_alert,
    format_ceiling,
    format_dashboard_json,
    format_dashboard_text,
    format_hour,
    format_timeline,
    format_view_text,
    format_visibility,
    slot_tooltip,
)

IFR_OBS = ObservationSnapshot(
    visibility=2,
    ceiling=900,
    category=FlightCategory.IFR,
    has_obs=True,
    source=ObservationSource.ASOS,
    wind_speed=10,
    wind_gust=18,
    age_minutes=25,
)
SLOTS = (
    HourSlot("2026-02-10T12:00:00.000Z", FlightCategory.VFR, 6, 4000, 10, None, 270),
    HourSlot("2026-02-10T13:00:00.000Z", FlightCategory.IFR, 2, 800, 12, 22, 240),
)
VIEW = AirportView(
    station=Station("KMJX", "Ocean County Airport"),
    observation=IFR_OBS,
    timeline=SLOTS,
)


class TestFields:
    def test_visibility(self):
        assert format_visibility(10) == "10sm"
        assert format_visibility(2.5) == "2.5sm"
        assert format_visibility(10, has_obs=False) == "--"

    def test_ceiling(self):
        assert format_ceiling(3000) == "3,000ft"
        assert format_ceiling(800) == "800ft"
        assert format_ceiling(None) == "--"

    @pytest.mark.parametrize(
        "minutes, text, cls",
        [
            (None, "—", "unknown"),
            (5, "5m ago", "fresh"),
            (30, "30m ago", "fresh"),
            (31, "31m ago", "aging"),
            (90, "1h ago", "aging"),
            (91, "1h ago", "stale"),
            (185, "3h ago", "stale"),
        ],
    )
    def test_age(self, minutes, text, cls):
        assert format_age(minutes) == text
        assert age_class(minutes) == cls

    def test_hour(self):
        assert format_hour("2026-02-10T14:00:00.000Z") == "14:00"
        assert format_hour("2026-02-10T14:00:00.000Z", timezone(timedelta(hours=-5))) == "09:00"
        assert format_hour("garbage") == "--:--"
        assert format_hour(None) == "--:--"


class TestTooltip:
    def test_full(self):
        assert slot_tooltip(SLOTS[1]) == "Visibility: 2sm\nCeiling: 800ft\nWind: 240° 12kt G22kt"

    def test_missing(self):
        tip = slot_tooltip(HourSlot("2026-02-10T12:00:00.000Z"))
        assert tip == "Visibility: —\nCeiling: —\nWind: —"

    def test_gust_without_speed(self):
        tip = slot_tooltip(HourSlot("2026-02-10T12:00:00.000Z", wind_gust=30))
        assert tip.endswith("Wind: —kt G30kt")


class TestAlerts:
    def test_now(self):
        alert = Alert(AlertType.NOW, "Atlantic City", FlightCategory.IFR)
        assert format_alert(alert) == ("Atlantic City: IFR now", "METAR")

    def test_forecast(self):
        alert = Alert(AlertType.FORECAST, "Somerset", FlightCategory.LIFR, "2026-02-10T15:00:00.000Z")
        assert format_alert(alert) == ("Somerset: LIFR expected by 15:00", "TAF")


class TestViews:
    def test_timeline(self):
        assert format_timeline(SLOTS) == "12 VFR  13 IFR"
        assert format_timeline(()) == "No TAF available"

    def test_collapsed(self):
        text = format_view_text(VIEW)
        assert text == "[ IFR] KMJX Ocean County Airport | 2sm 900ft"

    def test_expanded(self):
        lines = format_view_text(VIEW, expanded=True).splitlines()
        assert lines[1].strip() == "Wind: 10 kt  Gust: 18 kt"
        assert lines[2].strip() == "Observed: 25m ago (fresh, ASOS)"
        assert lines[3].strip() == "TAF: 12 VFR  13 IFR"

    def test_expanded_without_taf(self):
        view = AirportView(station=VIEW.station, observation=IFR_OBS, timeline=())
        assert format_view_text(view, expanded=True).endswith("TAF: No TAF available")

    def test_dashboard_text(self):
        other = AirportView(
            station=Station("KPHL", "Philadelphia"),
            observation=IFR_OBS,
            timeline=(),
        )
        cards = CardState.for_stations([VIEW.station, other.station])
        alerts = [Alert(AlertType.NOW, "Ocean County Airport", FlightCategory.IFR)]
        text = format_dashboard_text(
            [VIEW, other], alerts, cards, fetched_at="2026-02-10T12:20:00.000Z", error="boom"
        )
        lines = text.splitlines()
        assert lines[0] == "Error: boom"
        assert lines[1] == "! Ocean County Airport: IFR now (METAR)"
        assert "TAF: 12 VFR  13 IFR" in text
        assert "No TAF available" not in text  # KPHL collapsed
        assert lines[-1] == "Data fetched at 2026-02-10T12:20:00.000Z"

    def test_dashboard_json(self):
        alert = Alert(AlertType.FORECAST, "Ocean County Airport", FlightCategory.IFR, SLOTS[1].hour_iso)
        data = json.loads(format_dashboard_json([VIEW], [alert]))
        airport = data["airports"][0]
        assert airport["category"] == "ifr"
        assert airport["source"] == "asos"
        assert airport["timeline"][1]["windGust"] == 22
        assert data["alerts"] == [
            {"type": "forecast", "name": "Ocean County Airport", "cat": "ifr",
             "hourIso": "2026-02-10T13:00:00.000Z"}
        ]
