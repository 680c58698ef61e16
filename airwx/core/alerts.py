"""IFR/LIFR alert derivation from current observations and forecast timelines."""

from collections.abc import Sequence

from airwx.models.common import FlightCategory
from airwx.models.forecast import HourSlot
from airwx.models.payload import Alert, AlertType

DEFAULT_LOOKAHEAD_HOURS = 6


def first_instrument_hour(
    timeline: Sequence[HourSlot], lookahead_hours: int = DEFAULT_LOOKAHEAD_HOURS
) -> HourSlot | None:
    for slot in timeline[:lookahead_hours]:
        if slot.category.is_instrument:
            return slot
    return None


def station_alerts(
    station_name: str,
    current: FlightCategory,
    timeline: Sequence[HourSlot],
    lookahead_hours: int = DEFAULT_LOOKAHEAD_HOURS,
) -> list[Alert]:
    """At most two alerts per station: "now" first, then the first forecast hit."""
    alerts = []
    if current.is_instrument:
        alerts.append(Alert(type=AlertType.NOW, station_name=station_name, category=current))
    slot = first_instrument_hour(timeline, lookahead_hours)
    if slot is not None:
        alerts.append(
            Alert(
                type=AlertType.FORECAST,
                station_name=station_name,
                category=slot.category,
                hour_iso=slot.hour_iso,
            )
        )
    return alerts
