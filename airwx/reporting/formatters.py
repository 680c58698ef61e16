"""Output formatters for the airport list, timelines and alert banner."""

import json
from datetime import UTC, tzinfo

from airwx.core.staleness import parse_timestamp
from airwx.models.forecast import HourSlot
from airwx.models.payload import AirportView, Alert, AlertType
from airwx.reporting.card_state import CardState


def _num(value: float) -> str:
    return f"{value:.0f}" if float(value).is_integer() else f"{value:g}"


def format_visibility(vis: float | None, has_obs: bool = True) -> str:
    if not has_obs or vis is None:
        return "--"
    return f"{vis:.0f}sm" if float(vis).is_integer() else f"{vis:.1f}sm"


def format_ceiling(ceil: float | None, has_obs: bool = True) -> str:
    if not has_obs or ceil is None:
        return "--"
    return f"{ceil:,.0f}ft"


def format_age(minutes: int | None) -> str:
    if minutes is None:
        return "—"
    if minutes < 60:
        return f"{minutes}m ago"
    return f"{minutes // 60}h ago"


def age_class(minutes: int | None, fresh: int = 30, stale: int = 90) -> str:
    if minutes is None:
        return "unknown"
    if minutes <= fresh:
        return "fresh"
    if minutes <= stale:
        return "aging"
    return "stale"


def format_hour(iso: str | None, tz: tzinfo = UTC) -> str:
    ts = parse_timestamp(iso)
    if ts is None:
        return "--:--"
    return f"{ts.astimezone(tz).hour:02d}:00"


def slot_tooltip(slot: HourSlot) -> str:
    """Visibility / Ceiling / Wind lines for one timeline hour."""
    if slot.visibility is not None:
        vis = _num(round(slot.visibility, 1))
        lines = [f"Visibility: {vis}sm"]
    else:
        lines = ["Visibility: —"]

    if slot.ceiling is not None:
        lines.append(f"Ceiling: {slot.ceiling:,.0f}ft")
    else:
        lines.append("Ceiling: —")

    if slot.wind_speed is not None or slot.wind_gust is not None:
        parts = []
        if slot.wind_dir is not None:
            parts.append(f"{_num(slot.wind_dir)}°")
        parts.append(f"{_num(slot.wind_speed)}kt" if slot.wind_speed is not None else "—kt")
        if slot.wind_gust is not None:
            parts.append(f"G{_num(slot.wind_gust)}kt")
        lines.append(f"Wind: {' '.join(parts)}")
    else:
        lines.append("Wind: —")
    return "\n".join(lines)


def format_alert(alert: Alert, tz: tzinfo = UTC) -> tuple[str, str]:
    """(message, source tag) for one banner entry."""
    cat = alert.category.value.upper()
    if alert.type == AlertType.NOW:
        return f"{alert.station_name}: {cat} now", "METAR"
    return f"{alert.station_name}: {cat} expected by {format_hour(alert.hour_iso, tz)}", "TAF"


def format_timeline(timeline: tuple[HourSlot, ...], tz: tzinfo = UTC) -> str:
    if not timeline:
        return "No TAF available"
    return "  ".join(
        f"{format_hour(h.hour_iso, tz)[:2]} {h.category.value.upper()}" for h in timeline
    )


def format_view_text(
    view: AirportView,
    expanded: bool = False,
    fresh_minutes: int = 30,
    stale_minutes: int = 90,
    tz: tzinfo = UTC,
) -> str:
    obs = view.observation
    vis = format_visibility(obs.visibility, obs.has_obs)
    ceil = format_ceiling(obs.ceiling, obs.has_obs)
    header = (
        f"[{view.category.value.upper():>4}] {view.station.id} {view.station.name} "
        f"| {vis} {ceil}"
    )
    if not expanded:
        return header

    lines = [header]
    wind = []
    if obs.wind_speed is not None:
        wind.append(f"Wind: {_num(obs.wind_speed)} kt")
    if obs.wind_gust is not None:
        wind.append(f"Gust: {_num(obs.wind_gust)} kt")
    if wind:
        lines.append("    " + "  ".join(wind))
    age = obs.age_minutes
    lines.append(
        f"    Observed: {format_age(age)} ({age_class(age, fresh_minutes, stale_minutes)},"
        f" {obs.source.value.upper()})"
    )
    taf = format_timeline(view.timeline, tz) if view.has_taf else "No TAF available"
    lines.append(f"    TAF: {taf}")
    return "\n".join(lines)


def format_dashboard_text(
    views: list[AirportView],
    alerts: list[Alert],
    cards: CardState | None = None,
    fetched_at: str | None = None,
    error: str | None = None,
    fresh_minutes: int = 30,
    stale_minutes: int = 90,
    tz: tzinfo = UTC,
) -> str:
    """Plain text dashboard: alert banner, then one block per airport."""
    lines = []
    if error:
        lines.append(f"Error: {error}")
    for alert in alerts:
        msg, src = format_alert(alert, tz)
        lines.append(f"! {msg} ({src})")
    if alerts or error:
        lines.append("")
    for view in views:
        expanded = cards.is_expanded(view.station.id) if cards else True
        lines.append(format_view_text(view, expanded, fresh_minutes, stale_minutes, tz))
    if fetched_at:
        lines.append("")
        lines.append(f"Data fetched at {fetched_at}")
    return "\n".join(lines)


def format_dashboard_json(views: list[AirportView], alerts: list[Alert]) -> str:
    """JSON render records for programmatic consumption."""
    data = {
        "airports": [
            {
                "id": v.station.id,
                "name": v.station.name,
                "category": v.category.value,
                "visibility": v.observation.visibility,
                "ceiling": v.observation.ceiling,
                "hasObs": v.observation.has_obs,
                "source": v.observation.source.value,
                "windSpeed": v.observation.wind_speed,
                "windGust": v.observation.wind_gust,
                "ageMinutes": v.observation.age_minutes,
                "timeline": [s.to_dict() for s in v.timeline],
            }
            for v in views
        ],
        "alerts": [
            {
                "type": a.type.value,
                "name": a.station_name,
                "cat": a.category.value,
                "hourIso": a.hour_iso,
            }
            for a in alerts
        ],
    }
    return json.dumps(data, indent=2)
