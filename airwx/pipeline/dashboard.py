"""Dashboard coordinator: owns the station list, payload cache and refresh cycle.

One DashboardState per display. Only one refresh may be in flight; a
second request while one is running is dropped rather than queued.
"""

import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime

import httpx

from airwx.client.assembler import AbortSignal, PayloadAssembler
from airwx.config.defaults import DEFAULT_STATIONS
from airwx.config.schema import AppConfig
from airwx.core.alerts import station_alerts
from airwx.core.observation import resolve_observation
from airwx.core.overrides import resolve_timeline
from airwx.models.common import norm_id, utc_now
from airwx.models.errors import RefreshAborted, UpstreamFetchError, UpstreamParseError
from airwx.models.forecast import HourSlot, StationTimeline
from airwx.models.payload import AirportView, Alert, Payload
from airwx.models.station import normalize_station, normalize_stations, to_asos_id
from airwx.pipeline.names import enrich_names
from airwx.reporting.card_state import CardState
from airwx.storage import client_repo

logger = logging.getLogger(__name__)


class DashboardState:
    def __init__(
        self,
        config: AppConfig,
        conn: sqlite3.Connection,
        assembler: PayloadAssembler | None = None,
        now: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.conn = conn
        self.overrides = dict(config.taf_overrides)
        self._now = now

        dash = config.dashboard
        self.assembler = assembler or PayloadAssembler(
            dash.server_url,
            overrides=self.overrides,
            network=dash.asos_network,
            hours=dash.timeline_hours,
            timeout=dash.request_timeout,
            now=now,
        )

        self.default_stations = normalize_stations(s.model_dump() for s in config.stations)
        if not self.default_stations:
            self.default_stations = normalize_stations(s.model_dump() for s in DEFAULT_STATIONS)
        self.stations = client_repo.load_stations(conn, self.default_stations)
        self.cards = CardState.for_stations(self.stations)

        self.payload: Payload | None = None
        self.views: list[AirportView] = []
        self.alerts: list[Alert] = []
        self.last_error: str | None = None

        self._in_flight = False
        self._signal: AbortSignal | None = None

    @property
    def ttl_seconds(self) -> int:
        return self.config.dashboard.data_ttl_seconds

    def _now_ms(self) -> float:
        return self._now().timestamp() * 1000

    @property
    def refreshing(self) -> bool:
        return self._in_flight

    # ── Station list ────────────────────────────────────────────

    def add_station(self, station_id: str, name: str = "") -> bool:
        """Append a station; short, empty or duplicate ids are ignored."""
        station = normalize_station({"id": station_id, "name": name})
        if station is None or any(s.id == station.id for s in self.stations):
            return False
        sid = station.id
        self.stations.append(station)
        client_repo.save_stations(self.conn, self.stations)
        self.cards.repin(self.stations)
        logger.info("Added station %s", sid)
        return True

    def remove_station(self, station_id: str) -> bool:
        """Drop a station; removing the last one restores the default list."""
        sid = norm_id(station_id)
        before = len(self.stations)
        self.stations = [s for s in self.stations if s.id != sid]
        removed = len(self.stations) != before
        if not self.stations:
            self.stations = list(self.default_stations)
        client_repo.save_stations(self.conn, self.stations)
        self.cards.repin(self.stations, clear=True)
        if removed:
            logger.info("Removed station %s", sid)
        return removed

    # ── Cache ───────────────────────────────────────────────────

    def clear_cache(self) -> None:
        client_repo.clear_cached_payload(self.conn)

    def is_cache_stale(self) -> bool:
        return client_repo.is_cache_stale(self.conn, self.ttl_seconds, self._now_ms())

    # ── Refresh ─────────────────────────────────────────────────

    def cancel(self) -> None:
        """Signal the in-flight refresh, if any, to stop at its next await."""
        if self._signal is not None:
            self._signal.abort()

    async def refresh(self, force: bool = False) -> bool:
        """Render from a fresh cache, or fetch a new payload.

        Returns True when a render happened. On failure the previous views
        stay in place and `last_error` carries a short diagnostic.
        """
        if self._in_flight:
            logger.info("Refresh already in progress, skipping")
            return False

        if not force:
            cached = client_repo.load_cached_payload(
                self.conn, self.ttl_seconds, self._now_ms()
            )
            if cached is not None:
                self.render(cached)
                return True

        # A superseding refresh stops this one through cancel().
        self._in_flight = True
        signal = self._signal = AbortSignal()

        try:
            payload = await self.assembler.assemble(list(self.stations), signal)
            client_repo.save_cached_payload(self.conn, payload, self._now_ms())
            self.render(payload)
            self.last_error = None
            logger.info("Refreshed %d stations", len(self.stations))
            return True
        except RefreshAborted:
            logger.info("Refresh aborted")
            return False
        except (UpstreamFetchError, UpstreamParseError, httpx.HTTPError) as e:
            logger.error("Refresh failed: %s", e)
            self.last_error = str(e) or "Failed to fetch weather data"
            return False
        finally:
            self._in_flight = False
            self._signal = None

    # ── Render ──────────────────────────────────────────────────

    def render(self, payload: Payload) -> list[AirportView]:
        """Resolve every station into a display record and collect alerts."""
        now = self._now()
        metars = {norm_id(m.get("icaoId")): m for m in payload.metars if isinstance(m, dict)}
        asos_rows = {
            norm_id(r.get("station")): r for r in payload.asos_rows if isinstance(r, dict)
        }
        timelines: dict[str, tuple[HourSlot, ...]] = {}
        for raw in payload.taf_data:
            if not isinstance(raw, dict):
                continue
            t = StationTimeline.from_dict(raw)
            if t.icao_id:
                timelines[t.icao_id] = t.slots

        named, changed = enrich_names(self.stations, metars)
        if changed:
            self.stations = named
            # Same ids, so the cached payload stays valid.
            client_repo.save_stations(self.conn, self.stations, invalidate=False)

        lookahead = self.config.dashboard.ifr_lookahead_hours
        views = []
        for st in self.stations:
            obs = resolve_observation(
                metars.get(st.id), asos_rows.get(to_asos_id(st.id)), now
            )
            timeline = resolve_timeline(st.id, timelines, self.overrides)
            alerts = station_alerts(st.name, obs.category, timeline, lookahead)
            views.append(
                AirportView(station=st, observation=obs, timeline=timeline, alerts=tuple(alerts))
            )

        self.payload = payload
        self.views = views
        self.alerts = [a for v in views for a in v.alerts]
        return views
