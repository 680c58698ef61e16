"""FastAPI proxy serving METAR, TAF timelines and ASOS fallback rows.

Each endpoint answers from the response cache when a live entry exists for
the exact query; otherwise it calls upstream, and caches only successes.
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse, Response

from airwx.config.schema import AppConfig
from airwx.core.timeline import build_timelines, clamp_hours
from airwx.ingest.awc_client import AwcClient
from airwx.ingest.iem_client import IemClient
from airwx.models.common import iso_z, norm_id, utc_now
from airwx.models.errors import UpstreamFetchError, UpstreamParseError
from airwx.server.cache import ResponseCache

logger = logging.getLogger(__name__)

INDEX_HTML = Path(__file__).parent.parent.parent / "static" / "index.html"
DEFAULT_NETWORK = "NJ_ASOS"


def _error(status: int, body: dict) -> JSONResponse:
    return JSONResponse(body, status_code=status, headers={"Cache-Control": "no-store"})


def create_app(
    config: AppConfig | None = None,
    awc: AwcClient | None = None,
    iem: IemClient | None = None,
    cache: ResponseCache | None = None,
    now: Callable[[], datetime] = utc_now,
) -> FastAPI:
    config = config or AppConfig()
    srv = config.server
    client_opts = {
        "user_agent": srv.user_agent,
        "timeout": srv.request_timeout,
        "max_retries": srv.max_retries,
        "retry_base_delay": srv.retry_base_delay,
    }
    if awc is None:
        awc = AwcClient(srv.awc_base_url, **client_opts)
    if iem is None:
        iem = IemClient(srv.iem_base_url, history_hours=srv.asos_history_hours, **client_opts)
    if cache is None:
        cache = ResponseCache(srv.cache_ttl_seconds)
    max_age = f"public, max-age={int(cache.ttl_seconds)}"

    app = FastAPI(title="Aviation Weather Dashboard", version="0.1.0")
    app.state.cache = cache

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path)
        return await call_next(request)

    def _cached(key: str) -> Response | None:
        entry = cache.get(key)
        if entry is None:
            return None
        return Response(
            content=entry.body,
            status_code=entry.status,
            media_type=entry.content_type,
            headers={"Cache-Control": max_age},
        )

    def _store(key: str, data: object) -> Response:
        body = json.dumps(data).encode()
        cache.put(key, 200, body)
        return Response(
            content=body,
            status_code=200,
            media_type="application/json",
            headers={"Cache-Control": max_age},
        )

    # ── API ─────────────────────────────────────────────────────

    @app.get("/api/test")
    def api_test():
        return {"ok": True, "time": iso_z(now())}

    @app.get("/api/metar")
    def api_metar(ids: str = ""):
        """Current METARs. /api/metar?ids=KMJX,KWRI"""
        ids = ids.strip()
        if not ids:
            return _error(400, {"error": "Missing ids=..."})

        key = f"metar:{ids}"
        hit = _cached(key)
        if hit is not None:
            return hit

        try:
            data = awc.get_metars(ids)
        except UpstreamFetchError as e:
            logger.error("METAR upstream failed (%d): %s", e.status, e.body[:200])
            return _error(
                502, {"error": "METAR upstream failed", "status": e.status, "body": e.body[:400]}
            )
        except UpstreamParseError as e:
            return _error(
                502, {"error": "METAR upstream returned non-JSON", "body": e.body[:400]}
            )
        except Exception:
            logger.exception("METAR proxy failed")
            return _error(500, {"error": "METAR proxy failed"})
        return _store(key, data)

    @app.get("/api/tafTimeline")
    def api_taf_timeline(ids: str = "", hours: str | None = None):
        """Hourly TAF timelines. /api/tafTimeline?ids=KWRI,KACY&hours=24"""
        ids = ids.strip()
        n_hours = clamp_hours(hours)
        if not ids:
            return _error(400, {"error": "Missing ids=..."})

        key = f"tafTimeline:{ids}:{n_hours}"
        hit = _cached(key)
        if hit is not None:
            return hit

        try:
            taf_json = awc.get_tafs(ids)
            wanted = [norm_id(s) for s in ids.split(",") if s.strip()]
            timelines = build_timelines(taf_json, wanted, n_hours, now())
        except UpstreamFetchError as e:
            logger.error("TAF upstream failed (%d): %s", e.status, e.body[:200])
            return _error(502, {
                "error": "TAF upstream failed",
                "status": e.status,
                "upstreamUrl": awc.taf_url(ids),
                "body": e.body[:800],
            })
        except UpstreamParseError as e:
            return _error(502, {
                "error": "TAF upstream returned non-JSON",
                "upstreamUrl": awc.taf_url(ids),
                "body": e.body[:800],
            })
        except Exception as e:
            logger.exception("TAF timeline failed")
            return _error(500, {"error": "TAF timeline failed", "detail": str(e)})
        return _store(key, [t.to_dict() for t in timelines])

    @app.get("/api/asosLatest")
    def api_asos_latest(network: str = DEFAULT_NETWORK, stations: str = ""):
        """Latest ASOS/AWOS rows. /api/asosLatest?network=NJ_ASOS&stations=BLM,MJX"""
        network = network.strip() or DEFAULT_NETWORK
        station_list = [norm_id(s) for s in stations.split(",") if s.strip()]
        if not station_list:
            return _error(400, {"error": "Missing stations=..."})

        key = f"asosLatest:{network}:{','.join(station_list)}"
        hit = _cached(key)
        if hit is not None:
            return hit

        try:
            rows = iem.get_latest(network, station_list, now())
        except UpstreamFetchError as e:
            logger.error("ASOS upstream failed (%d): %s", e.status, e.body[:200])
            return _error(
                502, {"error": "ASOS upstream failed", "status": e.status, "body": e.body[:400]}
            )
        except Exception:
            logger.exception("ASOS proxy failed")
            return _error(500, {"error": "ASOS proxy failed"})
        return _store(key, rows)

    # ── Dashboard page ──────────────────────────────────────────

    @app.get("/")
    def serve_dashboard():
        if INDEX_HTML.exists():
            return FileResponse(INDEX_HTML, media_type="text/html")
        return HTMLResponse("<h1>Dashboard not found</h1>", status_code=404)

    return app
