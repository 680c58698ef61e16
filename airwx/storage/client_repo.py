"""Repository for persisted dashboard state: station list and payload cache.

Both documents are JSON under a fixed key. Corrupt state never surfaces as
an error: a bad station list reads as the default list, a bad payload cache
reads as a miss.
"""

import json
import logging
import sqlite3
import time

from airwx.core.staleness import is_payload_stale
from airwx.models.errors import CacheReadError
from airwx.models.payload import Payload
from airwx.models.station import Station, normalize_stations

logger = logging.getLogger(__name__)

STATIONS_KEY = "stations"
DATA_CACHE_KEY = "data_cache"


def _now_ms() -> float:
    return time.time() * 1000


# --- Raw key/value ---

def get_state(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute(
        "SELECT value FROM client_state WHERE key = ?", (key,)
    ).fetchone()
    if row is None:
        return None
    return row[0]


def set_state(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute(
        "INSERT INTO client_state (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
        "ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
        (key, value),
    )
    conn.commit()


def delete_state(conn: sqlite3.Connection, key: str) -> None:
    conn.execute("DELETE FROM client_state WHERE key = ?", (key,))
    conn.commit()


def _read_json(conn: sqlite3.Connection, key: str) -> object | None:
    raw = get_state(conn, key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise CacheReadError(f"corrupt {key} state") from e


# --- Stations ---

def load_stations(conn: sqlite3.Connection, default: list[Station]) -> list[Station]:
    """Stored station list, or `default` when absent, malformed or empty."""
    try:
        parsed = _read_json(conn, STATIONS_KEY)
    except CacheReadError:
        logger.warning("Stored station list is corrupt, using defaults")
        return list(default)
    if not isinstance(parsed, list) or not parsed:
        return list(default)
    stations = normalize_stations(parsed)
    return stations or list(default)


def save_stations(
    conn: sqlite3.Connection, stations: list[Station], invalidate: bool = True
) -> None:
    """Persist the station list; a changed list invalidates the payload cache."""
    set_state(conn, STATIONS_KEY, json.dumps([s.to_dict() for s in stations]))
    if invalidate:
        clear_cached_payload(conn)


# --- Payload cache ---

def _read_cache_entry(conn: sqlite3.Connection) -> dict | None:
    try:
        obj = _read_json(conn, DATA_CACHE_KEY)
    except CacheReadError:
        logger.warning("Stored payload cache is corrupt, treating as miss")
        return None
    if not isinstance(obj, dict):
        return None
    return obj


def load_cached_payload(
    conn: sqlite3.Connection, ttl_seconds: int, now_ms: float | None = None
) -> Payload | None:
    """The cached payload if present, well-formed and within TTL."""
    if now_ms is None:
        now_ms = _now_ms()
    obj = _read_cache_entry(conn)
    if obj is None or not obj.get("payload"):
        return None
    if is_payload_stale(obj.get("savedAt"), ttl_seconds, now_ms):
        return None
    try:
        return Payload.from_dict(obj["payload"])
    except (ValueError, TypeError):
        logger.warning("Cached payload has an unexpected shape, treating as miss")
        return None


def save_cached_payload(
    conn: sqlite3.Connection, payload: Payload, now_ms: float | None = None
) -> None:
    if now_ms is None:
        now_ms = _now_ms()
    set_state(
        conn,
        DATA_CACHE_KEY,
        json.dumps({"savedAt": now_ms, "payload": payload.to_dict()}),
    )


def clear_cached_payload(conn: sqlite3.Connection) -> None:
    delete_state(conn, DATA_CACHE_KEY)


def is_cache_stale(
    conn: sqlite3.Connection, ttl_seconds: int, now_ms: float | None = None
) -> bool:
    if now_ms is None:
        now_ms = _now_ms()
    obj = _read_cache_entry(conn)
    if obj is None:
        return True
    return is_payload_stale(obj.get("savedAt"), ttl_seconds, now_ms)
