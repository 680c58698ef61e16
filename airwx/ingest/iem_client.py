"""Iowa Environmental Mesonet ASOS/AWOS client (latest row per station)."""

import csv
import io
import logging
from datetime import UTC, datetime, timedelta

from airwx.ingest.base import UpstreamClient
from airwx.models.common import iso_z, norm_id

logger = logging.getLogger(__name__)

IEM_BASE_URL = "https://mesonet.agron.iastate.edu"
ASOS_PATH = "/cgi-bin/request/asos.py"

DATA_FIELDS = (
    "vsby", "wdir", "sped", "gust", "tmpf",
    "skyc1", "skyc2", "skyc3", "skyc4",
    "skyl1", "skyl2", "skyl3", "skyl4",
)
NUMERIC_FIELDS = ("vsby", "wdir", "sped", "gust", "tmpf", "skyl1", "skyl2", "skyl3", "skyl4")
TEXT_FIELDS = ("skyc1", "skyc2", "skyc3", "skyc4")
MISSING = "M"


class IemClient(UpstreamClient):
    source = "ASOS"

    def __init__(self, base_url: str = IEM_BASE_URL, history_hours: int = 24, **kwargs):
        super().__init__(base_url, **kwargs)
        self.history_hours = history_hours

    def get_latest(
        self, network: str, stations: list[str], now: datetime | None = None
    ) -> list[dict]:
        """Most recent observation row per station over the history window."""
        params = build_params(network, stations, self.history_hours, now)
        text = self.get_text(ASOS_PATH, params=params)
        return latest_rows(text)


def build_params(
    network: str, stations: list[str], history_hours: int, now: datetime | None = None
) -> list[tuple[str, str]]:
    if now is None:
        now = datetime.now(UTC)
    start = now - timedelta(hours=history_hours)

    params: list[tuple[str, str]] = [("network", network)]
    params += [("station", st) for st in stations]
    params += [("data", f) for f in DATA_FIELDS]
    params += [
        ("year1", str(start.year)), ("month1", str(start.month)), ("day1", str(start.day)),
        ("year2", str(now.year)), ("month2", str(now.month)), ("day2", str(now.day)),
        ("tz", "Etc/UTC"),
        ("format", "onlycomma"),
        ("latlon", "no"),
        ("elev", "no"),
        ("missing", MISSING),
        ("trace", "T"),
        ("direct", "no"),
        ("report_type", "3"),
        ("report_type", "4"),
    ]
    return params


def _to_num(value: str | None) -> int | float | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value == MISSING:
        return None
    try:
        n = float(value)
    except ValueError:
        return None
    return int(n) if n.is_integer() else n


def _to_str(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value == MISSING:
        return None
    return value


def _parse_valid(value: str) -> datetime | None:
    # IEM "valid" is "YYYY-MM-DD HH:MM" in UTC
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d %H:%M").replace(tzinfo=UTC)
    except ValueError:
        return None


def latest_rows(text: str) -> list[dict]:
    """Reduce IEM CSV text to the newest row per station.

    Rows without a station, or with an unparseable timestamp, are skipped.
    """
    lines = text.strip().splitlines()
    if len(lines) < 2:
        return []

    reader = csv.DictReader(io.StringIO("\n".join(lines)), skipinitialspace=True)
    latest: dict[str, tuple[datetime, dict]] = {}
    skipped = 0
    for row in reader:
        st = norm_id(row.get("station"))
        valid = _parse_valid(row.get("valid") or "")
        if not st or valid is None:
            skipped += 1
            continue
        prev = latest.get(st)
        if prev is not None and valid <= prev[0]:
            continue
        record: dict = {"station": st, "validUtc": iso_z(valid)}
        for name in NUMERIC_FIELDS:
            record[name] = _to_num(row.get(name))
        for name in TEXT_FIELDS:
            record[name] = _to_str(row.get(name))
        latest[st] = (valid, record)

    if skipped:
        logger.debug("Skipped %d malformed ASOS rows", skipped)
    return [record for _, record in latest.values()]
