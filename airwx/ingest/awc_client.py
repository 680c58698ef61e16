"""Aviation Weather Center (aviationweather.gov) METAR and TAF client."""

import json
import logging

from airwx.ingest.base import UpstreamClient
from airwx.models.errors import UpstreamParseError

logger = logging.getLogger(__name__)

AWC_BASE_URL = "https://aviationweather.gov"


class AwcClient(UpstreamClient):
    source = "AWC"

    def __init__(self, base_url: str = AWC_BASE_URL, **kwargs):
        super().__init__(base_url, **kwargs)

    def get_metars(self, ids: str) -> object:
        """Current METARs for a comma-joined id list, as decoded JSON."""
        text = self.get_text("/api/data/metar", params={"ids": ids, "format": "json"})
        return _decode("METAR", text)

    def get_tafs(self, ids: str) -> object:
        """Raw TAF records (with forecast segments) for a comma-joined id list."""
        text = self.get_text(
            "/api/data/taf",
            params={"ids": ids, "format": "json"},
            accept="application/json",
        )
        return _decode("TAF", text)

    def taf_url(self, ids: str) -> str:
        return f"{self.url('/api/data/taf')}?ids={ids}&format=json"


def _decode(source: str, text: str) -> object:
    # AWC answers 204 / empty body when no station matched
    if not text.strip():
        return []
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        logger.error("%s upstream returned non-JSON: %s", source, text[:200])
        raise UpstreamParseError(source, text, str(e)) from e
