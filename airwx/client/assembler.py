"""Payload assembly: three concurrent proxy fetches joined into one snapshot.

All three must succeed or the whole assembly fails; a partial payload is
never produced. An AbortSignal lets a newer refresh cancel this one
cooperatively: every await point re-checks it.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime

import httpx

from airwx.core.overrides import forecast_ids
from airwx.models.common import iso_z, norm_id, utc_now
from airwx.models.errors import RefreshAborted, UpstreamFetchError, UpstreamParseError
from airwx.models.payload import Payload
from airwx.models.station import Station, to_asos_id

logger = logging.getLogger(__name__)


class AbortSignal:
    def __init__(self) -> None:
        self._aborted = False

    def abort(self) -> None:
        self._aborted = True

    @property
    def aborted(self) -> bool:
        return self._aborted

    def check(self) -> None:
        if self._aborted:
            raise RefreshAborted("refresh aborted")


def _dedup(values) -> list[str]:
    return [v for v in dict.fromkeys(values) if v]


def _records(body: object) -> tuple[dict, ...]:
    # Non-object entries are dropped one by one; the rest of the batch stands.
    if not isinstance(body, list):
        return ()
    return tuple(r for r in body if isinstance(r, dict))


class PayloadAssembler:
    def __init__(
        self,
        server_url: str,
        overrides: Mapping[str, str] | None = None,
        network: str = "NJ_ASOS",
        hours: int = 24,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        now: Callable[[], datetime] = utc_now,
    ):
        self.server_url = server_url.rstrip("/")
        self.overrides = dict(overrides or {})
        self.network = network
        self.hours = hours
        self.timeout = timeout
        self._client = client
        self._now = now

    def request_keys(self, stations: list[Station]) -> dict[str, str]:
        """Query values for the three fetches, derived from the station list."""
        ids = _dedup(norm_id(s.id) for s in stations)
        return {
            "metar": ",".join(ids),
            "taf": ",".join(forecast_ids(ids, self.overrides)),
            "asos": ",".join(_dedup(to_asos_id(i) for i in ids)),
        }

    async def assemble(
        self, stations: list[Station], signal: AbortSignal | None = None
    ) -> Payload:
        signal = signal or AbortSignal()
        if not stations:
            return Payload(fetched_at=iso_z(self._now()))

        keys = self.request_keys(stations)
        if self._client is not None:
            return await self._assemble(self._client, keys, signal)
        async with httpx.AsyncClient(base_url=self.server_url, timeout=self.timeout) as client:
            return await self._assemble(client, keys, signal)

    async def _assemble(
        self, client: httpx.AsyncClient, keys: dict[str, str], signal: AbortSignal
    ) -> Payload:
        tasks = [
            asyncio.ensure_future(
                self._fetch(client, "METAR", "/api/metar", {"ids": keys["metar"]}, signal)
            ),
            asyncio.ensure_future(
                self._fetch(
                    client,
                    "TAF timeline",
                    "/api/tafTimeline",
                    {"ids": keys["taf"], "hours": str(self.hours)},
                    signal,
                )
            ),
            asyncio.ensure_future(
                self._fetch(
                    client,
                    "ASOS",
                    "/api/asosLatest",
                    {"network": self.network, "stations": keys["asos"]},
                    signal,
                )
            ),
        ]
        try:
            metars, taf_data, asos_rows = await asyncio.gather(*tasks)
        except BaseException:
            for t in tasks:
                t.cancel()
            raise

        signal.check()
        return Payload(
            fetched_at=iso_z(self._now()),
            metars=_records(metars),
            taf_data=_records(taf_data),
            asos_rows=_records(asos_rows),
        )

    async def _fetch(
        self,
        client: httpx.AsyncClient,
        source: str,
        path: str,
        params: dict[str, str],
        signal: AbortSignal,
    ) -> object:
        signal.check()
        resp = await client.get(path, params=params)
        signal.check()
        if not resp.is_success:
            raise UpstreamFetchError(source, resp.status_code, resp.text)
        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamParseError(source, resp.text, str(e)) from e
