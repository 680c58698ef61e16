"""Shared GET-with-retry transport for the upstream weather sources."""

import logging
import time

import httpx

from airwx.models.errors import UpstreamFetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "airwx/0.1.0 (contact: ops@example.com)"
RETRY_STATUSES = (429, 503)


class UpstreamClient:
    source = "upstream"

    def __init__(
        self,
        base_url: str,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = 30.0,
        max_retries: int = 2,
        retry_base_delay: float = 2.0,
    ):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_retries = max_retries
        self.retry_base_delay = retry_base_delay

    def url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def get_text(
        self,
        path: str,
        params: dict | list[tuple[str, str]] | None = None,
        accept: str | None = None,
    ) -> str:
        """GET a resource and return its body text.

        Retries on 503/429 and transport errors with exponential backoff.
        Raises UpstreamFetchError for any final non-2xx status.
        """
        url = self.url(path)
        headers = {"User-Agent": self.user_agent}
        if accept:
            headers["Accept"] = accept

        for attempt in range(self.max_retries + 1):
            try:
                resp = httpx.get(url, params=params, headers=headers, timeout=self.timeout)
            except httpx.RequestError as e:
                if attempt < self.max_retries:
                    self._backoff(attempt, str(e))
                    continue
                raise

            if resp.status_code in RETRY_STATUSES and attempt < self.max_retries:
                self._backoff(attempt, f"HTTP {resp.status_code}")
                continue
            if not resp.is_success:
                raise UpstreamFetchError(self.source, resp.status_code, resp.text)
            return resp.text

        raise AssertionError("unreachable")  # pragma: no cover

    def _backoff(self, attempt: int, reason: str) -> None:
        delay = self.retry_base_delay * 2**attempt
        logger.warning(
            "%s %s, retrying in %.1fs (attempt %d/%d)",
            self.source, reason, delay, attempt + 1, self.max_retries,
        )
        time.sleep(delay)
