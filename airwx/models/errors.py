"""Error taxonomy for upstream access, persistence and refresh control."""


class AirwxError(Exception):
    """Base class for all airwx errors."""


class UpstreamFetchError(AirwxError):
    """An upstream (or the proxy) answered with a non-success HTTP status."""

    def __init__(self, source: str, status: int, body: str = ""):
        self.source = source
        self.status = status
        self.body = body
        snippet = body[:120]
        super().__init__(f"{source} fetch failed ({status}): {snippet}")


class UpstreamParseError(AirwxError):
    """An upstream body could not be decoded as structured data."""

    def __init__(self, source: str, body: str = "", detail: str = ""):
        self.source = source
        self.body = body
        msg = f"{source} returned an unparseable body"
        if detail:
            msg = f"{msg}: {detail}"
        super().__init__(msg)


class CacheReadError(AirwxError):
    """Persisted client state is corrupt. Always recovered as absent/default."""


class RefreshAborted(AirwxError):
    """A refresh cycle was cancelled cooperatively via its abort signal."""
