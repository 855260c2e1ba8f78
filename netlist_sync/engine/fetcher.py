"""HTTP fetching of remote prefix lists."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import structlog

from .. import __version__
from ..errors import FetchError, SourceConnectionError, SourceStatusError, SourceTimeoutError
from ..logging_conf import get_logger

DEFAULT_USER_AGENT = f"netlist-sync/{__version__}"


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Outcome of one source attempt: a body or the error that prevented it."""

    url: str
    text: str | None = None
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        if self.error is not None:
            raise self.error
        return self.text or ""


class Fetcher:
    """Single-attempt downloader shared by all concurrent fetches."""

    def __init__(
        self,
        timeout: float,
        transport: httpx.BaseTransport | None = None,
        user_agent: str | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.timeout = timeout
        self.logger = logger or get_logger("fetcher")
        self._client = httpx.Client(
            follow_redirects=True,
            timeout=timeout,
            headers={"User-Agent": user_agent or DEFAULT_USER_AGENT},
            transport=transport,
        )

    def __enter__(self) -> "Fetcher":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def fetch(self, url: str) -> str:
        """Return the response body of ``url`` or raise a ``FetchError``."""

        try:
            response = self._client.get(url, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise SourceTimeoutError(url, f"timed out after {self.timeout:g}s") from exc
        except httpx.HTTPError as exc:
            raise SourceConnectionError(url, str(exc) or type(exc).__name__) from exc
        if not response.is_success:
            raise SourceStatusError(url, response.status_code)
        return response.text

    def attempt(self, url: str) -> FetchResult:
        """Like :meth:`fetch` but captures the failure in the result."""

        log = self.logger.bind(url=url)
        log.debug("fetch_started", timeout=self.timeout)
        try:
            text = self.fetch(url)
        except FetchError as exc:
            log.warning("fetch_failed", error=exc.reason, error_type=type(exc).__name__)
            return FetchResult(url=url, error=exc)
        log.info("fetch_succeeded", size=len(text))
        return FetchResult(url=url, text=text)


__all__ = ["DEFAULT_USER_AGENT", "FetchResult", "Fetcher"]
