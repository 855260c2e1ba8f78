"""Fatal error taxonomy for a sync run."""

from __future__ import annotations

from pathlib import Path


class NetlistSyncError(Exception):
    """Base class for every error that aborts a run."""


class FetchError(NetlistSyncError):
    """A source could not be retrieved."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class SourceConnectionError(FetchError):
    """Network level failure (DNS, refused connection, TLS, protocol)."""


class SourceTimeoutError(FetchError):
    """The source did not answer within the configured timeout."""


class FetchCancelledError(FetchError):
    """The fetch was skipped because another source had already failed."""


class SourceStatusError(FetchError):
    """The source answered with a non-success HTTP status."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(url, f"unexpected status {status_code}")
        self.status_code = status_code


class DestinationIOError(NetlistSyncError):
    """Reading, writing or renaming the destination failed."""

    def __init__(self, path: Path | str, stage: str, reason: str) -> None:
        super().__init__(f"{stage} failed for {path}: {reason}")
        self.path = Path(path)
        self.stage = stage
        self.reason = reason


__all__ = [
    "DestinationIOError",
    "FetchCancelledError",
    "FetchError",
    "NetlistSyncError",
    "SourceConnectionError",
    "SourceStatusError",
    "SourceTimeoutError",
]
