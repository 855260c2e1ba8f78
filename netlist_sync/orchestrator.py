"""Coordinator wiring together fetching, parsing, aggregation and writing."""

from __future__ import annotations

import enum
import os
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor, as_completed
from threading import Event
from typing import Sequence

import structlog

from .config import SyncSettings
from .engine import (
    AtomicWriter,
    FetchResult,
    Fetcher,
    PrefixSet,
    StdoutWriter,
    WriteOutcome,
    parse_prefixes,
)
from .errors import DestinationIOError, FetchCancelledError, NetlistSyncError
from .logging_conf import get_logger


class SyncOutcome(enum.IntEnum):
    """Terminal result of a run; the value is the process exit status."""

    UPDATED = 0
    FAILED = 1
    UNCHANGED = 2


class Coordinator:
    """Run one all-or-nothing sync of ``settings.urls`` into ``settings.destfile``.

    Every URL gets its own worker unless ``max_workers`` caps the pool.
    """

    def __init__(
        self,
        settings: SyncSettings,
        fetcher: Fetcher | None = None,
        logger: structlog.BoundLogger | None = None,
        max_workers: int | None = None,
    ) -> None:
        self.settings = settings
        self.max_workers = max_workers
        self.logger = logger or get_logger("coordinator")
        self._fetcher = fetcher
        self._cancelled = Event()

    # ------------------------------------------------------------------
    def run(self) -> SyncOutcome:
        try:
            if not self.settings.writes_to_stdout:
                self._check_tempdir()
            prefixes = self.collect()
            outcome = self._build_writer().write(prefixes)
        except NetlistSyncError as exc:
            self.logger.error("run_failed", error=str(exc), error_type=type(exc).__name__)
            return SyncOutcome.FAILED
        if outcome is WriteOutcome.UNCHANGED:
            return SyncOutcome.UNCHANGED
        return SyncOutcome.UPDATED

    def collect(self) -> PrefixSet:
        """Fetch every source and merge the parsed bodies."""

        results = self.fetch_all(self.settings.urls)
        prefixes = PrefixSet()
        for result in results:
            source_log = self.logger.bind(url=result.url)
            parsed = prefixes.update(parse_prefixes(result.unwrap(), logger=source_log))
            source_log.info("source_parsed", prefixes=parsed)
        if not prefixes:
            self.logger.warning("empty_prefix_set", sources=len(results))
        self.logger.info("prefixes_aggregated", total=len(prefixes), **prefixes.families())
        return prefixes

    def fetch_all(self, urls: Sequence[str]) -> list[FetchResult]:
        """Fetch all ``urls`` concurrently; the first failure aborts the batch.

        Results come back in ``urls`` order. Raises the first ``FetchError``
        observed; fetches that have not started yet are skipped.
        """

        self._cancelled.clear()
        fetcher = self._fetcher or Fetcher(
            self.settings.timeout, logger=self.logger.bind(component="fetcher")
        )
        results: dict[str, FetchResult] = {}
        try:
            workers = min(len(urls), self.max_workers or len(urls))
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fetch") as executor:
                futures: dict[Future[FetchResult], str] = {
                    executor.submit(self._fetch_one, fetcher, url): url for url in urls
                }
                for future in as_completed(futures):
                    try:
                        result = future.result()
                    except CancelledError:
                        continue
                    if isinstance(result.error, FetchCancelledError):
                        continue
                    if result.error is not None:
                        self._abort(futures)
                        raise result.error
                    results[result.url] = result
        finally:
            if self._fetcher is None:
                fetcher.close()
        return [results[url] for url in urls]

    # ------------------------------------------------------------------
    def _fetch_one(self, fetcher: Fetcher, url: str) -> FetchResult:
        if self._cancelled.is_set():
            self.logger.debug("fetch_cancelled", url=url)
            return FetchResult(
                url=url, error=FetchCancelledError(url, "skipped after another source failed")
            )
        result = fetcher.attempt(url)
        if not result.ok:
            self._cancelled.set()
        return result

    def _abort(self, futures: dict[Future[FetchResult], str]) -> None:
        self._cancelled.set()
        for future in futures:
            future.cancel()

    def _build_writer(self) -> AtomicWriter | StdoutWriter:
        if self.settings.writes_to_stdout:
            return StdoutWriter()
        return AtomicWriter(
            self.settings.destfile,
            self.settings.resolve_tempdir(),
            logger=self.logger.bind(component="writer"),
        )

    def _check_tempdir(self) -> None:
        tempdir = self.settings.resolve_tempdir()
        if not tempdir.is_dir():
            raise DestinationIOError(tempdir, "write", "temporary directory does not exist")
        dest_dir = self.settings.destfile.parent
        try:
            same_device = os.stat(tempdir).st_dev == os.stat(dest_dir).st_dev
        except FileNotFoundError as exc:
            raise DestinationIOError(dest_dir, "write", "destination directory does not exist") from exc
        if not same_device:
            self.logger.warning(
                "tempdir_on_other_filesystem",
                tempdir=str(tempdir),
                destination=str(self.settings.destfile),
            )


__all__ = ["Coordinator", "SyncOutcome"]
