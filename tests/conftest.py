"""Shared fixtures: fake HTTP sources and settings builders."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest
import structlog

from netlist_sync.config import SyncSettings
from netlist_sync.engine import Fetcher


class FakeSources:
    """Serve canned bodies per URL through ``httpx.MockTransport``.

    A route is either a body string (status 200), a ``(status, body)`` tuple,
    or an httpx exception class raised for that URL.
    """

    def __init__(self, routes: dict[str, Any] | None = None) -> None:
        self.routes: dict[str, Any] = dict(routes or {})
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(str(request.url))
        if route is None:
            return httpx.Response(404, text="not found")
        if isinstance(route, type) and issubclass(route, Exception):
            raise route("simulated failure", request=request)
        if isinstance(route, tuple):
            status, body = route
            return httpx.Response(status, text=body)
        return httpx.Response(200, text=route)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def fetcher(self, timeout: float = 5.0) -> Fetcher:
        return Fetcher(timeout, transport=self.transport)

    @property
    def requested_urls(self) -> list[str]:
        return [str(request.url) for request in self.requests]


@pytest.fixture(autouse=True)
def log_events() -> Iterable[list[dict]]:
    """Capture structlog events instead of printing them."""

    with structlog.testing.capture_logs() as events:
        yield events


@pytest.fixture
def fake_sources() -> Callable[..., FakeSources]:
    def _builder(routes: dict[str, Any] | None = None) -> FakeSources:
        return FakeSources(routes)

    return _builder


@pytest.fixture
def destfile(tmp_path: Path) -> Path:
    return tmp_path / "blocklist.txt"


@pytest.fixture
def make_settings(destfile: Path) -> Callable[..., SyncSettings]:
    def _builder(urls: list[str], **overrides: Any) -> SyncSettings:
        base: dict[str, Any] = {"destfile": destfile, "urls": urls, "timeout": 5}
        base.update(overrides)
        return SyncSettings(**base)

    return _builder
