from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from netlist_sync.config import DEFAULT_TIMEOUT, SyncSettings


def test_defaults(tmp_path: Path) -> None:
    settings = SyncSettings(destfile=tmp_path / "out.txt", urls=["https://example.com/a.txt"])
    assert settings.timeout == DEFAULT_TIMEOUT
    assert settings.verbose is False
    assert settings.resolve_tempdir() == tmp_path
    assert not settings.writes_to_stdout


def test_explicit_tempdir(tmp_path: Path) -> None:
    settings = SyncSettings(
        destfile=tmp_path / "out.txt",
        urls=["http://example.com/a.txt"],
        tempdir=tmp_path / "spool",
    )
    assert settings.resolve_tempdir() == tmp_path / "spool"


def test_dash_means_stdout() -> None:
    settings = SyncSettings(destfile="-", urls=["https://example.com/a.txt"])
    assert settings.writes_to_stdout


def test_urls_required(tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        SyncSettings(destfile=tmp_path / "out.txt", urls=[])


@pytest.mark.parametrize("url", ["ftp://example.com/a.txt", "/local/path.txt", "example.com/a.txt"])
def test_rejects_non_http_urls(tmp_path: Path, url: str) -> None:
    with pytest.raises(ValidationError):
        SyncSettings(destfile=tmp_path / "out.txt", urls=[url])


def test_urls_are_stripped(tmp_path: Path) -> None:
    settings = SyncSettings(destfile=tmp_path / "out.txt", urls=["  https://example.com/a.txt "])
    assert settings.urls == ["https://example.com/a.txt"]


@pytest.mark.parametrize("timeout", [0, -1])
def test_timeout_must_be_positive(tmp_path: Path, timeout: float) -> None:
    with pytest.raises(ValidationError):
        SyncSettings(destfile=tmp_path / "out.txt", urls=["https://example.com/a.txt"], timeout=timeout)
