"""Pydantic models describing a single sync run."""

from __future__ import annotations

from pathlib import Path

import httpx
from pydantic import BaseModel, Field, field_validator

STDOUT_DESTINATION = "-"
DEFAULT_TIMEOUT = 30.0


class SyncSettings(BaseModel):
    """Parsed command line configuration consumed by the coordinator."""

    destfile: Path = Field(description="Destination file, or '-' for standard output.")
    urls: list[str] = Field(min_length=1, description="Sources to download and aggregate.")
    verbose: bool = Field(default=False, description="Log to the console instead of syslog.")
    tempdir: Path | None = Field(
        default=None,
        description="Directory for the temporary file; must share a filesystem with destfile.",
    )
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Per-source timeout in seconds.")

    @field_validator("urls")
    @classmethod
    def _validate_urls(cls, value: list[str]) -> list[str]:
        cleaned: list[str] = []
        for raw in value:
            text = raw.strip()
            try:
                url = httpx.URL(text)
            except httpx.InvalidURL as exc:
                raise ValueError(f"Invalid URL {raw!r}: {exc}") from exc
            if url.scheme not in ("http", "https") or not url.host:
                raise ValueError(f"Only absolute http(s) URLs are supported: {raw!r}")
            cleaned.append(text)
        return cleaned

    @property
    def writes_to_stdout(self) -> bool:
        return str(self.destfile) == STDOUT_DESTINATION

    def resolve_tempdir(self) -> Path:
        """Return the directory temp files go to, defaulting to the destination's own."""

        if self.tempdir is not None:
            return self.tempdir
        return self.destfile.parent


__all__ = ["DEFAULT_TIMEOUT", "STDOUT_DESTINATION", "SyncSettings"]
