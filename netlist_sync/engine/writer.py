"""Serialize prefix sets and replace the destination atomically."""

from __future__ import annotations

import enum
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import IO, Iterable

import structlog

from ..errors import DestinationIOError
from ..logging_conf import get_logger
from .parser import NetworkPrefix

NEW_FILE_MODE = 0o644


class WriteOutcome(str, enum.Enum):
    UPDATED = "updated"
    UNCHANGED = "unchanged"


def serialize(prefixes: Iterable[NetworkPrefix]) -> bytes:
    """One canonical CIDR per line, ascending, each line newline-terminated."""

    return "".join(f"{prefix}\n" for prefix in sorted(prefixes)).encode("ascii")


class AtomicWriter:
    """Replace ``destination`` only when its content actually changes.

    The temporary file is created in ``tempdir``, which has to live on the
    same filesystem as the destination for ``os.replace`` to be atomic.
    """

    def __init__(
        self,
        destination: Path,
        tempdir: Path | None = None,
        logger: structlog.BoundLogger | None = None,
    ) -> None:
        self.destination = Path(destination)
        self.tempdir = Path(tempdir) if tempdir is not None else self.destination.parent
        self.logger = logger or get_logger("writer")

    def write(self, prefixes: Iterable[NetworkPrefix]) -> WriteOutcome:
        payload = serialize(prefixes)
        if self.read_current() == payload:
            self.logger.info("destination_unchanged", path=str(self.destination))
            return WriteOutcome.UNCHANGED
        self._replace(payload)
        self.logger.info("destination_updated", path=str(self.destination), size=len(payload))
        return WriteOutcome.UPDATED

    def read_current(self) -> bytes | None:
        """Current destination bytes, or ``None`` when the file does not exist yet."""

        try:
            return self.destination.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise DestinationIOError(self.destination, "read", str(exc)) from exc

    def _replace(self, payload: bytes) -> None:
        try:
            handle = tempfile.NamedTemporaryFile(
                mode="wb",
                dir=self.tempdir,
                prefix=f".{self.destination.name}.",
                suffix=".tmp",
                delete=False,
            )
        except OSError as exc:
            raise DestinationIOError(self.tempdir, "write", str(exc)) from exc
        temp_path = Path(handle.name)
        stage = "write"
        try:
            with handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            self._apply_mode(temp_path)
            stage = "rename"
            os.replace(temp_path, self.destination)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise DestinationIOError(self.destination, stage, str(exc)) from exc
        self._sync_directory()

    def _apply_mode(self, temp_path: Path) -> None:
        if self.destination.exists():
            shutil.copymode(self.destination, temp_path)
        else:
            os.chmod(temp_path, NEW_FILE_MODE)

    def _sync_directory(self) -> None:
        # The rename already happened; a failed directory sync cannot undo it.
        if not hasattr(os, "O_DIRECTORY"):
            return
        try:
            fd = os.open(self.destination.parent, os.O_RDONLY | os.O_DIRECTORY)
            try:
                os.fsync(fd)
            finally:
                os.close(fd)
        except OSError as exc:
            self.logger.warning(
                "directory_sync_failed", path=str(self.destination.parent), error=str(exc)
            )


class StdoutWriter:
    """Write the serialized list to a stream; used for the ``-`` destination."""

    def __init__(self, stream: IO[bytes] | None = None) -> None:
        self.stream = stream

    def write(self, prefixes: Iterable[NetworkPrefix]) -> WriteOutcome:
        stream = self.stream if self.stream is not None else sys.stdout.buffer
        stream.write(serialize(prefixes))
        stream.flush()
        return WriteOutcome.UPDATED


__all__ = ["AtomicWriter", "NEW_FILE_MODE", "StdoutWriter", "WriteOutcome", "serialize"]
