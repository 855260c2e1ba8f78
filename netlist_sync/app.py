"""Typer CLI entrypoint for netlist-sync."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Optional, Sequence

import typer
from pydantic import ValidationError
from rich.console import Console

from . import __version__
from .config import DEFAULT_TIMEOUT, SyncSettings
from .logging_conf import configure_logging
from .orchestrator import Coordinator, SyncOutcome

app = typer.Typer(
    help="Download CIDR lists, merge them, and update DESTFILE only when it changes.",
    add_completion=False,
    rich_markup_mode=None,
)

console = Console(stderr=True)

# Base of the usage errors typer raises. Older releases re-export click's
# hierarchy, newer ones ship their own copy, so take it from typer itself.
_USAGE_ERROR: type[Exception] = next(
    cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "ClickException"
)

_OUTCOME_STYLES = {
    SyncOutcome.UPDATED: "green",
    SyncOutcome.UNCHANGED: "dim",
    SyncOutcome.FAILED: "red",
}


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"netlist-sync {__version__}")
        raise typer.Exit(code=0)


@app.command(
    epilog="Exit status: 0 updated, 1 failed, 2 already up to date.",
)
def main(
    destfile: Path = typer.Argument(..., help="Destination file, or '-' to print to stdout."),
    urls: List[str] = typer.Argument(..., help="URLs to download and aggregate."),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log to the console instead of syslog.",
        is_flag=True,
    ),
    tempdir: Optional[Path] = typer.Option(
        None,
        "--tempdir",
        "-t",
        help="Directory for the temporary file (same filesystem as DESTFILE).",
        file_okay=False,
    ),
    timeout: float = typer.Option(
        DEFAULT_TIMEOUT,
        "--timeout",
        envvar="NETLIST_SYNC_TIMEOUT",
        help="Per-source timeout in seconds.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    logger = configure_logging(verbose=verbose)
    try:
        settings = SyncSettings(
            destfile=destfile,
            urls=urls,
            verbose=verbose,
            tempdir=tempdir,
            timeout=timeout,
        )
    except ValidationError as exc:
        logger.error("invalid_arguments", error=str(exc))
        console.print(f"Invalid arguments: {exc.error_count()} error(s)", style="red")
        for error in exc.errors(include_url=False):
            location = ".".join(str(part) for part in error["loc"])
            console.print(f"  {location}: {error['msg']}", style="red")
        raise typer.Exit(code=int(SyncOutcome.FAILED))

    outcome = Coordinator(settings, logger=logger.bind(component="coordinator")).run()
    if verbose:
        console.print(
            f"{settings.destfile}: {outcome.name.lower()}",
            style=_OUTCOME_STYLES[outcome],
        )
    raise typer.Exit(code=int(outcome))


def run(argv: Sequence[str] | None = None) -> None:
    """Console-script entry point.

    Usage errors exit with 1 like any other failure, since 2 tells the caller
    the destination was already up to date.
    """

    command = typer.main.get_command(app)
    try:
        code = command.main(
            args=list(argv) if argv is not None else None,
            prog_name="netlist-sync",
            standalone_mode=False,
        )
    except typer.Abort:
        code = int(SyncOutcome.FAILED)
    except _USAGE_ERROR as exc:
        exc.show()
        code = int(SyncOutcome.FAILED)
    sys.exit(code or 0)


__all__ = ["app", "main", "run"]
