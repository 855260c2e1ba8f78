"""Logging configuration built around structlog JSON logging."""

from __future__ import annotations

import logging
import logging.config
import logging.handlers
import os

import structlog

SYSLOG_IDENT = "netlist-sync: "
_SYSLOG_SOCKETS = ("/dev/log", "/var/run/syslog")

_LOGGING_INITIALISED = False


def _syslog_address() -> str | tuple[str, int]:
    for candidate in _SYSLOG_SOCKETS:
        if os.path.exists(candidate):
            return candidate
    return ("localhost", logging.handlers.SYSLOG_UDP_PORT)


def syslog_handler() -> logging.handlers.SysLogHandler:
    """Factory used by dictConfig for the default system-log sink."""

    handler = logging.handlers.SysLogHandler(
        address=_syslog_address(),
        facility=logging.handlers.SysLogHandler.LOG_DAEMON,
    )
    handler.ident = SYSLOG_IDENT
    return handler


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Configure structlog + stdlib handlers and return application logger.

    Verbose runs log everything to the console (stderr); otherwise INFO and
    above go to the system log, which is what cron invocations want.
    """

    global _LOGGING_INITIALISED
    if not _LOGGING_INITIALISED:
        if verbose:
            handler: dict = {
                "class": "logging.StreamHandler",
                "level": "DEBUG",
                "formatter": "plain",
                "stream": "ext://sys.stderr",
            }
        else:
            handler = {
                "()": "netlist_sync.logging_conf.syslog_handler",
                "level": "INFO",
                "formatter": "plain",
            }
        logging.config.dictConfig(
            {
                "version": 1,
                "disable_existing_loggers": False,
                "formatters": {
                    "plain": {
                        "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                        "fmt": "%(asctime)s %(levelname)s %(name)s %(message)s",
                    }
                },
                "handlers": {"sink": handler},
                "loggers": {
                    "netlist_sync": {
                        "handlers": ["sink"],
                        "level": "DEBUG" if verbose else "INFO",
                        "propagate": False,
                    },
                },
            }
        )

        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _LOGGING_INITIALISED = True
    return structlog.get_logger("netlist_sync")


def get_logger(component: str) -> structlog.BoundLogger:
    """Return a logger for ``component`` without touching handler setup."""

    return structlog.get_logger(f"netlist_sync.{component}").bind(component=component)


__all__ = ["configure_logging", "get_logger", "syslog_handler"]
