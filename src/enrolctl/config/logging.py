"""Route enrolctl logs to stderr through structlog.

The allocation stages emit structlog events (``allocate.done``,
``collision.cross_cohort``). Services and infrastructure use plain
``logging`` loggers. A single :class:`structlog.stdlib.ProcessorFormatter`
on the root handler renders both, as console lines by default or as JSON
lines under ``--log-json``. Stdout stays reserved for command results.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.types import Processor

PACKAGE_LOGGER = "enrolctl"

# Held at WARNING even under --verbose.
QUIET_LOGGERS = ("alembic", "sqlalchemy")


def _pre_chain() -> list[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _final_processors(log_json: bool) -> list[Processor]:
    if log_json:
        return [
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(sort_keys=True),
        ]
    return [
        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
        structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler. Safe to call more than once.

    Args:
        verbose: Let ``enrolctl.*`` loggers through at DEBUG instead of WARNING.
        log_json: Render one JSON object per line.
    """
    pre_chain = _pre_chain()
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=_final_processors(log_json),
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
