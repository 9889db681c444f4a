"""structlog configuration for catalogctl.

All log output goes to stderr so stdout stays parseable (``--json``,
``--quiet``). Two renderings:

- console (default): key=value lines, colored on a TTY
- JSON (``--log-json``): one object per line

The stores and the inventory client log through stdlib ``logging``;
services log through structlog. Both pass through one
``ProcessorFormatter`` and come out identical.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

CATALOG_LOGGER = "catalogctl"

# Chatty dependencies; held at WARNING even under --verbose.
_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "urllib3")

_SHARED_PROCESSORS: list[structlog.types.Processor] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    **context: Any,
) -> None:
    """(Re)configure logging for one CLI invocation.

    Args:
        verbose: DEBUG for ``catalogctl.*`` loggers; otherwise WARNING.
        log_json: Render JSON lines instead of console lines.
        **context: Bound to every event of this invocation
            (e.g. ``command="product"``).
    """
    structlog.configure(
        processors=[*_SHARED_PROCESSORS, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=_SHARED_PROCESSORS,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(logging.WARNING)

    logging.getLogger(CATALOG_LOGGER).setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    structlog.contextvars.clear_contextvars()
    if context:
        structlog.contextvars.bind_contextvars(**context)
