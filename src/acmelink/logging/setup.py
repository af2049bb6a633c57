"""Log formatting for acmelink.

Library modules log through ``logging.getLogger(__name__)`` and attach
exchange context with ``extra=``::

    log.debug("Fetched directory", extra={"provider": "PebbleAcmeProvider",
                                          "server_uri": "acme://pebble"})

The formatters here render those context fields: as JSON members in
:class:`StructuredFormatter`, as ``key=value`` pairs in
:class:`TextFormatter`.  Installing a handler is left to applications;
the CLI does it through :func:`configure_logging`.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from acmelink.config.settings import LoggingSettings

# Context attributes set via ``extra=`` by acmelink modules, in output order
CONTEXT_FIELDS: tuple[str, ...] = (
    "provider",
    "server_uri",
    "url",
    "status",
    "problem_type",
    "challenge_type",
)


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return {
        name: getattr(record, name)
        for name in CONTEXT_FIELDS
        if getattr(record, name, None) is not None
    }


class StructuredFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message, context."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        data.update(_context(record))

        if record.exc_info and record.exc_info[0] is not None:
            data["exception"] = self.formatException(record.exc_info)

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Console formatter; context fields follow the message."""

    _FMT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(fmt=self._FMT, datefmt="%Y-%m-%d %H:%M:%S")

    def formatMessage(self, record: logging.LogRecord) -> str:  # noqa: N802
        line = super().formatMessage(record)
        context = _context(record)
        if context:
            line += " [" + " ".join(f"{k}={v}" for k, v in context.items()) + "]"
        return line


def configure_logging(settings: LoggingSettings) -> logging.Logger:
    """Install a stderr handler on the ``acmelink`` logger.

    Replaces handlers from earlier calls and stops propagation to the
    root logger.  Returns the ``acmelink`` logger.
    """
    logger = logging.getLogger("acmelink")
    logger.setLevel(getattr(logging, settings.level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        StructuredFormatter() if settings.format == "json" else TextFormatter(),
    )
    logger.addHandler(handler)
    return logger
