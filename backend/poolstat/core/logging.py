"""Contextual logging for poolstat.

Reports go to stdout, so every log record is written to stderr.  Loggers
carry a dict of structured context (``with_context``) that is appended to
each message as ``key=value`` pairs.
"""

import logging
import sys
from typing import Any, MutableMapping

_LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContextualLogger(logging.LoggerAdapter):
    """LoggerAdapter that carries structured context between calls."""

    def __init__(self, logger: logging.Logger, extra: dict[str, Any] | None = None) -> None:
        super().__init__(logger, extra or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        if not self.extra:
            return msg, kwargs
        context = " ".join(f"{key}={value}" for key, value in self.extra.items())
        return f"{msg} [{context}]", kwargs

    def with_context(self, **kwargs: Any) -> "ContextualLogger":
        """Return a new logger with ``kwargs`` merged into the current context."""
        return ContextualLogger(self.logger, {**self.extra, **kwargs})


class PoolStatHandler(logging.StreamHandler):
    """Stderr handler installed by ``configure_logging``."""


def configure_logging(level: str | int = "WARNING") -> None:
    """Install a stderr handler on the ``poolstat`` logger.

    Safe to call more than once: the previous handler is replaced so it
    always writes to the current ``sys.stderr``.
    """
    root = logging.getLogger("poolstat")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    root.setLevel(level)

    for existing in [h for h in root.handlers if isinstance(h, PoolStatHandler)]:
        root.removeHandler(existing)
    handler = PoolStatHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
    root.propagate = False


logger = ContextualLogger(logging.getLogger("poolstat"))
