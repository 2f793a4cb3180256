"""Process-side logging setup: stdlib handlers with structlog event rendering."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Final

import structlog

from bufrplan.constants import LOG_PREFIX

_DEFAULT_LOGGER_NAME: Final[str] = "bufrplan"
_VERBOSITY_LEVELS: Final[dict[int, int]] = {
    1: logging.INFO,
    2: logging.DEBUG,
    3: logging.DEBUG,
}
_HANDLER_MARKER: Final[str] = "_bufrplan_handler"


class _PrefixedFormatter(logging.Formatter):
    """``YYYY-mm-dd HH:MM:SS [bufrplan] LEVEL: message``."""

    def __init__(self) -> None:
        super().__init__(
            fmt=f"%(asctime)s {LOG_PREFIX} %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )


class _JsonLineFormatter(logging.Formatter):
    """Formatter that emits one canonical JSON object per log line."""

    def format(self, record: logging.LogRecord) -> str:
        event: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).strftime(
                "%Y-%m-%dT%H:%M:%S.%fZ"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info is not None:
            event["exception"] = self.formatException(record.exc_info)
        return json.dumps(event, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def level_for_verbosity(verbosity: int) -> int:
    return _VERBOSITY_LEVELS.get(verbosity, logging.INFO)


def setup_logging(
    debug_config: Mapping[str, object] | None = None,
    *,
    json_lines: bool = False,
    stream: IO[str] | None = None,
    logger_name: str = _DEFAULT_LOGGER_NAME,
) -> logging.Logger:
    """Configure the ``bufrplan`` logger from a ``debug`` config sub-tree.

    Parameters
    ----------
    debug_config:
        Mapping shaped like the ``debug`` section (``enable``, ``verbosity``, ``logFile``).
        When debug is disabled only warnings and errors are emitted.
    json_lines:
        Emit JSON objects instead of prefixed text lines.
    stream:
        Destination when no ``logFile`` is configured; defaults to ``sys.stderr``.
    """

    cfg = dict(debug_config or {})
    enabled = bool(cfg.get("enable", False))
    raw_verbosity = cfg.get("verbosity", 1)
    verbosity = raw_verbosity if isinstance(raw_verbosity, int) else 1
    level = level_for_verbosity(verbosity) if enabled else logging.WARNING
    log_file = str(cfg.get("logFile") or "")

    logger = logging.getLogger(logger_name)
    for existing in list(logger.handlers):
        if getattr(existing, _HANDLER_MARKER, False):
            logger.removeHandler(existing)
            existing.close()

    handler: logging.Handler
    if enabled and log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(_JsonLineFormatter() if json_lines else _PrefixedFormatter())
    setattr(handler, _HANDLER_MARKER, True)

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False

    _configure_structlog(json_lines=json_lines, timing=enabled and verbosity >= 3)
    return logger


def _configure_structlog(*, json_lines: bool, timing: bool) -> None:
    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
    ]
    if timing:
        processors.append(structlog.processors.TimeStamper(fmt="iso", key="ts"))
    if json_lines:
        processors.append(structlog.processors.JSONRenderer(sort_keys=True))
    else:
        processors.append(structlog.processors.KeyValueRenderer(key_order=["event"]))
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


__all__ = ["level_for_verbosity", "setup_logging"]
