"""Structured logging for wc3launcher.

Every component writes snake_case events with key/value context to a log
file through its own structlog logger. Loggers are built by
:func:`create_logger` and never touch structlog's global configuration, so
several of them (one per test, say) can coexist in a process.
"""

import logging
from logging.handlers import RotatingFileHandler
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

from ._paths import get_log_file

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger, Processor, WrappedLogger

LogFormatType = Literal["json", "text"]


def _resolve_level(level: str | None) -> int:
    """Pick the effective level.

    WC3LAUNCHER_DEBUG forces DEBUG; then the explicit level; then
    WC3LAUNCHER_LOG_LEVEL; unknown names fall back to INFO.
    """
    if getenv("WC3LAUNCHER_DEBUG"):
        return logging.DEBUG

    name = level if level is not None else getenv("WC3LAUNCHER_LOG_LEVEL", "info")
    return logging.getLevelNamesMapping().get(name.upper(), logging.INFO)


def _processors(log_format: LogFormatType) -> "list[Processor]":  # noqa: UP037
    processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]
    if log_format == "json":
        processors += [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))
    return processors


def _rotating_logger(
    log_path: Path, level: int, max_bytes: int, backup_count: int
) -> logging.Logger:
    """Build a private stdlib logger that writes to a rotating file."""
    stdlib_logger = logging.getLogger(f"wc3launcher.{log_path.stem}.{id(log_path)}")
    stdlib_logger.handlers.clear()
    stdlib_logger.propagate = False
    stdlib_logger.setLevel(level)

    handler = RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    stdlib_logger.addHandler(handler)
    return stdlib_logger


def create_logger(
    *,
    level: str | None = None,
    log_format: LogFormatType = "json",
    log_file: str | Path = "",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> "FilteringBoundLogger":  # noqa: UP037
    """Create a standalone logger writing to a log file.

    Args:
        level: Log level name (debug, info, warning, error). Overridden by
            WC3LAUNCHER_DEBUG; WC3LAUNCHER_LOG_LEVEL applies when omitted.
        log_format: "json" for one JSON object per line, "text" for
            human-readable lines.
        log_file: Log file path. Uses :func:`get_log_file` when empty.
        max_bytes: Rotate the file at this size. Only used together with
            ``backup_count``.
        backup_count: Number of rotated files to keep.

    Returns:
        A logger that drops events below the effective level.
    """
    log_path = Path(log_file) if log_file else get_log_file()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    effective_level = _resolve_level(level)

    raw_logger: WrappedLogger
    if max_bytes is not None and backup_count is not None:
        raw_logger = _rotating_logger(
            log_path, effective_level, max_bytes, backup_count
        )
    else:
        raw_logger = structlog.WriteLogger(log_path.open("a", encoding="utf-8"))

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            raw_logger,
            processors=_processors(log_format),
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
