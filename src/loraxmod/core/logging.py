"""Structured logging for the engines and the lorax CLI.

Engine modules log through ``structlog.get_logger(__name__)``; events carry
the module as ``logger`` so a file output can be filtered per component
(``loraxmod.diff.engine``, ``loraxmod.schema.loader``, ...).

Supports:
- One or more outputs (stderr, stdout, absolute file path), each JSON or console
- Per-output levels below the root level
- ``verbose`` forcing DEBUG, which surfaces every ``unknown_node_type`` event
- Tracking the first file output so CLI errors can point at it
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from loraxmod.config.models import LoggingConfig

_log_file_path: Path | None = None

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_file_path() -> Path | None:
    """First file destination of the active configuration, if any."""
    return _log_file_path


def configure_logging(
    *,
    config: LoggingConfig | None = None,
    json_format: bool = False,
    level: str = "WARNING",
    verbose: bool = False,
) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        config: Logging section of ``LoraxConfig``. Built from ``json_format``
            and ``level`` (single stderr output) when omitted.
        json_format: Render JSON instead of console lines (no ``config`` only)
        level: Root level (no ``config`` only)
        verbose: Force DEBUG on the root and on every output
    """
    from loraxmod.config.models import LoggingConfig, LogOutputConfig

    if config is None:
        config = LoggingConfig(
            level=level,
            outputs=[LogOutputConfig(format="json" if json_format else "console")],
        )
    if verbose:
        config = config.model_copy(
            update={
                "level": "DEBUG",
                "outputs": [o.model_copy(update={"level": None}) for o in config.outputs],
            }
        )

    root_level = _LEVEL_MAP.get(config.level.upper(), logging.WARNING)
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # Module loggers are created at import time; caching would pin the old level
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    global _log_file_path
    _log_file_path = None

    for output in config.outputs:
        is_console = output.destination in ("stderr", "stdout")
        if not is_console and _log_file_path is None:
            _log_file_path = Path(output.destination)

        handler = _create_handler(output.destination)
        handler.setLevel(_LEVEL_MAP.get((output.level or config.level).upper(), root_level))
        handler.setFormatter(_make_formatter(output.format, is_console, shared_processors))
        root_logger.addHandler(handler)


def _create_handler(destination: str) -> logging.Handler:
    """Create handler for stderr, stdout, or file path."""
    if destination == "stderr":
        return logging.StreamHandler(sys.stderr)
    if destination == "stdout":
        return logging.StreamHandler(sys.stdout)
    path = Path(destination)
    path.parent.mkdir(parents=True, exist_ok=True)
    return logging.FileHandler(path, mode="a", encoding="utf-8")


def _make_formatter(
    fmt: str,
    is_console: bool,
    shared_processors: list[structlog.types.Processor],
) -> structlog.stdlib.ProcessorFormatter:
    renderer: structlog.types.Processor
    if fmt == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=is_console and sys.stderr.isatty(),
            pad_event_to=0,
            pad_level=False,
        )
    return structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )
