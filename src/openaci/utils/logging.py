"""
openaci logging setup.

structlog events are handed to the stdlib logging tree and rendered there by
structlog's ProcessorFormatter. The console stream and the optional log file
therefore carry the same records, including those emitted by uvicorn and the
model SDKs.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Literal

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

APP_NAME = "openaci"

CONSOLE_HANDLER = "openaci.console"
FILE_HANDLER = "openaci.file"

QUIET_LOGGERS = ("asyncio", "httpcore", "httpx", "openai", "anthropic")


def add_app_context(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Tag every entry with the application name."""
    event_dict.setdefault("app", APP_NAME)
    return event_dict


def _pre_chain() -> list[Processor]:
    # Runs for structlog events before they reach stdlib, and for plain
    # stdlib records inside the formatter.
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        add_app_context,
    ]


def _formatter(format: Literal["json", "console"], colors: bool = False) -> logging.Formatter:
    renderer: list[Processor]
    if format == "json":
        renderer = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        renderer = [
            structlog.dev.ConsoleRenderer(
                colors=colors,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        ]

    return structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_pre_chain() + [structlog.stdlib.ExtraAdder()],
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
    )


def _replace_handlers(root: logging.Logger, handlers: list[logging.Handler]) -> None:
    for handler in list(root.handlers):
        if handler.get_name() in (CONSOLE_HANDLER, FILE_HANDLER):
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        root.addHandler(handler)


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO",
    format: Literal["json", "console"] = "json",
    log_file: Path | None = None,
) -> None:
    """
    Configure structured logging.

    Calling this again replaces the handlers installed by an earlier call.

    Args:
        level: Minimum log level to output
        format: Console format - 'json' for production, 'console' for development
        log_file: Optional file that receives every entry as one JSON object per line
    """
    log_level = getattr(logging, level.upper())

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        *_pre_chain(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console = logging.StreamHandler(sys.stdout)
    console.set_name(CONSOLE_HANDLER)
    console.setFormatter(_formatter(format, colors=sys.stdout.isatty()))
    handlers: list[logging.Handler] = [console]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.set_name(FILE_HANDLER)
        file_handler.setFormatter(_formatter("json"))
        handlers.append(file_handler)

    root = logging.getLogger()
    _replace_handlers(root, handlers)
    root.setLevel(log_level)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a logger, usually named after the calling module."""
    return structlog.get_logger(name)
