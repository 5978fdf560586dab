# src/testrelay/telemetry/logger/base.py

import logging
import sys

import structlog
from structlog.typing import EventDict, FilteringBoundLogger, WrappedLogger

BASE_LOGGER_NAME = "testrelay"

# Third-party loggers that are noisy at DEBUG.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "asyncio")


def drop_none_values(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Removes keys bound to None so run-scoped fields only show when set."""
    return {key: value for key, value in event_dict.items() if value is not None}


def _console_renderer(json_logs: bool) -> structlog.types.Processor:
    if json_logs:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def _file_handler(log_file: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=structlog.processors.JSONRenderer(sort_keys=True))
    )
    handler.setLevel(level)
    return handler


def setup_logging(level: int = logging.INFO, json_logs: bool = False, log_file: str | None = None) -> None:
    """
    Routes structlog through the stdlib root logger.

    Console output goes to stderr, rendered for humans or as JSON. When
    `log_file` is given every record is also written there as JSON.
    Calling this again replaces the previous handlers.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            drop_none_values,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=_console_renderer(json_logs)))
    root_logger.addHandler(console_handler)

    slog = structlog.get_logger(BASE_LOGGER_NAME)
    if log_file:
        try:
            root_logger.addHandler(_file_handler(log_file, level))
        except OSError as e:
            slog.error("Could not open log file", log_file=log_file, error=str(e))

    slog.debug(
        "Logging configured",
        log_level=logging.getLevelName(level),
        json_console=json_logs,
        log_file=log_file,
    )


StructLogger = FilteringBoundLogger

# 🔼⚙️
