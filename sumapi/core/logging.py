from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Standard log record attributes that should not be treated as "extra" context.
_STANDARD_LOG_RECORD_ATTRS = {
    "name",
    "msg",
    "args",
    "created",
    "filename",
    "funcName",
    "levelname",
    "levelno",
    "lineno",
    "module",
    "msecs",
    "message",
    "pathname",
    "process",
    "processName",
    "relativeCreated",
    "thread",
    "threadName",
    "exc_info",
    "exc_text",
    "stack_info",
    "taskName",
    "asctime",
    "level_color",
    "name_color",
    "source_color",
    "reset",
    "color_message",
}

# Context is propagated correctly across async tasks and awaits.
_LOG_CONTEXT: ContextVar[dict[str, Any] | None] = ContextVar("log_context", default=None)

DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

APP_LOGGER_PREFIX = "sumapi"

_DEFAULT_THIRD_PARTY_LEVELS: dict[str, int] = {
    "uvicorn": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.WARNING,
}

# Third-party loggers that are allowed to emit below WARNING.
_ALLOW_BELOW_WARNING: set[str] = {"uvicorn.error"}


def _build_log_format(include_source: bool) -> str:
    """Return the base format string, using formatter-provided color fields."""

    if include_source:
        return (
            "%(level_color)s%(asctime)s | %(levelname)s%(reset)s | "
            "%(name_color)s%(name)s%(reset)s | "
            "%(source_color)s%(filename)s:%(lineno)d%(reset)s | "
            "%(level_color)s%(message)s%(reset)s"
        )

    return (
        "%(level_color)s%(asctime)s | %(levelname)s%(reset)s | "
        "%(name_color)s%(name)s%(reset)s | "
        "%(level_color)s%(message)s%(reset)s"
    )


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {key: value for key, value in record.__dict__.items() if key not in _STANDARD_LOG_RECORD_ATTRS}


class ContextInjectionFilter(logging.Filter):
    """Injects contextvars-based fields into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _LOG_CONTEXT.get()
        if not context:
            return True

        for key, value in context.items():
            if key in _STANDARD_LOG_RECORD_ATTRS or hasattr(record, key):
                continue
            setattr(record, key, value)
        return True


class AppLoggingFilter(logging.Filter):
    """Apply consistent log levels to app vs third-party loggers."""

    def __init__(
        self,
        root_level: int,
        *,
        app_prefix: str,
        third_party_levels: Mapping[str, int],
    ) -> None:
        super().__init__()
        self.root_level = root_level
        self.app_prefix = app_prefix
        self.third_party_levels = dict(third_party_levels)

    def _is_app_logger(self, name: str) -> bool:
        return name == "__main__" or name == self.app_prefix or name.startswith(f"{self.app_prefix}.")

    def _match_third_party_level(self, name: str) -> int | None:
        """Return the most specific matching third-party level, if any."""

        best_level: int | None = None
        best_len = -1
        for prefix, level in self.third_party_levels.items():
            if name == prefix or name.startswith(prefix + "."):
                if len(prefix) > best_len:
                    best_level = level
                    best_len = len(prefix)
        return best_level

    def filter(self, record: logging.LogRecord) -> bool:
        if self._is_app_logger(record.name):
            return record.levelno >= self.root_level

        matched_level = self._match_third_party_level(record.name)
        threshold = matched_level if matched_level is not None else logging.WARNING
        if threshold < logging.WARNING and record.name not in _ALLOW_BELOW_WARNING:
            threshold = logging.WARNING
        return record.levelno >= threshold


class SmartContextFormatter(logging.Formatter):
    """Formatter that appends all extra fields as key=value context."""

    def format(self, record: logging.LogRecord) -> str:
        base_message = super().format(record)
        extra_fields = _extra_fields(record)
        if not extra_fields:
            return base_message

        context_str = " ".join(f"{key}={value}" for key, value in extra_fields.items())
        return f"{base_message} [{context_str}]"


class ColorFormatter(SmartContextFormatter):
    """Colorize timestamp+level+message by level, name/source by fixed blues."""

    _RESET = "\x1b[0m"
    _LEVEL_COLORS = {
        "DEBUG": "\x1b[36m",  # cyan
        "INFO": "\x1b[32m",  # green
        "WARNING": "\x1b[33m",  # yellow
        "ERROR": "\x1b[31m",  # red
        "CRITICAL": "\x1b[1;31m",  # bold red
    }
    _NAME_COLOR = "\x1b[34m"  # blue
    _SOURCE_COLOR = "\x1b[94m"  # bright blue

    def format(self, record: logging.LogRecord) -> str:
        record.level_color = self._LEVEL_COLORS.get(record.levelname, "")  # type: ignore[attr-defined]
        record.name_color = self._NAME_COLOR  # type: ignore[attr-defined]
        record.source_color = self._SOURCE_COLOR  # type: ignore[attr-defined]
        record.reset = self._RESET  # type: ignore[attr-defined]
        return super().format(record)


class JSONContextFormatter(logging.Formatter):
    """One JSON object per line; extra and context fields become top-level keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "caller": f"{record.filename}:{record.lineno}",
        }
        for key, value in _extra_fields(record).items():
            payload.setdefault(key, value)
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        if record.stack_info:
            payload["stack"] = self.formatStack(record.stack_info)
        return json.dumps(payload, default=str)


@contextmanager
def log_context(**kwargs: Any) -> Iterator[None]:
    """Temporarily attach context fields to all log lines in this scope."""

    current = _LOG_CONTEXT.get() or {}
    new_context = {**current, **kwargs}
    token = _LOG_CONTEXT.set(new_context)
    try:
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def get_log_context() -> Mapping[str, Any]:
    """Return the current logging context (useful for debugging/tests)."""

    return _LOG_CONTEXT.get() or {}


def _resolve_log_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper().strip())
    return level if isinstance(level, int) else logging.INFO


def _build_formatter(log_format: str) -> logging.Formatter:
    if log_format == "json":
        return JSONContextFormatter()

    if sys.stdout.isatty():
        return ColorFormatter(_build_log_format(include_source=True), datefmt=DEFAULT_DATE_FORMAT)

    # Strip color fields from the format when ANSI colors are disabled.
    plain_format = "%(asctime)s | %(levelname)s | %(name)s | %(filename)s:%(lineno)d | %(message)s"
    return SmartContextFormatter(plain_format, datefmt=DEFAULT_DATE_FORMAT)


def _reset_logging_state() -> logging.Logger:
    """Reset handlers and logger state so configuration is deterministic."""

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    for name in logging.root.manager.loggerDict:
        logger = logging.getLogger(name)
        logger.handlers = []
        logger.propagate = True
        logger.setLevel(logging.NOTSET)

    logging.captureWarnings(True)
    return root_logger


def setup_logging(*, log_level: str = "info", log_format: str = "json") -> None:
    """
    Configure global, context-aware logging for the application.

    log_format "json" writes one JSON object per line; "text" writes
    pipe-separated lines with trailing key=value context.
    """
    root_level = _resolve_log_level(log_level)
    root_logger = _reset_logging_state()
    # Per-logger thresholds are enforced by AppLoggingFilter.
    root_logger.setLevel(logging.DEBUG)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_build_formatter(log_format))
    handler.addFilter(ContextInjectionFilter())
    handler.addFilter(
        AppLoggingFilter(
            root_level,
            app_prefix=APP_LOGGER_PREFIX,
            third_party_levels=_DEFAULT_THIRD_PARTY_LEVELS,
        )
    )
    root_logger.addHandler(handler)

    logging.getLogger(__name__).info(
        "Logging configured",
        extra={"log_level": logging.getLevelName(root_level), "log_format": log_format},
    )
