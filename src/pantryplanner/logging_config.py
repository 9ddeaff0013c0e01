"""Logging setup for pantryplanner.

Library modules only call :func:`get_logger`. The command-line entry point
calls :func:`configure_logging` once; records then carry the id of the meal
plan and shopping list being worked on, set with :class:`LoggingContext`.
"""

import json
import logging
import sys
from contextvars import ContextVar, Token
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pantryplanner.config import Settings

plan_id_ctx: ContextVar[str | None] = ContextVar("plan_id", default=None)
list_id_ctx: ContextVar[str | None] = ContextVar("list_id", default=None)

_CONTEXT_VARS: dict[str, ContextVar[str | None]] = {
    "plan_id": plan_id_ctx,
    "list_id": list_id_ctx,
}

TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s%(context)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def current_context() -> dict[str, str]:
    """Context variables that are currently set."""
    return {name: value for name, var in _CONTEXT_VARS.items() if (value := var.get())}


class ContextFilter(logging.Filter):
    """Copy the plan/list context onto every record passing the handler."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_context()
        record.planner_context = context
        # plan=1a2b3c4d, list=5e6f7a8b
        parts = [f"{name.removesuffix('_id')}={value[:8]}" for name, value in context.items()]
        record.context = f" [{', '.join(parts)}]" if parts else ""
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **getattr(record, "planner_context", {}),
            **getattr(record, "extra_data", {}),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        entry["location"] = f"{record.filename}:{record.lineno} ({record.funcName})"
        return json.dumps(entry, default=str)


class ContextLogger(logging.LoggerAdapter):
    """Logger adapter that files keyword ``extra`` fields under ``extra_data``.

    The JSON formatter writes them out as top-level keys; the text formatter
    ignores them.
    """

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        fields = kwargs.pop("extra", None) or {}
        kwargs["extra"] = {"extra_data": {**self.extra, **fields}}
        return msg, kwargs


def get_logger(name: str, **fields: Any) -> ContextLogger:
    """Get a logger for ``name``; ``fields`` are added to every JSON record."""
    return ContextLogger(logging.getLogger(name), fields)


def configure_logging(
    settings: "Settings",
    verbose: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Send log records to stderr (stdout is reserved for command output).

    Args:
        settings: Supplies ``log_level`` and ``log_format`` ("text" or "json").
        verbose: Log at DEBUG regardless of ``settings.log_level``.
        log_file: Optionally also write records to this file.
    """
    level_name = "DEBUG" if verbose else settings.log_level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    json_format = settings.log_format.lower() == "json"
    formatter = JsonFormatter() if json_format else logging.Formatter(TEXT_FORMAT, DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # SQLAlchemy echoes every statement at INFO
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("pantryplanner").setLevel(level)

    get_logger(__name__).debug(
        f"Logging configured: level={level_name}, format={'json' if json_format else 'text'}"
    )


class LoggingContext:
    """Set the plan and/or shopping list id for records logged inside the block."""

    def __init__(self, plan_id: str | None = None, list_id: str | None = None):
        self._values = {"plan_id": plan_id, "list_id": list_id}
        self._tokens: dict[str, Token] = {}

    def __enter__(self) -> "LoggingContext":
        for name, value in self._values.items():
            if value is not None:
                self._tokens[name] = _CONTEXT_VARS[name].set(value)
        return self

    def __exit__(self, *args: Any) -> None:
        for name, token in self._tokens.items():
            _CONTEXT_VARS[name].reset(token)
        self._tokens.clear()
