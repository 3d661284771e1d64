"""
Module: marketplace_kernel.logging_config
Responsibility: Structured JSON logging for the kernel, the service layer
    and the HTTP surface.  One JSON object per line; request-scoped fields
    (request id, requesting profile, job, contract) ride along on every
    record emitted while they are bound.
Architecture position: Kernel root.  Imported by every layer; imports
    nothing from the kernel.

Conventions:
    - The log message is a snake_case event name (``job_paid``,
      ``deposit_rejected``); the details go in ``extra``.
    - Money and timestamps in ``extra`` are rendered as strings, so a
      Decimal never loses precision on its way to the log pipeline.
    - Kernel exceptions logged with exc_info contribute their ``code`` and
      public attributes as ``exc_*`` fields.
"""

__all__ = [
    "CONTEXT_FIELDS",
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

NAMESPACE = "marketplace_kernel"

CONTEXT_FIELDS = ("request_id", "profile_id", "job_id", "contract_id")

_context: dict[str, ContextVar[str | None]] = {
    name: ContextVar(f"marketplace_log_{name}", default=None)
    for name in CONTEXT_FIELDS
}


def _var(name: str) -> ContextVar[str | None]:
    try:
        return _context[name]
    except KeyError:
        raise TypeError(f"unknown log context field: {name!r}") from None


class LogContext:
    """
    Request-scoped log fields held in context variables.

    Values are stored as strings.  Context variables are copied into the
    threadpool that runs sync FastAPI handlers, so fields bound by the
    request middleware are visible to kernel loggers.
    """

    @staticmethod
    def set(**fields: Any) -> None:
        """Set the given fields; None leaves a field untouched."""
        for name, value in fields.items():
            var = _var(name)
            if value is not None:
                var.set(str(value))

    @staticmethod
    def get_all() -> dict[str, str]:
        return {
            name: value
            for name, var in _context.items()
            if (value := var.get()) is not None
        }

    @staticmethod
    def clear() -> None:
        for var in _context.values():
            var.set(None)

    @staticmethod
    @contextmanager
    def bind(**fields: Any) -> Iterator[None]:
        """Bind fields for the duration of a ``with`` block, then restore."""
        tokens = [
            (var, var.set(str(value)))
            for var, value in ((_var(name), value) for name, value in fields.items())
            if value is not None
        ]
        try:
            yield
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


# Attributes every LogRecord has; anything else on a record came from extra=
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _to_json(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    # Decimal included: money keeps its exact digits
    return str(value)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_") and name != "code":
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render a record as one JSON line: ts, level, logger, message, fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for name, value in vars(record).items():
            if name not in _RECORD_ATTRS:
                payload.setdefault(name, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_to_json)


def get_logger(name: str) -> logging.Logger:
    """Logger ``marketplace_kernel.<name>``."""
    return logging.getLogger(f"{NAMESPACE}.{name}")


_state_lock = threading.Lock()
_installed_handler: logging.Handler | None = None


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the ``marketplace_kernel`` logger.

    Only the first call has an effect; later calls (from the app factory,
    the scripts, a test session) are no-ops until reset_logging().
    """
    global _installed_handler
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    with _state_lock:
        if _installed_handler is not None:
            return
        _installed_handler = handler or logging.StreamHandler(stream or sys.stderr)
        _installed_handler.setFormatter(StructuredFormatter())

        logger = logging.getLogger(NAMESPACE)
        logger.setLevel(level)
        logger.propagate = False
        logger.addHandler(_installed_handler)


def reset_logging() -> None:
    """Remove the installed handler so configure_logging() runs again. Tests only."""
    global _installed_handler
    with _state_lock:
        logger = logging.getLogger(NAMESPACE)
        logger.handlers.clear()
        logger.setLevel(logging.WARNING)
        _installed_handler = None
