"""
Structured JSON logging for the inventory kernel.

Every record under the ``inventory_kernel`` logger becomes one JSON line:
``ts``, ``level``, ``logger``, ``message``, then the bound audit context
(``actor_id``, ``table``, ``action_type``), then the ``extra={}`` fields of
the call, then ``exc_*`` fields when an exception is attached.

Context is carried in one ContextVar, so values bound by the catalog
service or the audit recorder follow the call into the executor's
``statement_executed`` / ``statement_failed`` records on the same thread.
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
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Any

_LOGGER_PREFIX = "inventory_kernel"

# Who is changing what: the only fields LogContext accepts
CONTEXT_FIELDS = ("actor_id", "table", "action_type")

_EMPTY: MappingProxyType = MappingProxyType({})
_context: ContextVar[MappingProxyType] = ContextVar("inventory_log_context", default=_EMPTY)


class LogContext:
    """Audit context attached to every record emitted while it is bound."""

    @staticmethod
    def _checked(fields: dict[str, Any]) -> dict[str, Any]:
        unknown = set(fields) - set(CONTEXT_FIELDS)
        if unknown:
            raise TypeError(f"Unknown log context field(s): {sorted(unknown)}")
        return {k: v for k, v in fields.items() if v is not None}

    @classmethod
    def set(cls, **fields: Any) -> None:
        """Merge ``fields`` into the current context; None values are skipped."""
        _context.set(MappingProxyType({**_context.get(), **cls._checked(fields)}))

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[None]:
        """Bind ``fields`` for the duration of the block, then restore."""
        token = _context.set(MappingProxyType({**_context.get(), **cls._checked(fields)}))
        try:
            yield
        finally:
            _context.reset(token)

    @staticmethod
    def get_all() -> dict[str, Any]:
        return dict(_context.get())

    @staticmethod
    def clear() -> None:
        _context.set(_EMPTY)


# ---------------------------------------------------------------------------
# Formatter
# ---------------------------------------------------------------------------

_RECORD_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "asctime", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, Enum):
        return obj.value
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    """``exc_type``/``exc_message`` plus the data an InventoryKernelError carries."""
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Child of the ``inventory_kernel`` logger, e.g. ``db.executor``."""
    return logging.getLogger(f"{_LOGGER_PREFIX}.{name}")


def _installed(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, "_inventory_kernel", False)]


def configure_logging(
    *,
    level: int | str = logging.INFO,
    handler: logging.Handler | None = None,
) -> None:
    """
    Install the JSON handler on the ``inventory_kernel`` logger.

    A second call is a no-op while a handler installed here is still
    attached.  Handlers added by anyone else (test capture, log shipping)
    are left alone.
    """
    root = logging.getLogger(_LOGGER_PREFIX)
    if _installed(root):
        return

    handler = handler or logging.StreamHandler(sys.stderr)
    handler.setFormatter(StructuredFormatter())
    handler._inventory_kernel = True
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False


def reset_logging() -> None:
    """Remove the handler installed by configure_logging. Used by tests."""
    root = logging.getLogger(_LOGGER_PREFIX)
    for handler in _installed(root):
        root.removeHandler(handler)
    root.setLevel(logging.WARNING)
    root.propagate = True
