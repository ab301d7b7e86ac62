"""
Snapshot encoding for audit before/after values.

Snapshots are opaque to the kernel: whatever the caller hands over is
stored as one canonical JSON document.  No diffing, no partial encoding.
"""

import json
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def _json_serializer(obj: Any) -> Any:
    """
    Custom JSON serializer for types not natively supported.

    Raises:
        TypeError: If object type is not supported.
    """
    if isinstance(obj, Decimal):
        return str(obj.normalize())
    if isinstance(obj, (datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, bytes):
        return obj.hex()

    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")


def canonicalize_json(data: Any) -> str:
    """Sorted keys, no whitespace, stable handling of Decimal/datetime."""
    return json.dumps(
        data,
        sort_keys=True,
        separators=(",", ":"),
        default=_json_serializer,
    )


def encode_snapshot(value: Any) -> str | None:
    """
    Encode a before/after snapshot for the ``history`` table.

    ``None`` stays ``None``.  Everything else, ``str`` included, is stored
    as canonical JSON so ``decode_snapshot`` always reads it back.
    """
    if value is None:
        return None
    return canonicalize_json(value)


def decode_snapshot(text: str | None) -> Any:
    """Inverse of ``encode_snapshot``."""
    if text is None:
        return None
    return json.loads(text)
