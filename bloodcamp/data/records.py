"""Helpers for reading PocketBase records and building filters.

Records come back either as SDK Record objects (attribute access) or as plain
dicts (batch responses, realtime payloads); `field_value` reads both."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

CAMPS = "camps"
DONORS = "donors"
REQUESTS = "requests"


def field_value(record: Any, name: str, default: Any = None) -> Any:
    """Read a field from a Record object or a dict"""
    if isinstance(record, dict):
        value = record.get(name, default)
    else:
        value = getattr(record, name, default)
    return default if value is None else value


def parse_datetime(value: Any) -> datetime | None:
    """Parse a PocketBase datetime ("2025-06-01 10:30:00.123Z") into an aware datetime.

    Empty strings (unset date fields) become None.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value if value.tzinfo else value.replace(tzinfo=UTC)
    try:
        parsed = datetime.fromisoformat(str(value).strip().replace(" ", "T").replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=UTC)


def format_datetime(value: datetime) -> str:
    """Format an aware datetime the way PocketBase stores it"""
    return value.astimezone(UTC).strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def quote(value: str) -> str:
    """Quote a string literal for a PocketBase filter expression"""
    escaped = str(value).replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def error_status(error: Exception) -> int | None:
    """HTTP status carried by a PocketBase ClientResponseError, if any"""
    status = getattr(error, "status", None)
    return status if isinstance(status, int) else None


def is_unique_violation(error: Exception) -> bool:
    """True when PocketBase rejected a write on a unique index"""
    if error_status(error) != 400:
        return False
    return "validation_not_unique" in str(getattr(error, "data", None) or "")
