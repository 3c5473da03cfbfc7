# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for famlink.

Two timestamp encodings live side by side in the store:

1. Person records carry ``createdAt`` as Unix epoch milliseconds
2. Class records carry ``createdAt``/``updatedAt`` as ISO 8601 UTC strings

All Python datetimes are timezone-aware (timezone.utc).
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def epoch_millis(dt: datetime | None = None) -> int:
    """Convert a datetime to Unix epoch milliseconds.

    Args:
        dt: Datetime to convert. Defaults to now.

    Returns:
        Milliseconds since the epoch.
    """
    dt = ensure_utc(dt) if dt is not None else utc_now()
    return int(dt.timestamp() * 1000)


def utc_from_millis(millis: int) -> datetime:
    """Create a timezone-aware UTC datetime from epoch milliseconds.

    Args:
        millis: Milliseconds since the epoch.

    Returns:
        Timezone-aware UTC datetime.
    """
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def format_iso(dt: datetime | None) -> str | None:
    """Format a datetime as ISO 8601 string with a ``Z`` suffix.

    Args:
        dt: Datetime to format.

    Returns:
        ISO 8601 formatted string or None.
    """
    if dt is None:
        return None

    dt_utc = ensure_utc(dt)
    return dt_utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso(iso_string: str | None) -> datetime | None:
    """Parse an ISO 8601 datetime string.

    Args:
        iso_string: ISO 8601 formatted string.

    Returns:
        Timezone-aware UTC datetime or None.
    """
    if iso_string is None:
        return None

    dt = datetime.fromisoformat(iso_string.replace("Z", "+00:00"))
    return ensure_utc(dt)
