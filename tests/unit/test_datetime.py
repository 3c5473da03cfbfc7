# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for datetime utilities."""

from datetime import datetime, timedelta, timezone

from famlink.utils.datetime import (
    ensure_utc,
    epoch_millis,
    format_iso,
    parse_iso,
    utc_from_millis,
)


class TestEpochMillis:
    """Tests for epoch millisecond conversion."""

    def test_known_instant(self) -> None:
        """Test conversion of a fixed instant."""
        dt = datetime(2024, 9, 1, 8, 0, tzinfo=timezone.utc)

        assert epoch_millis(dt) == 1_725_177_600_000
        assert utc_from_millis(1_725_177_600_000) == dt

    def test_naive_is_utc(self) -> None:
        """Test that naive datetimes are treated as UTC."""
        assert epoch_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000


class TestIsoFormat:
    """Tests for ISO 8601 formatting."""

    def test_format_uses_z_suffix(self) -> None:
        """Test the stored timestamp shape."""
        dt = datetime(2024, 9, 1, 8, 0, 0, 123456, tzinfo=timezone.utc)

        assert format_iso(dt) == "2024-09-01T08:00:00.123Z"

    def test_format_converts_offsets(self) -> None:
        """Test that other offsets are converted to UTC."""
        dt = datetime(2024, 9, 1, 10, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_iso(dt) == "2024-09-01T08:00:00.000Z"

    def test_parse_round_trip(self) -> None:
        """Test parsing a stored timestamp."""
        parsed = parse_iso("2024-09-01T08:00:00.000Z")

        assert parsed == datetime(2024, 9, 1, 8, 0, tzinfo=timezone.utc)

    def test_none_passthrough(self) -> None:
        """Test that None stays None."""
        assert format_iso(None) is None
        assert parse_iso(None) is None
        assert ensure_utc(None) is None
