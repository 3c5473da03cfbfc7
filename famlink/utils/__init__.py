# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Utility functions and helpers for famlink.

This package contains cross-cutting utilities:
- logging: Structured logging with structlog
- datetime: Timezone-aware datetime operations
"""

from famlink.utils.datetime import (
    ensure_utc,
    epoch_millis,
    format_iso,
    parse_iso,
    utc_from_millis,
    utc_now,
)
from famlink.utils.logging import get_logger, log_context, setup_logging

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "log_context",
    # Datetime
    "utc_now",
    "epoch_millis",
    "utc_from_millis",
    "ensure_utc",
    "format_iso",
    "parse_iso",
]
