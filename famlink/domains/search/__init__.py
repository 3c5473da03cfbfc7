# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student search domain package."""

from famlink.domains.search.service import (
    IncompleteCriteriaError,
    SearchServiceError,
    StudentSearchService,
    display_name_key,
)

__all__ = [
    "StudentSearchService",
    "SearchServiceError",
    "IncompleteCriteriaError",
    "display_name_key",
]
