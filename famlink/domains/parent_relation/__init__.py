# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parent-student relation domain package.

This package keeps parent-student links consistent on both sides:
- Creating links idempotently
- Completing one-sided links
- Removing links
- Auditing and repairing a parent's links
"""

from famlink.domains.parent_relation.service import (
    ListUpdateStrategy,
    ParentRelationService,
)
from famlink.domains.people.exceptions import (
    InvalidUserTypeError,
    ParentNotFoundError,
    StudentNotFoundError,
)

__all__ = [
    "ListUpdateStrategy",
    "ParentRelationService",
    "ParentNotFoundError",
    "StudentNotFoundError",
    "InvalidUserTypeError",
]
