# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class domain package.

This package provides class management:
- Class CRUD
- Teacher assignment
- Student enrollment
"""

from famlink.domains.class_.service import (
    ClassNotFoundError,
    ClassService,
    ClassServiceError,
)

__all__ = [
    "ClassService",
    "ClassServiceError",
    "ClassNotFoundError",
]
