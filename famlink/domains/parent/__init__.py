# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parent domain package.

This package provides:
- Parent registration with initial student links
- The parent portal acting for the signed-in parent
"""

from famlink.domains.parent.registration import (
    DraftValidationError,
    NoStudentsSelectedError,
    ParentRegistrationError,
    ParentRegistrationService,
)
from famlink.domains.parent.service import (
    ChildAlreadyLinkedError,
    ChildNotLinkedError,
    NotAuthenticatedError,
    ParentService,
    ParentServiceError,
)

__all__ = [
    "ParentRegistrationService",
    "ParentRegistrationError",
    "NoStudentsSelectedError",
    "DraftValidationError",
    "ParentService",
    "ParentServiceError",
    "NotAuthenticatedError",
    "ChildAlreadyLinkedError",
    "ChildNotLinkedError",
]
