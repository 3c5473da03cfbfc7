# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Record, request and result models."""

from famlink.models.class_ import ClassCreateRequest, ClassRecord, ClassUpdateRequest
from famlink.models.common import (
    CLASSES_COLLECTION,
    USERS_COLLECTION,
    RecordModel,
    UserRole,
)
from famlink.models.people import (
    USER_ADAPTER,
    Address,
    AddressDraft,
    ChildOverview,
    ChildUpdate,
    Parent,
    ParentDraft,
    PersonRecord,
    Student,
    Teacher,
    UserRecord,
)
from famlink.models.relations import (
    LinkIssue,
    LinkIssueKind,
    LinkResult,
    LinkStatus,
    ParentCreationResult,
    StudentLinkFailure,
    UnlinkResult,
    UnlinkStatus,
)

__all__ = [
    # Common
    "USERS_COLLECTION",
    "CLASSES_COLLECTION",
    "RecordModel",
    "UserRole",
    # People
    "USER_ADAPTER",
    "Address",
    "AddressDraft",
    "ChildOverview",
    "ChildUpdate",
    "Parent",
    "ParentDraft",
    "PersonRecord",
    "Student",
    "Teacher",
    "UserRecord",
    # Classes
    "ClassRecord",
    "ClassCreateRequest",
    "ClassUpdateRequest",
    # Relations
    "LinkIssue",
    "LinkIssueKind",
    "LinkResult",
    "LinkStatus",
    "ParentCreationResult",
    "StudentLinkFailure",
    "UnlinkResult",
    "UnlinkStatus",
]
