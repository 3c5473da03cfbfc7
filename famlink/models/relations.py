# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Result types of relationship operations."""

from enum import Enum

from pydantic import BaseModel, Field


class LinkStatus(str, Enum):
    """Outcome of a link request."""

    LINKED = "linked"
    ALREADY_LINKED = "already_linked"
    REPAIRED = "repaired"


class UnlinkStatus(str, Enum):
    """Outcome of an unlink request."""

    UNLINKED = "unlinked"
    NOT_LINKED = "not_linked"


class LinkResult(BaseModel):
    """Result of linking a parent and a student.

    Attributes:
        status: LINKED for a fresh link, ALREADY_LINKED when both sides
            already agreed, REPAIRED when only one side held the reference.
        parent_updated: Whether the parent document was written.
        student_updated: Whether the student document was written.
    """

    parent_id: str
    student_id: str
    status: LinkStatus
    parent_updated: bool = False
    student_updated: bool = False

    @property
    def changed(self) -> bool:
        return self.parent_updated or self.student_updated


class UnlinkResult(BaseModel):
    """Result of unlinking a parent and a student."""

    parent_id: str
    student_id: str
    status: UnlinkStatus
    parent_updated: bool = False
    student_updated: bool = False


class LinkIssueKind(str, Enum):
    """Kinds of relationship inconsistency found by an audit."""

    COUNT_DRIFT = "count_drift"
    MISSING_BACK_REFERENCE = "missing_back_reference"
    ORPHAN_BACK_REFERENCE = "orphan_back_reference"
    DANGLING_REFERENCE = "dangling_reference"


class LinkIssue(BaseModel):
    """One inconsistency between a parent and its students."""

    kind: LinkIssueKind
    parent_id: str
    student_id: str | None = None
    detail: str = ""


class StudentLinkFailure(BaseModel):
    """A student-side update that failed during parent registration."""

    student_id: str
    reason: str
    message: str


class ParentCreationResult(BaseModel):
    """Outcome of creating a parent together with its initial links.

    The parent document exists whenever this result is returned. Student
    sides that could not be updated are listed in ``failures``; the parent's
    studentList still names them, so they can be repaired later by linking
    again.
    """

    parent_id: str
    linked: list[str] = Field(default_factory=list)
    already_linked: list[str] = Field(default_factory=list)
    failures: list[StudentLinkFailure] = Field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.failures
