# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parent-student relation service for keeping family links consistent.

A link is recorded twice: the student ID in the parent's ``studentList``
(with ``studentCount`` kept equal to its length) and the parent ID in the
student's ``parentsList``. The store has no multi-document transactions, so
each side is written independently and this service is responsible for:
- Creating links on both sides, idempotently
- Completing links found on one side only
- Removing links from both sides
- Auditing and repairing one parent's links

Lists are never mutated in place: every change builds a new list from the
current stored value and writes it back. With the "transaction" strategy the
write is a conditional read-modify-write on the record, so concurrent
changes to the same record are retried rather than lost. With the "patch"
strategy the service patches the owned fields from the snapshot it read,
and concurrent appends to the same record follow last-write-wins.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Literal

from famlink.domains.people.exceptions import ParentNotFoundError, StudentNotFoundError
from famlink.domains.people.normalization import normalize_user_document
from famlink.domains.people.repository import PeopleRepository, user_path
from famlink.models.people import Parent, Student
from famlink.models.relations import (
    LinkIssue,
    LinkIssueKind,
    LinkResult,
    LinkStatus,
    UnlinkResult,
    UnlinkStatus,
)

logger = logging.getLogger(__name__)

ListUpdateStrategy = Literal["transaction", "patch"]

STUDENT_LIST = "studentList"
STUDENT_COUNT = "studentCount"
PARENTS_LIST = "parentsList"


def _appending(item: str) -> Callable[[list[str]], list[str]]:
    def mutate(ids: list[str]) -> list[str]:
        return ids if item in ids else [*ids, item]

    return mutate


def _removing(item: str) -> Callable[[list[str]], list[str]]:
    def mutate(ids: list[str]) -> list[str]:
        return [existing for existing in ids if existing != item]

    return mutate


def _keeping(ids: list[str]) -> list[str]:
    return ids


class ParentRelationService:
    """Service for managing parent-student links.

    Attributes:
        repository: Record access.
        strategy: How reference lists are written ("transaction" or "patch").
    """

    def __init__(
        self,
        repository: PeopleRepository,
        strategy: ListUpdateStrategy = "transaction",
    ) -> None:
        """Initialize parent relation service.

        Args:
            repository: Record access over the document store.
            strategy: List write strategy.
        """
        self.repository = repository
        self.strategy = strategy

    async def link(self, parent_id: str, student_id: str) -> LinkResult:
        """Link a parent and a student on both sides.

        Args:
            parent_id: Parent identifier.
            student_id: Student identifier.

        Returns:
            ALREADY_LINKED when both sides already reference each other
            (nothing is written), REPAIRED when exactly one side did,
            LINKED otherwise. A drifted studentCount is rewritten whenever
            either side is written.

        Raises:
            ParentNotFoundError: If parent not found.
            StudentNotFoundError: If student not found.
            InvalidUserTypeError: If either record has the wrong role.
        """
        parent = await self.repository.require_parent(parent_id)
        student = await self.repository.require_student(student_id)

        parent_has = student_id in parent.student_list
        student_has = parent_id in student.parents_list

        if parent_has and student_has:
            logger.info("Already linked: parent=%s, student=%s", parent_id, student_id)
            return LinkResult(
                parent_id=parent_id,
                student_id=student_id,
                status=LinkStatus.ALREADY_LINKED,
            )

        if parent_has or student_has:
            logger.warning(
                "PartiallyLinked: parent=%s has_student=%s, student=%s has_parent=%s; repairing",
                parent_id,
                parent_has,
                student_id,
                student_has,
            )

        parent_updated = False
        if not parent_has:
            parent_updated = await self._write_parent_list(parent, _appending(student_id))

        student_updated = False
        if not student_has:
            student_updated = await self._write_student_list(student, _appending(parent_id))

        if not parent_updated and parent.has_count_drift:
            parent_updated = await self._write_parent_list(parent, _keeping)

        status = LinkStatus.REPAIRED if (parent_has or student_has) else LinkStatus.LINKED
        logger.info(
            "Linked parent=%s, student=%s (%s)",
            parent_id,
            student_id,
            status.value,
        )

        return LinkResult(
            parent_id=parent_id,
            student_id=student_id,
            status=status,
            parent_updated=parent_updated,
            student_updated=student_updated,
        )

    async def link_existing(self, parent_id: str, student_id: str) -> LinkResult:
        """Append a student to a parent's list only.

        This is the parent-side half of link(); the student side is left
        untouched. Persisted count drift is corrected by the write.

        Raises:
            ParentNotFoundError: If parent not found.
            InvalidUserTypeError: If the record is not a parent.
        """
        parent = await self.repository.require_parent(parent_id)

        if student_id in parent.student_list:
            return LinkResult(
                parent_id=parent_id,
                student_id=student_id,
                status=LinkStatus.ALREADY_LINKED,
            )

        await self._write_parent_list(parent, _appending(student_id))
        logger.info("Added student %s to parent %s", student_id, parent_id)

        return LinkResult(
            parent_id=parent_id,
            student_id=student_id,
            status=LinkStatus.LINKED,
            parent_updated=True,
        )

    async def attach_parent_to_student(self, student_id: str, parent_id: str) -> bool:
        """Append a parent to a student's list only.

        Returns:
            True if the student document was written, False if the parent
            was already listed.

        Raises:
            StudentNotFoundError: If student not found.
            InvalidUserTypeError: If the record is not a student.
        """
        student = await self.repository.require_student(student_id)

        if parent_id in student.parents_list:
            return False

        return await self._write_student_list(student, _appending(parent_id))

    async def unlink(self, parent_id: str, student_id: str) -> UnlinkResult:
        """Remove a link from both sides.

        Remaining entries keep their relative order. A record that no
        longer exists on one side does not prevent cleaning the other, and
        a drifted studentCount is rewritten together with the removal.

        Returns:
            UNLINKED if either side was written, NOT_LINKED otherwise.

        Raises:
            InvalidUserTypeError: If either record has the wrong role.
        """
        parent = await self.repository.get_parent(parent_id)
        student = await self.repository.get_student(student_id)

        parent_updated = False
        if parent is not None and student_id in parent.student_list:
            parent_updated = await self._write_parent_list(parent, _removing(student_id))

        student_updated = False
        if student is not None and parent_id in student.parents_list:
            student_updated = await self._write_student_list(student, _removing(parent_id))

        if not (parent_updated or student_updated):
            return UnlinkResult(
                parent_id=parent_id,
                student_id=student_id,
                status=UnlinkStatus.NOT_LINKED,
            )

        if parent is None:
            logger.warning(
                "Removed parent=%s from student=%s: parent record missing",
                parent_id,
                student_id,
            )
        elif not parent_updated and parent.has_count_drift:
            parent_updated = await self._write_parent_list(parent, _keeping)

        logger.info("Unlinked parent=%s, student=%s", parent_id, student_id)
        return UnlinkResult(
            parent_id=parent_id,
            student_id=student_id,
            status=UnlinkStatus.UNLINKED,
            parent_updated=parent_updated,
            student_updated=student_updated,
        )

    async def check_consistency(self, parent_id: str) -> list[LinkIssue]:
        """Audit one parent's links without writing anything.

        Returns:
            Issues found: count drift, students missing the back reference,
            students referencing a parent that does not list them, and
            listed IDs that are not students.

        Raises:
            ParentNotFoundError: If parent not found.
        """
        parent = await self.repository.require_parent(parent_id)
        students = {student.uid: student for student in await self.repository.list_students()}

        issues: list[LinkIssue] = []
        if parent.has_count_drift:
            issues.append(
                LinkIssue(
                    kind=LinkIssueKind.COUNT_DRIFT,
                    parent_id=parent_id,
                    detail=f"studentCount={parent.student_count}, listed={len(parent.student_list)}",
                )
            )

        for student_id in parent.student_list:
            student = students.get(student_id)
            if student is None:
                issues.append(
                    LinkIssue(
                        kind=LinkIssueKind.DANGLING_REFERENCE,
                        parent_id=parent_id,
                        student_id=student_id,
                        detail="listed ID is not a student record",
                    )
                )
            elif parent_id not in student.parents_list:
                issues.append(
                    LinkIssue(
                        kind=LinkIssueKind.MISSING_BACK_REFERENCE,
                        parent_id=parent_id,
                        student_id=student_id,
                        detail="student does not list this parent",
                    )
                )

        for student in students.values():
            if parent_id in student.parents_list and student.uid not in parent.student_list:
                issues.append(
                    LinkIssue(
                        kind=LinkIssueKind.ORPHAN_BACK_REFERENCE,
                        parent_id=parent_id,
                        student_id=student.uid,
                        detail="parent does not list this student",
                    )
                )

        return issues

    async def repair(self, parent_id: str) -> list[LinkResult]:
        """Complete every one-sided link of a parent and fix count drift.

        Dangling references are reported by check_consistency() but left in
        place; only an explicit unlink() removes them.

        Returns:
            Results of the links that were completed.
        """
        issues = await self.check_consistency(parent_id)

        results: list[LinkResult] = []
        for issue in issues:
            if issue.kind in (
                LinkIssueKind.MISSING_BACK_REFERENCE,
                LinkIssueKind.ORPHAN_BACK_REFERENCE,
            ):
                results.append(await self.link(parent_id, issue.student_id))

        if any(issue.kind == LinkIssueKind.COUNT_DRIFT for issue in issues):
            parent = await self.repository.require_parent(parent_id)
            await self._write_parent_list(parent, _keeping)

        if issues:
            logger.info("Repaired parent %s: %d issue(s)", parent_id, len(issues))
        return results

    # =========================================================================
    # List writes
    # =========================================================================

    async def _write_parent_list(
        self,
        parent: Parent,
        mutate: Callable[[list[str]], list[str]],
    ) -> bool:
        return await self._write_list(
            user_id=parent.uid,
            field=STUDENT_LIST,
            count_field=STUDENT_COUNT,
            snapshot_ids=parent.student_list,
            snapshot_count=parent.student_count,
            mutate=mutate,
            missing=ParentNotFoundError,
        )

    async def _write_student_list(
        self,
        student: Student,
        mutate: Callable[[list[str]], list[str]],
    ) -> bool:
        return await self._write_list(
            user_id=student.uid,
            field=PARENTS_LIST,
            count_field=None,
            snapshot_ids=student.parents_list,
            snapshot_count=None,
            mutate=mutate,
            missing=StudentNotFoundError,
        )

    async def _write_list(
        self,
        user_id: str,
        field: str,
        count_field: str | None,
        snapshot_ids: list[str],
        snapshot_count: int | None,
        mutate: Callable[[list[str]], list[str]],
        missing: type[Exception],
    ) -> bool:
        if self.strategy == "patch":
            new_ids = mutate(list(snapshot_ids))
            fields: dict[str, Any] = {}
            if new_ids != snapshot_ids:
                fields[field] = new_ids
            if count_field is not None and snapshot_count != len(new_ids):
                fields[field] = new_ids
                fields[count_field] = len(new_ids)
            if not fields:
                return False
            await self.repository.patch_user(user_id, fields)
            return True

        changed = False

        def transform(current: Any) -> Any:
            nonlocal changed
            if current is None:
                raise missing(user_id)

            doc = normalize_user_document(user_id, current)
            ids = doc.get(field, [])
            new_ids = mutate(list(ids))
            count_off = count_field is not None and doc.get(count_field) != len(new_ids)

            changed = new_ids != ids or count_off
            if not changed:
                return current

            updated = dict(current)
            updated[field] = new_ids
            if count_field is not None:
                updated[count_field] = len(new_ids)
            return updated

        await self.repository.store.transaction(user_path(user_id), transform)
        return changed
