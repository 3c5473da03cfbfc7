# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parent portal service.

This module provides the ParentService class, acting on behalf of the
signed-in parent:
- Finding a child by exact identity and linking it
- Listing linked children with their grade and teacher
- Editing the personal data of a linked child
"""

from __future__ import annotations

import logging

from famlink.domains.auth.identity import IdentityProvider
from famlink.domains.parent_relation.service import ParentRelationService
from famlink.domains.people.repository import PeopleRepository
from famlink.domains.search.service import StudentSearchService
from famlink.models.people import ChildOverview, ChildUpdate, Student, Teacher
from famlink.models.relations import LinkResult

logger = logging.getLogger(__name__)


class ParentServiceError(Exception):
    """Base exception for parent portal errors."""

    pass


class NotAuthenticatedError(ParentServiceError):
    """Raised when no identity is signed in."""

    def __init__(self) -> None:
        super().__init__("No authenticated parent")


class ChildAlreadyLinkedError(ParentServiceError):
    """Raised when the found child is already linked to the acting parent."""

    def __init__(self, student_id: str):
        super().__init__(f"Child {student_id} is already linked")
        self.student_id = student_id


class ChildNotLinkedError(ParentServiceError):
    """Raised when acting on a child that is not linked to the parent."""

    def __init__(self, student_id: str):
        super().__init__(f"Child {student_id} is not linked to this parent")
        self.student_id = student_id


class ParentService:
    """Service for the signed-in parent.

    Attributes:
        repository: Record access.
        search: Student lookup.
        relations: Link maintenance.
        identity: Source of the acting parent.
    """

    def __init__(
        self,
        repository: PeopleRepository,
        search: StudentSearchService,
        relations: ParentRelationService,
        identity: IdentityProvider,
    ) -> None:
        """Initialize parent service.

        Args:
            repository: Record access over the document store.
            search: Student search service.
            relations: Parent-student relation service.
            identity: Current-identity provider.
        """
        self.repository = repository
        self.search = search
        self.relations = relations
        self.identity = identity
        self._uid_checked: set[str] = set()

    async def current_parent_id(self) -> str:
        """Resolve the acting parent's ID.

        The identity document is checked for a missing ``uid`` on first use
        only; later calls for the same parent do not read it again.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
        """
        identity = await self.identity.get_current_user()
        if identity is None:
            raise NotAuthenticatedError()

        if identity.id not in self._uid_checked:
            await self.ensure_identity_uid(identity.id)
            self._uid_checked.add(identity.id)
        return identity.id

    async def ensure_identity_uid(self, user_id: str) -> bool:
        """Store the document key as ``uid`` on a document lacking it.

        Returns:
            True if the document was patched.
        """
        raw = await self.repository.raw_user(user_id)
        if raw is None or raw.get("uid"):
            return False

        await self.repository.patch_user(user_id, {"uid": user_id})
        logger.info("Back-filled uid on user %s", user_id)
        return True

    async def search_child(self, first_name: str, last_name: str, birthday: str) -> Student:
        """Find a child by exact identity for the acting parent.

        Raises:
            NotAuthenticatedError: If nobody is signed in.
            IncompleteCriteriaError: If a criterion is blank.
            StudentNotFoundError: If nothing matches.
            ChildAlreadyLinkedError: If the child is already linked.
        """
        parent_id = await self.current_parent_id()
        student = await self.search.find_exact_student(first_name, last_name, birthday)

        parent = await self.repository.require_parent(parent_id)
        if student.uid in parent.student_list:
            raise ChildAlreadyLinkedError(student.uid)
        return student

    async def link_child(self, student_id: str) -> LinkResult:
        """Link a child to the acting parent on both sides."""
        parent_id = await self.current_parent_id()
        return await self.relations.link(parent_id, student_id)

    async def get_children(self) -> list[ChildOverview]:
        """List the acting parent's children in link order.

        Listed IDs without a student record are skipped.
        """
        parent_id = await self.current_parent_id()
        parent = await self.repository.require_parent(parent_id)

        teacher_names: dict[str, str | None] = {}
        children: list[ChildOverview] = []
        for student_id in parent.student_list:
            student = await self.repository.get_student(student_id)
            if student is None:
                logger.warning("Parent %s lists missing student %s", parent_id, student_id)
                continue

            teacher_id = student.linked_teacher_id
            if teacher_id and teacher_id not in teacher_names:
                teacher = await self.repository.get_user(teacher_id)
                teacher_names[teacher_id] = (
                    teacher.full_name if isinstance(teacher, Teacher) else None
                )

            children.append(
                ChildOverview(
                    uid=student.uid,
                    first_name=student.first_name,
                    last_name=student.last_name,
                    birthday=student.birthday,
                    grade=student.effective_grade,
                    linked_teacher_id=teacher_id,
                    teacher_name=teacher_names.get(teacher_id) if teacher_id else None,
                )
            )
        return children

    async def update_child(self, student_id: str, update: ChildUpdate) -> None:
        """Edit a linked child's personal data.

        Raises:
            ChildNotLinkedError: If the child is not linked to the parent.
        """
        parent_id = await self.current_parent_id()
        parent = await self.repository.require_parent(parent_id)
        if student_id not in parent.student_list:
            raise ChildNotLinkedError(student_id)

        await self.repository.require_student(student_id)
        fields = update.to_fields()
        if not fields:
            return

        await self.repository.patch_user(student_id, fields)
        logger.info("Parent %s updated child %s: %s", parent_id, student_id, sorted(fields))
