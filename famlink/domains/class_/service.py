# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class management service.

This module provides the ClassService class for:
- Class CRUD operations
- Teacher assignment
- Student enrollment
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from famlink.domains.people.repository import PeopleRepository
from famlink.models.class_ import ClassCreateRequest, ClassRecord, ClassUpdateRequest
from famlink.utils.datetime import epoch_millis, format_iso, utc_now

logger = logging.getLogger(__name__)


class ClassServiceError(Exception):
    """Base exception for class service errors."""

    pass


class ClassNotFoundError(ClassServiceError):
    """Raised when a class is not found."""

    def __init__(self, class_id: str):
        super().__init__(f"Class not found: {class_id}")
        self.class_id = class_id


class ClassService:
    """Service for managing classes.

    Attributes:
        repository: Record access.
    """

    def __init__(self, repository: PeopleRepository) -> None:
        """Initialize class service.

        Args:
            repository: Record access over the document store.
        """
        self.repository = repository

    async def list_classes(self) -> list[ClassRecord]:
        """List all classes in collection order."""
        return await self.repository.list_classes()

    async def get_class(self, class_id: str) -> ClassRecord:
        """Get a class by ID.

        Raises:
            ClassNotFoundError: If class not found.
        """
        record = await self.repository.get_class(class_id)
        if record is None:
            raise ClassNotFoundError(class_id)
        return record

    async def create_class(self, request: ClassCreateRequest) -> ClassRecord:
        """Create a new class with no teacher and no students.

        Args:
            request: Class data; extra fields are stored as given.

        Returns:
            The stored class record.
        """
        now = utc_now()
        timestamp = format_iso(now)
        record = ClassRecord.model_validate(
            {
                **request.to_fields(),
                "id": f"class_{epoch_millis(now)}",
                "teacher": None,
                "students": [],
                "createdAt": timestamp,
                "updatedAt": timestamp,
            }
        )
        await self.repository.write_class(record)

        logger.info("Created class %s", record.id)
        return record

    async def update_class(self, class_id: str, request: ClassUpdateRequest) -> ClassRecord:
        """Update class fields other than teacher and students.

        Raises:
            ClassNotFoundError: If class not found.
        """
        await self.get_class(class_id)

        fields = request.to_fields()
        fields["updatedAt"] = format_iso(utc_now())
        await self.repository.patch_class(class_id, fields)

        logger.info("Updated class %s", class_id)
        return await self.get_class(class_id)

    async def delete_class(self, class_id: str) -> None:
        """Delete a class.

        Raises:
            ClassNotFoundError: If class not found.
        """
        await self.get_class(class_id)
        await self.repository.delete_class(class_id)
        logger.info("Deleted class %s", class_id)

    async def assign_teacher(self, class_id: str, teacher_id: str | None) -> ClassRecord:
        """Assign a teacher to a class, or clear the assignment with None.

        Raises:
            ClassNotFoundError: If class not found.
            TeacherNotFoundError: If the teacher does not exist.
            InvalidUserTypeError: If the record is not a teacher.
        """
        await self.get_class(class_id)
        if teacher_id is not None:
            await self.repository.require_teacher(teacher_id)

        await self.repository.patch_class(
            class_id,
            {"teacher": teacher_id, "updatedAt": format_iso(utc_now())},
        )

        logger.info("Assigned teacher %s to class %s", teacher_id, class_id)
        return await self.get_class(class_id)

    async def add_student(self, class_id: str, student_id: str) -> ClassRecord:
        """Enroll a student at the end of the class list.

        Raises:
            ClassNotFoundError: If class not found.
            StudentNotFoundError: If the student does not exist.
            InvalidUserTypeError: If the record is not a student.
        """
        await self.repository.require_student(student_id)
        return await self._update_students(
            class_id,
            lambda ids: ids if student_id in ids else [*ids, student_id],
        )

    async def remove_student(self, class_id: str, student_id: str) -> ClassRecord:
        """Withdraw a student; remaining students keep their order.

        Raises:
            ClassNotFoundError: If class not found.
        """
        return await self._update_students(
            class_id,
            lambda ids: [existing for existing in ids if existing != student_id],
        )

    async def _update_students(
        self,
        class_id: str,
        mutate: Callable[[list[str]], list[str]],
    ) -> ClassRecord:
        record = await self.get_class(class_id)

        students = mutate(list(record.students))
        if students == record.students:
            return record

        await self.repository.patch_class(
            class_id,
            {"students": students, "updatedAt": format_iso(utc_now())},
        )

        logger.info("Class %s now has %d student(s)", class_id, len(students))
        return await self.get_class(class_id)
