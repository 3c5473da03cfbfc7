# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed access to person and class documents.

This module provides the PeopleRepository class for:
- Reading Parent, Student and Teacher records from the users collection
- Reading Class records from the classes collection
- Creating and patching documents

Every read is shape-normalized before decoding; see
famlink.domains.people.normalization.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from famlink.domains.people.exceptions import (
    InvalidUserTypeError,
    MalformedRecordError,
    ParentNotFoundError,
    StudentNotFoundError,
    TeacherNotFoundError,
)
from famlink.domains.people.normalization import decode_class, decode_user
from famlink.infrastructure.store import StoreAdapter, join_path
from famlink.models.class_ import ClassRecord
from famlink.models.common import CLASSES_COLLECTION, USERS_COLLECTION, UserRole
from famlink.models.people import Parent, PersonRecord, Student, Teacher

logger = logging.getLogger(__name__)


def user_path(user_id: str, *fields: str) -> str:
    """Build the store path of a user document or one of its fields."""
    return join_path(USERS_COLLECTION, user_id, *fields)


def class_path(class_id: str) -> str:
    """Build the store path of a class document."""
    return join_path(CLASSES_COLLECTION, class_id)


def _iter_collection(collection: str, raw: Any) -> Iterator[tuple[str, Any]]:
    if raw is None:
        return
    if isinstance(raw, Mapping):
        for key, value in raw.items():
            if value is not None:
                yield str(key), value
        return
    # Collections whose keys are all small integers come back as lists
    if isinstance(raw, list):
        for index, value in enumerate(raw):
            if value is not None:
                yield str(index), value
        return
    raise MalformedRecordError(collection, f"expected a collection, got {type(raw).__name__}")


class PeopleRepository:
    """Repository for users and classes documents.

    Attributes:
        store: Store adapter every read and write goes through.
    """

    def __init__(self, store: StoreAdapter) -> None:
        """Initialize the repository.

        Args:
            store: Store adapter for the document tree.
        """
        self.store = store

    # =========================================================================
    # Users
    # =========================================================================

    async def raw_user(self, user_id: str) -> dict[str, Any] | None:
        """Read a user document exactly as stored."""
        raw = await self.store.read_subtree(user_path(user_id))
        if raw is None:
            return None
        if not isinstance(raw, Mapping):
            raise MalformedRecordError(user_path(user_id), "expected a document")
        return dict(raw)

    async def get_user(self, user_id: str) -> Parent | Student | Teacher | None:
        """Get a user record of any role.

        Returns:
            The decoded record, or None when absent.

        Raises:
            MalformedRecordError: If the document cannot be decoded.
        """
        raw = await self.store.read_subtree(user_path(user_id))
        if raw is None:
            return None
        return decode_user(user_id, raw)

    async def get_parent(self, user_id: str) -> Parent | None:
        """Get a parent record.

        Raises:
            InvalidUserTypeError: If the record is not a parent.
        """
        return self._expect(await self.get_user(user_id), Parent, user_id)

    async def get_student(self, user_id: str) -> Student | None:
        """Get a student record.

        Raises:
            InvalidUserTypeError: If the record is not a student.
        """
        return self._expect(await self.get_user(user_id), Student, user_id)

    async def get_teacher(self, user_id: str) -> Teacher | None:
        """Get a teacher record.

        Raises:
            InvalidUserTypeError: If the record is not a teacher.
        """
        return self._expect(await self.get_user(user_id), Teacher, user_id)

    async def require_parent(self, user_id: str) -> Parent:
        """Get a parent record that must exist.

        Raises:
            ParentNotFoundError: If absent.
            InvalidUserTypeError: If the record is not a parent.
        """
        parent = await self.get_parent(user_id)
        if parent is None:
            raise ParentNotFoundError(user_id)
        return parent

    async def require_student(self, user_id: str) -> Student:
        """Get a student record that must exist.

        Raises:
            StudentNotFoundError: If absent.
            InvalidUserTypeError: If the record is not a student.
        """
        student = await self.get_student(user_id)
        if student is None:
            raise StudentNotFoundError(user_id)
        return student

    async def require_teacher(self, user_id: str) -> Teacher:
        """Get a teacher record that must exist.

        Raises:
            TeacherNotFoundError: If absent.
            InvalidUserTypeError: If the record is not a teacher.
        """
        teacher = await self.get_teacher(user_id)
        if teacher is None:
            raise TeacherNotFoundError(user_id)
        return teacher

    async def list_users(
        self,
        role: UserRole | None = None,
    ) -> list[Parent | Student | Teacher]:
        """List user records in collection order.

        Documents of other roles are skipped without decoding. Documents
        that fail decoding are logged and skipped.

        Args:
            role: Only return records with this role.

        Returns:
            Decoded records.
        """
        raw = await self.store.read_subtree(USERS_COLLECTION)

        records: list[Parent | Student | Teacher] = []
        for user_id, doc in _iter_collection(USERS_COLLECTION, raw):
            if role is not None and (
                not isinstance(doc, Mapping) or doc.get("role") != role.value
            ):
                continue
            try:
                records.append(decode_user(user_id, doc))
            except MalformedRecordError as e:
                logger.warning("Skipping malformed user record %s: %s", user_id, e.reason)
        return records

    async def list_parents(self) -> list[Parent]:
        """List all parent records."""
        return await self.list_users(UserRole.PARENT)  # type: ignore[return-value]

    async def list_students(self) -> list[Student]:
        """List all student records."""
        return await self.list_users(UserRole.STUDENT)  # type: ignore[return-value]

    async def list_teachers(self) -> list[Teacher]:
        """List all teacher records."""
        return await self.list_users(UserRole.TEACHER)  # type: ignore[return-value]

    async def create_user(
        self,
        record: PersonRecord,
        user_id: str | None = None,
    ) -> str:
        """Write a complete user document in one write.

        Args:
            record: Record to store; its uid is replaced by the document key.
            user_id: Key to store under; generated when omitted.

        Returns:
            The document key.
        """
        if user_id is None:
            user_id = self.store.generate_key(USERS_COLLECTION)

        document = record.to_document()
        document["uid"] = user_id
        await self.store.write_document(user_path(user_id), document)

        logger.info("Created %s record %s", document.get("role", "user"), user_id)
        return user_id

    async def patch_user(self, user_id: str, fields: Mapping[str, Any]) -> None:
        """Merge fields into a user document."""
        await self.store.patch_fields(user_path(user_id), fields)

    # =========================================================================
    # Classes
    # =========================================================================

    async def get_class(self, class_id: str) -> ClassRecord | None:
        """Get a class record, or None when absent."""
        raw = await self.store.read_subtree(class_path(class_id))
        if raw is None:
            return None
        return decode_class(class_id, raw)

    async def list_classes(self) -> list[ClassRecord]:
        """List class records in collection order, skipping malformed ones."""
        raw = await self.store.read_subtree(CLASSES_COLLECTION)

        classes: list[ClassRecord] = []
        for class_id, doc in _iter_collection(CLASSES_COLLECTION, raw):
            try:
                classes.append(decode_class(class_id, doc))
            except MalformedRecordError as e:
                logger.warning("Skipping malformed class record %s: %s", class_id, e.reason)
        return classes

    async def write_class(self, record: ClassRecord) -> None:
        """Write a complete class document under its id."""
        await self.store.write_document(class_path(record.id), record.to_document())

    async def patch_class(self, class_id: str, fields: Mapping[str, Any]) -> None:
        """Merge fields into a class document."""
        await self.store.patch_fields(class_path(class_id), fields)

    async def delete_class(self, class_id: str) -> None:
        """Remove a class document."""
        await self.store.delete_subtree(class_path(class_id))

    @staticmethod
    def _expect(record: Any, record_type: type, user_id: str) -> Any:
        if record is None or isinstance(record, record_type):
            return record
        raise InvalidUserTypeError(user_id, record_type.__name__, getattr(record, "role", None))
