# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Parent registration with an initial set of linked students.

An administrator registers a parent and selects the students to associate
in one step. The parent document, complete with its studentList, is written
in a single write; each selected student then receives the parent ID in its
parentsList, one student at a time. A failing student step is recorded in
the result and does not undo the parent or the other students.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from famlink.domains.parent_relation.service import ParentRelationService
from famlink.domains.people.exceptions import (
    InvalidUserTypeError,
    MalformedRecordError,
    UserNotFoundError,
)
from famlink.domains.people.repository import PeopleRepository
from famlink.infrastructure.store import StoreError
from famlink.models.common import USERS_COLLECTION
from famlink.models.people import Address, Parent, ParentDraft
from famlink.models.relations import ParentCreationResult, StudentLinkFailure
from famlink.utils.datetime import epoch_millis
from famlink.utils.logging import get_logger, log_context

logger = get_logger(__name__)


class ParentRegistrationError(Exception):
    """Base exception for parent registration errors."""

    pass


class NoStudentsSelectedError(ParentRegistrationError):
    """Raised when a parent is registered without any student."""

    def __init__(self) -> None:
        super().__init__("At least one student must be selected")


class DraftValidationError(ParentRegistrationError):
    """Raised when the submitted parent data does not validate.

    Attributes:
        errors: Field errors as reported by pydantic.
    """

    def __init__(self, error: ValidationError):
        super().__init__(f"Invalid parent data: {error.error_count()} error(s)")
        self.errors = error.errors()


def _unique_ids(student_ids: Iterable[str]) -> list[str]:
    ids: list[str] = []
    for student_id in student_ids:
        student_id = student_id.strip()
        if student_id and student_id not in ids:
            ids.append(student_id)
    return ids


class ParentRegistrationService:
    """Service creating parents together with their first links.

    Attributes:
        repository: Record access.
        relations: Link maintenance for the student side.
    """

    def __init__(
        self,
        repository: PeopleRepository,
        relations: ParentRelationService,
    ) -> None:
        """Initialize parent registration service.

        Args:
            repository: Record access over the document store.
            relations: Service used to update each student's parentsList.
        """
        self.repository = repository
        self.relations = relations

    async def create_parent_with_students(
        self,
        draft: ParentDraft | Mapping[str, Any],
        student_ids: Iterable[str],
    ) -> ParentCreationResult:
        """Create a parent record and link the selected students.

        Args:
            draft: Parent personal data.
            student_ids: Students to link; duplicates and blanks are ignored.

        Returns:
            The new parent ID with the outcome of every student step.

        Raises:
            DraftValidationError: If the draft is invalid. Nothing is written.
            NoStudentsSelectedError: If no student is selected. Nothing is
                written.
            StoreUnavailableError: If the parent document cannot be written.
        """
        if not isinstance(draft, ParentDraft):
            try:
                draft = ParentDraft.model_validate(draft)
            except ValidationError as e:
                raise DraftValidationError(e) from e

        ids = _unique_ids(student_ids)
        if not ids:
            raise NoStudentsSelectedError()

        parent_id = self.repository.store.generate_key(USERS_COLLECTION)
        parent = Parent(
            uid=parent_id,
            title=draft.title,
            first_name=draft.first_name,
            last_name=draft.last_name,
            email=str(draft.email),
            telephone=draft.telephone,
            national_id=draft.national_id,
            address=Address(**draft.address.model_dump()),
            school_name=draft.school_name,
            academic_role=draft.academic_role,
            student_list=ids,
            student_count=len(ids),
            data_completed=True,
            frozen=True,
            created_at=epoch_millis(),
        )
        await self.repository.create_user(parent, user_id=parent_id)

        result = ParentCreationResult(parent_id=parent_id)
        with log_context(parent_id=parent_id):
            for student_id in ids:
                outcome = await self._attach(student_id, parent_id)
                if isinstance(outcome, StudentLinkFailure):
                    result.failures.append(outcome)
                elif outcome:
                    result.linked.append(student_id)
                else:
                    result.already_linked.append(student_id)

            if result.failures:
                logger.warning(
                    "parent_created_with_failures",
                    linked=len(result.linked) + len(result.already_linked),
                    failed=[failure.student_id for failure in result.failures],
                )
            else:
                logger.info("parent_created", linked=len(ids))

        return result

    async def _attach(self, student_id: str, parent_id: str) -> StudentLinkFailure | bool:
        """Add the parent to one student's parentsList.

        Returns:
            True if the student was written, False if it already listed the
            parent, or the failure to report.
        """
        try:
            return await self.relations.attach_parent_to_student(student_id, parent_id)
        except UserNotFoundError as e:
            return self._failure(student_id, "not_found", e)
        except InvalidUserTypeError as e:
            return self._failure(student_id, "invalid_user_type", e)
        except MalformedRecordError as e:
            return self._failure(student_id, "malformed_record", e)
        except StoreError as e:
            return self._failure(student_id, "store_unavailable", e)

    @staticmethod
    def _failure(student_id: str, reason: str, error: Exception) -> StudentLinkFailure:
        logger.error("student_link_failed", student_id=student_id, reason=reason, error=str(error))
        return StudentLinkFailure(student_id=student_id, reason=reason, message=str(error))
