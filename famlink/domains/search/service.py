# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student search service.

This module provides the StudentSearchService class for:
- Interactive substring search over student names
- Exact identity lookup by name and birthday, used before linking
"""

from __future__ import annotations

import logging
import unicodedata

from famlink.domains.people.exceptions import StudentNotFoundError
from famlink.domains.people.repository import PeopleRepository
from famlink.models.people import Student

logger = logging.getLogger(__name__)


class SearchServiceError(Exception):
    """Base exception for search service errors."""

    pass


class IncompleteCriteriaError(SearchServiceError):
    """Raised when an exact search is missing one of its criteria."""

    def __init__(self, missing: list[str]):
        super().__init__(f"Missing search criteria: {', '.join(missing)}")
        self.missing = missing


def _collation_key(text: str) -> tuple[str, str]:
    folded = text.casefold()
    decomposed = unicodedata.normalize("NFKD", folded)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base, folded


def display_name_key(student: Student) -> tuple[str, str]:
    """Sort key comparing "first last" names the way a reader would.

    Accents and case are ignored first and only break ties.
    """
    return _collation_key(f"{student.first_name} {student.last_name}")


def _matches_substring(student: Student, query: str) -> bool:
    first = student.first_name.lower()
    last = student.last_name.lower()
    return query in first or query in last or query in f"{first} {last}"


def _same_name(stored: str, wanted: str) -> bool:
    return stored.strip().lower() == wanted.strip().lower()


class StudentSearchService:
    """Service for finding students.

    Attributes:
        repository: Record access.
    """

    def __init__(self, repository: PeopleRepository) -> None:
        """Initialize student search service.

        Args:
            repository: Record access over the document store.
        """
        self.repository = repository

    async def list_students_sorted(self) -> list[Student]:
        """List every student, sorted by display name."""
        students = await self.repository.list_students()
        return sorted(students, key=display_name_key)

    async def search_by_substring(self, query: str) -> list[Student]:
        """Find students whose name contains the query.

        Args:
            query: Free text; case and surrounding whitespace are ignored.

        Returns:
            Matches in display-name order. A blank query matches nothing.
        """
        if not query.strip():
            return []

        students = await self.list_students_sorted()
        return self.filter_students(students, query)

    @staticmethod
    def filter_students(students: list[Student], query: str) -> list[Student]:
        """Filter an already loaded student listing by substring.

        Lets interactive callers load the roster once and filter on every
        keystroke without a store round-trip.
        """
        needle = query.strip().lower()
        if not needle:
            return []
        return [student for student in students if _matches_substring(student, needle)]

    async def find_exact_student(
        self,
        first_name: str,
        last_name: str,
        birthday: str,
    ) -> Student:
        """Find the student with exactly this identity.

        Names compare case-insensitively after trimming; the birthday must
        match verbatim. When duplicates exist, the first one in collection
        order wins.

        Args:
            first_name: Student first name.
            last_name: Student last name.
            birthday: Birthday as stored (ISO date).

        Returns:
            The matching student.

        Raises:
            IncompleteCriteriaError: If any criterion is blank. No store
                call is made.
            StudentNotFoundError: If nothing matches.
        """
        criteria = {
            "first_name": first_name,
            "last_name": last_name,
            "birthday": birthday,
        }
        missing = [name for name, value in criteria.items() if not (value or "").strip()]
        if missing:
            raise IncompleteCriteriaError(missing)

        for student in await self.repository.list_students():
            if (
                _same_name(student.first_name, first_name)
                and _same_name(student.last_name, last_name)
                and student.birthday == birthday
            ):
                logger.debug("Exact match for %s %s: %s", first_name, last_name, student.uid)
                return student

        raise StudentNotFoundError(f"{first_name.strip()} {last_name.strip()} ({birthday})")
