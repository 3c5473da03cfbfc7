# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exceptions for person and class record access.

This module defines the exception hierarchy shared by every service that
reads people through the repository:
- PeopleRepositoryError: Base exception
- MalformedRecordError: A stored document cannot be decoded
- InvalidUserTypeError: A record exists but has another role
- UserNotFoundError: A referenced record is absent
  - ParentNotFoundError / StudentNotFoundError / TeacherNotFoundError
"""


class PeopleRepositoryError(Exception):
    """Base exception for record access errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class MalformedRecordError(PeopleRepositoryError):
    """Raised when a stored document cannot be mapped to a record.

    Legacy shapes that normalization knows how to coerce never raise this;
    only documents that are not mappings, carry an unknown role, or hold
    values of the wrong type do.
    """

    def __init__(self, path: str, reason: str, original_error: Exception | None = None):
        super().__init__(f"Malformed record at {path}: {reason}", {"path": path})
        self.path = path
        self.reason = reason
        self.original_error = original_error


class InvalidUserTypeError(PeopleRepositoryError):
    """Raised when a user record has a different role than required."""

    def __init__(self, user_id: str, expected: str, actual: str | None):
        super().__init__(
            f"User {user_id} is not a {expected.lower()}",
            {"user_id": user_id, "expected": expected, "actual": actual},
        )
        self.user_id = user_id
        self.expected = expected
        self.actual = actual


class UserNotFoundError(PeopleRepositoryError):
    """Raised when a referenced user record does not exist."""

    kind = "User"

    def __init__(self, user_id: str):
        super().__init__(f"{self.kind} {user_id} not found", {"user_id": user_id})
        self.user_id = user_id


class ParentNotFoundError(UserNotFoundError):
    """Raised when parent is not found."""

    kind = "Parent"


class StudentNotFoundError(UserNotFoundError):
    """Raised when student is not found."""

    kind = "Student"


class TeacherNotFoundError(UserNotFoundError):
    """Raised when teacher is not found."""

    kind = "Teacher"
