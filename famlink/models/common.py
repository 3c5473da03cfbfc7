# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared model primitives for stored records."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

USERS_COLLECTION = "users"
CLASSES_COLLECTION = "classes"


class UserRole(str, Enum):
    """Role discriminant of documents in the users collection."""

    PARENT = "Parent"
    STUDENT = "Student"
    TEACHER = "Teacher"


class RecordModel(BaseModel):
    """Base for documents persisted in the store.

    Python attributes are snake_case; stored field names are camelCase.
    Unknown stored fields are kept so a record survives a read/write cycle.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_document(self) -> dict[str, Any]:
        """Serialize to the stored document shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
