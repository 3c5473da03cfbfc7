# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Class records stored in the classes collection."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from famlink.models.common import RecordModel


class ClassRecord(RecordModel):
    """Class document.

    Attributes:
        id: Class identifier, also the document key.
        teacher: ID of the assigned teacher, or None.
        students: Enrolled student IDs in enrollment order.
        created_at: ISO 8601 creation time.
        updated_at: ISO 8601 time of the last update.
    """

    id: str
    name: str | None = None
    teacher: str | None = None
    students: list[str] = Field(default_factory=list)
    created_at: str | None = None
    updated_at: str | None = None


class ClassCreateRequest(BaseModel):
    """Data for a new class. Extra fields are stored as given."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        str_strip_whitespace=True,
    )

    name: str = Field(min_length=1)

    def to_fields(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ClassUpdateRequest(BaseModel):
    """Partial class update. Relationship fields are changed through
    dedicated operations, never through a plain update."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        str_strip_whitespace=True,
    )

    name: str | None = Field(default=None, min_length=1)

    def to_fields(self) -> dict[str, Any]:
        fields = self.model_dump(by_alias=True, exclude_none=True, mode="json")
        for owned in ("id", "teacher", "students", "createdAt", "updatedAt"):
            fields.pop(owned, None)
        return fields
