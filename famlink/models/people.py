# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Person records stored in the users collection.

Parent, Student and Teacher documents share one collection and are told
apart by their ``role`` field. Decoding goes through USER_ADAPTER, a
discriminated union on that field.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter, field_validator
from pydantic.alias_generators import to_camel

from famlink.models.common import RecordModel


class Address(RecordModel):
    """Postal address of a parent."""

    street: str = ""
    city: str = ""
    postal_code: str = ""


class PersonRecord(RecordModel):
    """Fields common to every person document."""

    uid: str = ""
    first_name: str = ""
    last_name: str = ""
    email: str | None = None
    telephone: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Parent(PersonRecord):
    """Parent document.

    Attributes:
        student_list: Linked student IDs in link-creation order.
        student_count: Persisted count; equals len(student_list) once the
            relation service has written the record.
        data_completed: Set when the record is created fully populated.
        frozen: Set at creation; cleared by activation.
        created_at: Creation time in epoch milliseconds.
    """

    role: Literal["Parent"] = "Parent"
    title: str | None = None
    academic_role: str | None = None
    national_id: str | None = None
    address: Address | None = None
    school_name: str | None = None
    student_list: list[str] = Field(default_factory=list)
    student_count: int = 0
    data_completed: bool = False
    frozen: bool = False
    created_at: int | str | None = None

    @property
    def has_count_drift(self) -> bool:
        return self.student_count != len(self.student_list)


class Student(PersonRecord):
    """Student document.

    Old records carry the grade as ``grade``, newer ones as ``schoolGrade``;
    either or both may be present.
    """

    role: Literal["Student"] = "Student"
    birthday: str = ""
    parents_list: list[str] = Field(default_factory=list)
    linked_teacher_id: str | None = None
    linked_school_id: str | None = None
    school_grade: str | None = None
    grade: str | None = None

    @field_validator("school_grade", "grade", mode="before")
    @classmethod
    def _grade_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def effective_grade(self) -> str:
        return self.school_grade or self.grade or ""


class Teacher(PersonRecord):
    """Teacher document. Classes reference teachers, not the reverse."""

    role: Literal["Teacher"] = "Teacher"


UserRecord = Annotated[Union[Parent, Student, Teacher], Field(discriminator="role")]

USER_ADAPTER: TypeAdapter[Parent | Student | Teacher] = TypeAdapter(UserRecord)


class AddressDraft(BaseModel):
    """Address fields submitted when registering a parent."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    postal_code: str = Field(pattern=r"^[0-9]{4,5}$")


class ParentDraft(BaseModel):
    """Personal data of a parent being registered by an administrator.

    Credentials are not part of the draft; account provisioning happens in
    the identity provider.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    title: Literal["Mr.", "Mrs."] = "Mr."
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: EmailStr
    telephone: str = Field(pattern=r"^[0-9]{8,}$")
    national_id: str = Field(pattern=r"^[0-9]{8}$")
    address: AddressDraft
    school_name: str = Field(min_length=1)
    academic_role: Literal["Father", "Mother", "Guardian"] = "Father"


class ChildUpdate(BaseModel):
    """Editable fields of a child, as exposed to its parent."""

    model_config = ConfigDict(str_strip_whitespace=True)

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    birthday: str | None = None
    grade: str | None = None

    def to_fields(self) -> dict[str, str]:
        """Map to stored field names; grade is always written as schoolGrade."""
        names = {
            "first_name": "firstName",
            "last_name": "lastName",
            "birthday": "birthday",
            "grade": "schoolGrade",
        }
        return {
            names[key]: value
            for key, value in self.model_dump(exclude_none=True).items()
        }


class ChildOverview(BaseModel):
    """One row of a parent's children listing."""

    uid: str
    first_name: str
    last_name: str
    birthday: str
    grade: str
    linked_teacher_id: str | None = None
    teacher_name: str | None = None
