# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""People domain package.

This package provides typed record access over the document store:
- Shape normalization of legacy reference lists
- Decoding of Parent, Student, Teacher and Class documents
- Reading, creating and patching records
"""

from famlink.domains.people.exceptions import (
    InvalidUserTypeError,
    MalformedRecordError,
    ParentNotFoundError,
    PeopleRepositoryError,
    StudentNotFoundError,
    TeacherNotFoundError,
    UserNotFoundError,
)
from famlink.domains.people.normalization import (
    decode_class,
    decode_user,
    normalize_id_list,
    normalize_user_document,
)
from famlink.domains.people.repository import PeopleRepository, class_path, user_path

__all__ = [
    "PeopleRepository",
    "PeopleRepositoryError",
    "MalformedRecordError",
    "InvalidUserTypeError",
    "UserNotFoundError",
    "ParentNotFoundError",
    "StudentNotFoundError",
    "TeacherNotFoundError",
    "decode_class",
    "decode_user",
    "normalize_id_list",
    "normalize_user_document",
    "class_path",
    "user_path",
]
