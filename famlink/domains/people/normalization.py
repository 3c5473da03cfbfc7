# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shape normalization of stored documents.

Reference lists reach the store in several shapes over time: ordered lists,
index-keyed mappings left behind by partial updates, lists with null holes,
or nothing at all when the last entry was removed. Every read funnels them
into one canonical form: an ordered list of unique, non-empty string IDs.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from famlink.domains.people.exceptions import MalformedRecordError
from famlink.models.class_ import ClassRecord
from famlink.models.common import CLASSES_COLLECTION, USERS_COLLECTION, UserRole
from famlink.models.people import USER_ADAPTER, Parent, Student, Teacher

USER_LIST_FIELDS = ("studentList", "parentsList")
CLASS_LIST_FIELDS = ("students",)

KNOWN_ROLES = frozenset(role.value for role in UserRole)


def _key_order(key: str) -> tuple[int, int, str]:
    # Index keys first, in numeric order; push keys sort lexicographically
    if key.isdigit():
        return (0, int(key), "")
    return (1, 0, key)


def normalize_id_list(value: Any, path: str = "") -> list[str]:
    """Coerce a stored reference list to an ordered list of unique IDs.

    Args:
        value: Stored value: None, a sequence, or a keyed mapping.
        path: Store path of the field, used in error messages.

    Returns:
        IDs in stored order, first occurrence kept, holes dropped.

    Raises:
        MalformedRecordError: If the value is a scalar or holds non-ID items.

    Example:
        >>> normalize_id_list({"1": "s2", "0": "s1"})
        ['s1', 's2']
    """
    if value is None:
        return []

    if isinstance(value, Mapping):
        items = [value[key] for key in sorted(value, key=lambda k: _key_order(str(k)))]
    elif isinstance(value, (list, tuple)):
        items = list(value)
    else:
        raise MalformedRecordError(path, f"expected a list, got {type(value).__name__}")

    ids: list[str] = []
    seen: set[str] = set()
    for item in items:
        if item is None:
            continue
        if isinstance(item, int) and not isinstance(item, bool):
            item = str(item)
        if not isinstance(item, str):
            raise MalformedRecordError(path, f"list item {item!r} is not an ID")
        if not item or item in seen:
            continue
        seen.add(item)
        ids.append(item)
    return ids


def _normalize_document(
    path: str,
    raw: Any,
    list_fields: tuple[str, ...],
) -> dict[str, Any]:
    if not isinstance(raw, Mapping):
        raise MalformedRecordError(path, f"expected a document, got {type(raw).__name__}")

    doc = {str(key): value for key, value in raw.items() if value is not None}
    for field in list_fields:
        if field in doc:
            doc[field] = normalize_id_list(doc[field], f"{path}/{field}")
    return doc


def normalize_user_document(user_id: str, raw: Any) -> dict[str, Any]:
    """Normalize a users/{id} document without decoding it.

    The document key is authoritative for ``uid``.

    Args:
        user_id: Document key.
        raw: Stored document.

    Returns:
        A new dict with canonical list fields and ``uid`` set.

    Raises:
        MalformedRecordError: If the document or a list field is malformed.
    """
    path = f"{USERS_COLLECTION}/{user_id}"
    doc = _normalize_document(path, raw, USER_LIST_FIELDS)
    doc["uid"] = user_id
    return doc


def decode_user(user_id: str, raw: Any) -> Parent | Student | Teacher:
    """Normalize and decode a users/{id} document into its role's record type.

    Raises:
        MalformedRecordError: If the role is unknown or the fields do not
            validate.
    """
    path = f"{USERS_COLLECTION}/{user_id}"
    doc = normalize_user_document(user_id, raw)

    role = doc.get("role")
    if role not in KNOWN_ROLES:
        raise MalformedRecordError(path, f"unknown role {role!r}")

    try:
        return USER_ADAPTER.validate_python(doc)
    except ValidationError as e:
        raise MalformedRecordError(path, "field validation failed", e) from e


def decode_class(class_id: str, raw: Any) -> ClassRecord:
    """Normalize and decode a classes/{id} document.

    Raises:
        MalformedRecordError: If the document does not validate.
    """
    path = f"{CLASSES_COLLECTION}/{class_id}"
    doc = _normalize_document(path, raw, CLASS_LIST_FIELDS)
    doc["id"] = class_id

    try:
        return ClassRecord.model_validate(doc)
    except ValidationError as e:
        raise MalformedRecordError(path, "field validation failed", e) from e
