# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for shape normalization and record decoding."""

import pytest

from famlink.domains.people import (
    MalformedRecordError,
    decode_class,
    decode_user,
    normalize_id_list,
    normalize_user_document,
)
from famlink.models.people import Parent, Student, Teacher


class TestNormalizeIdList:
    """Tests for normalize_id_list."""

    def test_none_is_empty(self) -> None:
        """Test that a missing list reads as empty."""
        assert normalize_id_list(None) == []

    def test_list_is_kept_in_order(self) -> None:
        """Test that a canonical list is unchanged."""
        assert normalize_id_list(["s2", "s1"]) == ["s2", "s1"]

    def test_keyed_map_uses_numeric_key_order(self) -> None:
        """Test that index keys are compared numerically."""
        value = {"10": "s11", "2": "s3", "0": "s1", "1": "s2"}

        assert normalize_id_list(value) == ["s1", "s2", "s3", "s11"]

    def test_push_keys_follow_index_keys(self) -> None:
        """Test that non-numeric keys sort after numeric ones."""
        value = {"-Nb": "s3", "0": "s1", "-Na": "s2"}

        assert normalize_id_list(value) == ["s1", "s2", "s3"]

    def test_holes_and_duplicates_are_dropped(self) -> None:
        """Test that null holes vanish and the first duplicate wins."""
        assert normalize_id_list([None, "p1", "p2", "p1", None]) == ["p1", "p2"]

    def test_integer_ids_become_strings(self) -> None:
        """Test that numeric IDs are coerced to text."""
        assert normalize_id_list([12, "s1"]) == ["12", "s1"]

    @pytest.mark.parametrize(
        "value",
        [
            None,
            ["s2", "s1"],
            {"1": "s3", "0": "s2"},
            {"-Nb": "s3", "0": "s1", "-Na": "s2"},
            [None, "p9", "p9", 12],
        ],
    )
    def test_normalizing_twice_changes_nothing(self, value) -> None:
        """Test that a normalized list is already canonical."""
        once = normalize_id_list(value)

        assert normalize_id_list(once) == once

    @pytest.mark.parametrize("value", ["s1", 5, True, 1.5])
    def test_scalar_is_malformed(self, value) -> None:
        """Test that scalar list fields are rejected."""
        with pytest.raises(MalformedRecordError) as exc_info:
            normalize_id_list(value, "users/p1/studentList")

        assert exc_info.value.path == "users/p1/studentList"

    def test_nested_item_is_malformed(self) -> None:
        """Test that non-ID items are rejected."""
        with pytest.raises(MalformedRecordError):
            normalize_id_list([{"id": "s1"}])


class TestNormalizeUserDocument:
    """Tests for normalize_user_document."""

    def test_key_is_authoritative_for_uid(self) -> None:
        """Test that the document key overrides a stale uid."""
        doc = normalize_user_document("p1", {"uid": "old", "role": "Parent"})

        assert doc["uid"] == "p1"

    def test_list_fields_are_normalized(self) -> None:
        """Test that both reference list fields are coerced."""
        doc = normalize_user_document(
            "p1",
            {"studentList": {"1": "s2", "0": "s1"}, "parentsList": [None, "p9"]},
        )

        assert doc["studentList"] == ["s1", "s2"]
        assert doc["parentsList"] == ["p9"]

    def test_input_is_not_mutated(self) -> None:
        """Test that the stored value is left as read."""
        raw = {"studentList": {"0": "s1"}}

        normalize_user_document("p1", raw)

        assert raw == {"studentList": {"0": "s1"}}

    def test_non_mapping_is_malformed(self) -> None:
        """Test that a scalar document is rejected."""
        with pytest.raises(MalformedRecordError):
            normalize_user_document("p1", "Parent")


class TestDecodeUser:
    """Tests for decode_user."""

    def test_decodes_by_role(self) -> None:
        """Test the role discriminant selects the record type."""
        assert isinstance(decode_user("p1", {"role": "Parent"}), Parent)
        assert isinstance(decode_user("s1", {"role": "Student"}), Student)
        assert isinstance(decode_user("t1", {"role": "Teacher"}), Teacher)

    def test_parent_defaults(self) -> None:
        """Test that absent fields take their defaults."""
        parent = decode_user("p1", {"role": "Parent"})

        assert parent.student_list == []
        assert parent.student_count == 0
        assert parent.has_count_drift is False

    def test_unknown_fields_survive(self) -> None:
        """Test that unknown stored fields are kept on the record."""
        parent = decode_user("p1", {"role": "Parent", "nickname": "KT"})

        assert parent.to_document()["nickname"] == "KT"

    def test_grade_fallback(self) -> None:
        """Test schoolGrade, then grade, then empty."""
        assert decode_user("s1", {"role": "Student", "schoolGrade": "5", "grade": "4"}).effective_grade == "5"
        assert decode_user("s1", {"role": "Student", "grade": 7}).effective_grade == "7"
        assert decode_user("s1", {"role": "Student"}).effective_grade == ""

    def test_unknown_role_is_malformed(self) -> None:
        """Test that records without a known role are rejected."""
        with pytest.raises(MalformedRecordError, match="unknown role"):
            decode_user("x1", {"role": "Admin"})

    def test_invalid_field_is_malformed(self) -> None:
        """Test that wrongly typed fields are rejected."""
        with pytest.raises(MalformedRecordError) as exc_info:
            decode_user("p1", {"role": "Parent", "studentCount": "many"})

        assert exc_info.value.original_error is not None


class TestDecodeClass:
    """Tests for decode_class."""

    def test_key_is_authoritative_for_id(self) -> None:
        """Test that the document key becomes the class id."""
        record = decode_class("class_1", {"name": "5A", "students": {"0": "s1", "1": "s1"}})

        assert record.id == "class_1"
        assert record.students == ["s1"]
        assert record.teacher is None
