# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

The seeded store mirrors data found in long-lived databases: index-keyed
reference maps, null holes, duplicates, a missing studentCount and the
legacy ``grade`` field.
"""

from collections.abc import Iterator
from typing import Any

import pytest

from famlink.core.config import clear_settings_cache
from famlink.domains.parent_relation.service import ParentRelationService
from famlink.domains.people.repository import PeopleRepository
from famlink.domains.search.service import StudentSearchService
from famlink.infrastructure.store import InMemoryStore


# =============================================================================
# Marker Configuration
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )


# =============================================================================
# Settings
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Iterator[None]:
    """Drop cached settings around every test."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def seed_data() -> dict[str, Any]:
    """Provide a users/classes tree with legacy shapes."""
    return {
        "users": {
            "p1": {
                "uid": "p1",
                "role": "Parent",
                "firstName": "Amina",
                "lastName": "Ben Salah",
                "email": "amina@example.com",
                "studentList": ["s1"],
                "studentCount": 1,
            },
            "p2": {
                "role": "Parent",
                "firstName": "Karim",
                "lastName": "Trabelsi",
                "studentList": {"1": "s3", "0": "s2"},
                "studentCount": 5,
                "nickname": "KT",
            },
            "p3": {
                "uid": "p3",
                "role": "Parent",
                "firstName": "Leila",
                "lastName": "Mansour",
            },
            "s1": {
                "uid": "s1",
                "role": "Student",
                "firstName": "Yasmine",
                "lastName": "Ben Salah",
                "birthday": "2014-03-02",
                "parentsList": ["p1"],
                "schoolGrade": "5",
                "linkedTeacherId": "t1",
            },
            "s2": {
                "uid": "s2",
                "role": "Student",
                "firstName": "Omar",
                "lastName": "Trabelsi",
                "birthday": "2012-09-15",
                "parentsList": {"0": "p2"},
                "grade": 7,
            },
            "s3": {
                "uid": "s3",
                "role": "Student",
                "firstName": "Élodie",
                "lastName": "Trabelsi",
                "birthday": "2015-01-20",
                "parentsList": [None, "p9", "p9"],
            },
            "s4": {
                "uid": "s4",
                "role": "Student",
                "firstName": "adam",
                "lastName": "Gharbi",
                "birthday": "2013-06-30",
            },
            "t1": {
                "uid": "t1",
                "role": "Teacher",
                "firstName": "Sonia",
                "lastName": "Haddad",
            },
        },
        "classes": {
            "class_1": {
                "id": "class_1",
                "name": "5A",
                "teacher": "t1",
                "students": {"0": "s1"},
                "createdAt": "2024-09-01T08:00:00.000Z",
                "updatedAt": "2024-09-01T08:00:00.000Z",
            },
        },
    }


@pytest.fixture
def store(seed_data: dict[str, Any]) -> InMemoryStore:
    """Provide an in-memory store seeded with legacy-shaped records."""
    return InMemoryStore(seed_data)


@pytest.fixture
def repository(store: InMemoryStore) -> PeopleRepository:
    """Provide a repository over the seeded store."""
    return PeopleRepository(store)


@pytest.fixture
def search_service(repository: PeopleRepository) -> StudentSearchService:
    """Provide a student search service."""
    return StudentSearchService(repository)


@pytest.fixture
def relation_service(repository: PeopleRepository) -> ParentRelationService:
    """Provide a relation service using transactional list writes."""
    return ParentRelationService(repository, strategy="transaction")


@pytest.fixture
def patch_relation_service(repository: PeopleRepository) -> ParentRelationService:
    """Provide a relation service using read-merge-patch list writes."""
    return ParentRelationService(repository, strategy="patch")
