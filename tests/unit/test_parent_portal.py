# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the parent portal service."""

import pytest

from famlink.domains.auth import CurrentIdentity, IdentityProvider, StaticIdentityProvider
from famlink.domains.parent import (
    ChildAlreadyLinkedError,
    ChildNotLinkedError,
    NotAuthenticatedError,
    ParentService,
)
from famlink.domains.people import StudentNotFoundError
from famlink.domains.search.service import IncompleteCriteriaError
from famlink.models.people import ChildUpdate
from famlink.models.relations import LinkStatus


def make_service(repository, search_service, relation_service, parent_id="p1"):
    """Create a portal service acting as the given parent."""
    identity = StaticIdentityProvider(CurrentIdentity(id=parent_id, role="Parent"))
    return ParentService(repository, search_service, relation_service, identity)


class TestIdentity:
    """Tests for resolving the acting parent."""

    def test_static_provider_satisfies_protocol(self) -> None:
        """Test that the bundled provider implements the protocol."""
        assert isinstance(StaticIdentityProvider(), IdentityProvider)

    @pytest.mark.asyncio
    async def test_not_authenticated(self, repository, search_service, relation_service):
        """Test that nobody signed in is rejected."""
        service = ParentService(
            repository, search_service, relation_service, StaticIdentityProvider()
        )

        with pytest.raises(NotAuthenticatedError):
            await service.current_parent_id()

    @pytest.mark.asyncio
    async def test_backfills_missing_uid(self, repository, search_service, relation_service, store):
        """Test that a document without uid receives its key."""
        service = make_service(repository, search_service, relation_service, parent_id="p2")

        assert await service.current_parent_id() == "p2"
        assert store.snapshot("users/p2/uid") == "p2"

    @pytest.mark.asyncio
    async def test_existing_uid_is_not_rewritten(self, repository, search_service, relation_service, store):
        """Test that a document with uid is only read."""
        service = make_service(repository, search_service, relation_service)

        await service.current_parent_id()

        assert ("patch_fields", "users/p1") not in store.calls

    @pytest.mark.asyncio
    async def test_uid_checked_on_first_use_only(self, repository, search_service, relation_service, store):
        """Test that later calls skip the identity document read."""
        service = make_service(repository, search_service, relation_service, parent_id="p2")
        await service.current_parent_id()
        store.calls.clear()

        assert await service.current_parent_id() == "p2"
        assert store.calls == []


class TestSearchAndLink:
    """Tests for finding and linking a child."""

    @pytest.mark.asyncio
    async def test_search_child(self, repository, search_service, relation_service):
        """Test finding a child not yet linked."""
        service = make_service(repository, search_service, relation_service)

        student = await service.search_child("Adam", "GHARBI", "2013-06-30")

        assert student.uid == "s4"

    @pytest.mark.asyncio
    async def test_search_child_already_linked(self, repository, search_service, relation_service):
        """Test that a child linked to the acting parent is reported."""
        service = make_service(repository, search_service, relation_service)

        with pytest.raises(ChildAlreadyLinkedError) as exc_info:
            await service.search_child("Yasmine", "Ben Salah", "2014-03-02")

        assert exc_info.value.student_id == "s1"

    @pytest.mark.asyncio
    async def test_search_child_errors(self, repository, search_service, relation_service):
        """Test incomplete criteria and no match."""
        service = make_service(repository, search_service, relation_service)

        with pytest.raises(IncompleteCriteriaError):
            await service.search_child("Adam", "", "2013-06-30")
        with pytest.raises(StudentNotFoundError):
            await service.search_child("Adam", "Gharbi", "2013-06-29")

    @pytest.mark.asyncio
    async def test_link_child(self, repository, search_service, relation_service, store):
        """Test linking a found child on both sides."""
        service = make_service(repository, search_service, relation_service)

        result = await service.link_child("s4")

        assert result.status == LinkStatus.LINKED
        assert store.snapshot("users/p1/studentList") == ["s1", "s4"]
        assert store.snapshot("users/p1/studentCount") == 2
        assert store.snapshot("users/s4/parentsList") == ["p1"]


class TestChildren:
    """Tests for listing and editing children."""

    @pytest.mark.asyncio
    async def test_get_children(self, repository, search_service, relation_service):
        """Test the overview with grade fallback and teacher name."""
        service = make_service(repository, search_service, relation_service)

        children = await service.get_children()

        assert len(children) == 1
        assert children[0].uid == "s1"
        assert children[0].grade == "5"
        assert children[0].teacher_name == "Sonia Haddad"

    @pytest.mark.asyncio
    async def test_get_children_skips_missing(self, repository, search_service, relation_service, store):
        """Test legacy grade and missing student handling."""
        await store.patch_fields("users/p2", {"studentList/2": "gone"})
        service = make_service(repository, search_service, relation_service, parent_id="p2")

        children = await service.get_children()

        assert [child.uid for child in children] == ["s2", "s3"]
        assert children[0].grade == "7"
        assert children[0].teacher_name is None
        assert children[1].grade == ""

    @pytest.mark.asyncio
    async def test_update_child(self, repository, search_service, relation_service, store):
        """Test that edits land in the stored field names."""
        service = make_service(repository, search_service, relation_service)

        await service.update_child("s1", ChildUpdate(first_name="Yasmina", grade="6"))

        student = store.snapshot("users/s1")
        assert student["firstName"] == "Yasmina"
        assert student["schoolGrade"] == "6"
        assert student["lastName"] == "Ben Salah"

    @pytest.mark.asyncio
    async def test_update_unlinked_child(self, repository, search_service, relation_service, store):
        """Test that another parent's child cannot be edited."""
        service = make_service(repository, search_service, relation_service)

        with pytest.raises(ChildNotLinkedError):
            await service.update_child("s2", ChildUpdate(first_name="X"))

        assert store.snapshot("users/s2/firstName") == "Omar"
