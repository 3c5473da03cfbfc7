# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Service wiring.

Every service receives its collaborators through its constructor. This
module assembles them over one store adapter so callers (a web layer, a
CLI, tests) do not repeat the wiring.

Example:
    services = await create_services()
    try:
        result = await services.relations.link("p1", "s1")
    finally:
        await services.close()
"""

from dataclasses import dataclass

from famlink.core.config import Settings, get_settings
from famlink.domains.auth.identity import IdentityProvider, StaticIdentityProvider
from famlink.domains.class_.service import ClassService
from famlink.domains.parent.registration import ParentRegistrationService
from famlink.domains.parent.service import ParentService
from famlink.domains.parent_relation.service import ParentRelationService
from famlink.domains.people.repository import PeopleRepository
from famlink.domains.search.service import StudentSearchService
from famlink.infrastructure.store import StoreAdapter, create_store
from famlink.utils.logging import get_logger, setup_logging

logger = get_logger(__name__)


@dataclass
class Services:
    """Services sharing one store adapter."""

    store: StoreAdapter
    repository: PeopleRepository
    search: StudentSearchService
    relations: ParentRelationService
    registration: ParentRegistrationService
    parents: ParentService
    classes: ClassService

    async def close(self) -> None:
        """Release the store adapter."""
        await self.store.close()


def build_services(
    store: StoreAdapter,
    settings: Settings | None = None,
    identity: IdentityProvider | None = None,
) -> Services:
    """Assemble all services over an existing store adapter.

    Args:
        store: Connected store adapter.
        settings: Application settings. Defaults to get_settings().
        identity: Current-identity provider for the parent portal.
            Defaults to a provider with nobody signed in.

    Returns:
        The wired services.
    """
    if settings is None:
        settings = get_settings()
    if identity is None:
        identity = StaticIdentityProvider()

    repository = PeopleRepository(store)
    search = StudentSearchService(repository)
    relations = ParentRelationService(
        repository,
        strategy=settings.relations.list_update_strategy,
    )

    return Services(
        store=store,
        repository=repository,
        search=search,
        relations=relations,
        registration=ParentRegistrationService(repository, relations),
        parents=ParentService(repository, search, relations, identity),
        classes=ClassService(repository),
    )


async def create_services(
    settings: Settings | None = None,
    identity: IdentityProvider | None = None,
) -> Services:
    """Configure logging, create the configured store adapter and assemble
    all services.

    The returned Services own the store; close() them when done.
    """
    if settings is None:
        settings = get_settings()

    setup_logging(settings)
    store = await create_store(settings)
    logger.info(
        "services_ready",
        store_backend=settings.store.backend,
        list_update_strategy=settings.relations.list_update_strategy,
    )
    return build_services(store, settings=settings, identity=identity)
