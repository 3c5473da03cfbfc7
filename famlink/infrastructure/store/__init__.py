# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Document store adapters.

Example:
    from famlink.infrastructure.store import create_store

    store = await create_store(settings)
    doc = await store.read_subtree("users/abc")
    await store.close()
"""

from typing import TYPE_CHECKING

from famlink.infrastructure.store.base import (
    InvalidPathError,
    StoreAdapter,
    StoreError,
    StoreUnavailableError,
    TransactionConflictError,
    join_path,
    split_path,
)
from famlink.infrastructure.store.firebase import FirebaseStore
from famlink.infrastructure.store.keys import PushIdGenerator
from famlink.infrastructure.store.memory import InMemoryStore

if TYPE_CHECKING:
    from famlink.core.config.settings import Settings


async def create_store(settings: "Settings") -> StoreAdapter:
    """Build and connect the store adapter selected by configuration.

    Args:
        settings: Application settings.

    Returns:
        A ready-to-use StoreAdapter. The caller owns it and must close() it.

    Raises:
        StoreUnavailableError: If the backend cannot be reached.
    """
    if settings.store.backend == "firebase":
        store = FirebaseStore(settings)
        await store.connect()
        return store

    return InMemoryStore()


__all__ = [
    "StoreAdapter",
    "StoreError",
    "StoreUnavailableError",
    "TransactionConflictError",
    "InvalidPathError",
    "InMemoryStore",
    "FirebaseStore",
    "PushIdGenerator",
    "create_store",
    "join_path",
    "split_path",
]
