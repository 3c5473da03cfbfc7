# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Firebase Realtime Database store adapter.

The firebase_admin SDK is synchronous, so every call runs in a bounded
thread pool to keep the event loop free.

Example:
    store = FirebaseStore(settings)
    await store.connect()
    doc = await store.read_subtree("users/abc")
    await store.close()
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import TYPE_CHECKING, Any, TypeVar

import firebase_admin
from firebase_admin import credentials, db
from firebase_admin.exceptions import FirebaseError

from famlink.infrastructure.store.base import (
    StoreAdapter,
    StoreUnavailableError,
    TransactionConflictError,
    join_path,
)
from famlink.infrastructure.store.keys import PushIdGenerator

if TYPE_CHECKING:
    from famlink.core.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class FirebaseStore(StoreAdapter):
    """StoreAdapter over firebase_admin.db.

    Attributes:
        app: The firebase_admin App in use once connected.
    """

    def __init__(self, settings: "Settings") -> None:
        """Initialize the adapter.

        Args:
            settings: Application settings containing Firebase configuration.
        """
        self._settings = settings.firebase
        self._executor: ThreadPoolExecutor | None = None
        self._root: db.Reference | None = None
        self._owns_app = False
        self._generate = PushIdGenerator()
        self.app: firebase_admin.App | None = None

    async def connect(self) -> None:
        """Initialize (or reuse) the firebase_admin App.

        Raises:
            StoreUnavailableError: If the App cannot be initialized.
        """
        self._executor = ThreadPoolExecutor(
            max_workers=self._settings.max_workers,
            thread_name_prefix="firebase",
        )
        try:
            self.app = await self._run(self._initialize_app)
        except (ValueError, OSError, FirebaseError) as e:
            raise StoreUnavailableError("Failed to initialize Firebase", original_error=e) from e

        self._root = db.reference("/", app=self.app)
        logger.info("Connected to Firebase Realtime Database: %s", self._settings.database_url)

    async def close(self) -> None:
        """Delete the App if this adapter created it, then release the pool.

        App deletion runs on the pool like every other SDK call; the pool is
        shut down without blocking the event loop.
        """
        app = self.app if self._owns_app else None
        self.app = None
        self._root = None
        self._owns_app = False

        try:
            if app is not None:
                await self._run(partial(firebase_admin.delete_app, app))
        finally:
            if self._executor is not None:
                self._executor.shutdown(wait=False)
                self._executor = None

    def _initialize_app(self) -> firebase_admin.App:
        try:
            return firebase_admin.get_app(self._settings.app_name)
        except ValueError:
            pass

        if self._settings.credentials_path:
            cred = credentials.Certificate(self._settings.credentials_path)
        else:
            cred = credentials.ApplicationDefault()

        options: dict[str, Any] = {"databaseURL": self._settings.database_url}
        if self._settings.project_id:
            options["projectId"] = self._settings.project_id

        self._owns_app = True
        return firebase_admin.initialize_app(cred, options, name=self._settings.app_name)

    # ========== StoreAdapter ==========

    async def read_subtree(self, path: str) -> Any | None:
        return await self._call(path, lambda ref: ref.get())

    async def write_document(self, path: str, value: Any) -> None:
        await self._call(path, lambda ref: ref.set(value))

    async def patch_fields(self, path: str, fields: Mapping[str, Any]) -> None:
        if not fields:
            return
        await self._call(path, lambda ref: ref.update(dict(fields)))

    async def delete_subtree(self, path: str) -> None:
        await self._call(path, lambda ref: ref.delete())

    async def append_child(self, collection_path: str, value: Any) -> str:
        new_ref = await self._call(collection_path, lambda ref: ref.push(value))
        return new_ref.key

    def generate_key(self, collection_path: str) -> str:
        join_path(collection_path)
        return self._generate()

    async def transaction(
        self,
        path: str,
        transform: Callable[[Any | None], Any],
    ) -> Any:
        try:
            return await self._call(path, lambda ref: ref.transaction(transform))
        except db.TransactionAbortedError as e:
            raise TransactionConflictError(
                "Transaction aborted after repeated conflicts", path=path, original_error=e
            ) from e

    # ========== Internals ==========

    def _ref(self, path: str) -> db.Reference:
        if self._root is None:
            raise StoreUnavailableError("Firebase store not connected. Call connect() first.")
        normalized = join_path(path)
        return self._root.child(normalized) if normalized else self._root

    async def _call(self, path: str, operation: Callable[[db.Reference], T]) -> T:
        ref = self._ref(path)
        try:
            return await self._run(partial(operation, ref))
        except db.TransactionAbortedError:
            raise
        except FirebaseError as e:
            logger.error("Firebase operation failed on %s: %s", path, e)
            raise StoreUnavailableError("Firebase operation failed", path=path, original_error=e) from e

    async def _run(self, func: Callable[[], T]) -> T:
        if self._executor is None:
            raise StoreUnavailableError("Firebase store not connected. Call connect() first.")
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, func)
