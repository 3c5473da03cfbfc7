# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""In-process document store with Realtime Database write semantics.

The tree follows the same storage rules as the remote store:
- writing None, an empty mapping or an empty list removes the node
- nodes left empty by a removal disappear
- writing a child below a list turns that list into an index-keyed mapping

Every coroutine yields to the event loop once before touching the tree, so
concurrent callers interleave the way they would against a remote store.
``transaction`` applies its transform without yielding, which makes it atomic
for in-process callers.

Example:
    store = InMemoryStore({"users": {"s1": {"role": "Student"}}})
    await store.patch_fields("users/s1", {"parentsList": ["p1"]})
    store.fail_on("patch_fields", "users/s2")
"""

import asyncio
import copy
from collections.abc import Callable, Mapping
from typing import Any

from famlink.infrastructure.store.base import (
    StoreAdapter,
    StoreUnavailableError,
    join_path,
    split_path,
)
from famlink.infrastructure.store.keys import PushIdGenerator


def _prune(value: Any) -> Any:
    """Drop empty containers the way the remote store does on write."""
    if isinstance(value, Mapping):
        pruned = {}
        for key, child in value.items():
            child = _prune(child)
            if child is not None:
                pruned[str(key)] = child
        return pruned or None
    if isinstance(value, (list, tuple)):
        items = [_prune(item) for item in value]
        if all(item is None for item in items):
            return None
        return items
    return value


def _child(node: Any, key: str) -> Any:
    if isinstance(node, dict):
        return node.get(key)
    if isinstance(node, list) and key.isdigit():
        index = int(key)
        return node[index] if index < len(node) else None
    return None


class InMemoryStore(StoreAdapter):
    """StoreAdapter backed by a nested dict.

    Attributes:
        calls: (operation, path) pairs in the order they were issued.
    """

    def __init__(
        self,
        data: Mapping[str, Any] | None = None,
        key_generator: Callable[[], str] | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            data: Initial tree. Legacy shapes are kept; empty nodes are dropped.
            key_generator: Key source for append_child/generate_key.
        """
        self._root: dict[str, Any] = (_prune(copy.deepcopy(dict(data))) if data else None) or {}
        self._generate = key_generator or PushIdGenerator()
        self._faults: list[tuple[str, str | None, Exception]] = []
        self.calls: list[tuple[str, str]] = []

    # ========== Test and seeding helpers ==========

    def snapshot(self, path: str = "") -> Any:
        """Return a deep copy of the value at ``path`` without yielding."""
        node: Any = self._root
        for key in split_path(path):
            node = _child(node, key)
            if node is None:
                return None
        return copy.deepcopy(node)

    def fail_on(
        self,
        operation: str,
        path: str | None = None,
        error: Exception | None = None,
    ) -> None:
        """Make an operation fail.

        Args:
            operation: Method name, e.g. "patch_fields".
            path: Only fail for this exact path; None fails every path.
            error: Exception to raise; defaults to StoreUnavailableError.
        """
        normalized = join_path(path) if path is not None else None
        exc = error or StoreUnavailableError(f"Injected {operation} failure", path=path)
        self._faults.append((operation, normalized, exc))

    def clear_faults(self) -> None:
        """Remove all injected failures."""
        self._faults.clear()

    # ========== StoreAdapter ==========

    async def read_subtree(self, path: str) -> Any | None:
        await self._enter("read_subtree", path)
        return self.snapshot(path)

    async def write_document(self, path: str, value: Any) -> None:
        await self._enter("write_document", path)
        self._write(split_path(path), value)

    async def patch_fields(self, path: str, fields: Mapping[str, Any]) -> None:
        await self._enter("patch_fields", path)
        base = split_path(path)
        for name, value in fields.items():
            self._write(base + split_path(name), value)

    async def delete_subtree(self, path: str) -> None:
        await self._enter("delete_subtree", path)
        self._write(split_path(path), None)

    async def append_child(self, collection_path: str, value: Any) -> str:
        await self._enter("append_child", collection_path)
        key = self._generate()
        self._write(split_path(collection_path) + [key], value)
        return key

    def generate_key(self, collection_path: str) -> str:
        split_path(collection_path)
        return self._generate()

    async def transaction(
        self,
        path: str,
        transform: Callable[[Any | None], Any],
    ) -> Any:
        await self._enter("transaction", path)
        segments = split_path(path)
        new_value = transform(self.snapshot(path))
        self._write(segments, new_value)
        return self.snapshot(path)

    # ========== Internals ==========

    async def _enter(self, operation: str, path: str) -> None:
        await asyncio.sleep(0)
        normalized = join_path(path)
        self.calls.append((operation, normalized))
        for fault_operation, fault_path, error in self._faults:
            if fault_operation == operation and fault_path in (None, normalized):
                raise error

    def _write(self, segments: list[str], value: Any) -> None:
        value = _prune(copy.deepcopy(value))
        if not segments:
            self._root = value if isinstance(value, dict) else {}
            return

        node = self._root
        for key in segments[:-1]:
            child = node.get(key)
            if isinstance(child, list):
                child = {str(i): item for i, item in enumerate(child) if item is not None}
                node[key] = child
            elif not isinstance(child, dict):
                if value is None:
                    return
                child = {}
                node[key] = child
            node = child

        leaf = segments[-1]
        if value is None:
            node.pop(leaf, None)
        else:
            node[leaf] = value

        self._root = _prune(self._root) or {}
