# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Store adapter contract for the hierarchical key-value document store.

The store is a JSON tree addressed by ``/``-separated paths, shaped like a
Firebase Realtime Database. Every operation is a network round-trip and none
is transactional across paths; ``transaction`` is conditional on a single
path only.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any

# Characters Firebase forbids in keys
FORBIDDEN_KEY_CHARS = frozenset(".$#[]")


class StoreError(Exception):
    """Base exception for store adapter errors.

    Attributes:
        message: Human-readable error description.
        path: Store path the failing operation addressed.
        original_error: The underlying backend error, if any.
    """

    def __init__(
        self,
        message: str,
        path: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.original_error = original_error

    def __str__(self) -> str:
        """Return string representation of the error."""
        text = self.message
        if self.path is not None:
            text = f"{text} (path={self.path})"
        if self.original_error:
            text = f"{text}: {self.original_error}"
        return text


class StoreUnavailableError(StoreError):
    """Raised when the backend cannot complete an operation."""

    pass


class TransactionConflictError(StoreError):
    """Raised when a conditional write kept conflicting and gave up."""

    pass


class InvalidPathError(StoreError):
    """Raised when a path contains characters the store rejects."""

    pass


def split_path(path: str) -> list[str]:
    """Split a store path into validated segments.

    Leading and trailing slashes are ignored; the empty path is the root.

    Args:
        path: Slash-separated store path.

    Returns:
        List of key segments.

    Raises:
        InvalidPathError: If a segment is empty or holds a forbidden character.
    """
    stripped = path.strip("/")
    if not stripped:
        return []

    segments = stripped.split("/")
    for segment in segments:
        if not segment or FORBIDDEN_KEY_CHARS.intersection(segment):
            raise InvalidPathError(f"Invalid key segment {segment!r}", path=path)
    return segments


def join_path(*segments: str) -> str:
    """Join key segments into a store path.

    Args:
        *segments: Path segments; each may itself contain slashes.

    Returns:
        Normalized path without leading or trailing slashes.
    """
    parts: list[str] = []
    for segment in segments:
        parts.extend(split_path(segment))
    return "/".join(parts)


class StoreAdapter(ABC):
    """Abstract hierarchical key-value store.

    Implementations carry no business logic. Failures surface as
    StoreUnavailableError with no partial-success signaling within one call.
    """

    @abstractmethod
    async def read_subtree(self, path: str) -> Any | None:
        """Read the value stored at ``path``, or None when absent."""

    @abstractmethod
    async def write_document(self, path: str, value: Any) -> None:
        """Replace the value stored at ``path``."""

    @abstractmethod
    async def patch_fields(self, path: str, fields: Mapping[str, Any]) -> None:
        """Merge the named child fields into ``path`` without touching siblings.

        A field value of None removes that child.
        """

    @abstractmethod
    async def delete_subtree(self, path: str) -> None:
        """Remove ``path`` and everything below it."""

    @abstractmethod
    async def append_child(self, collection_path: str, value: Any) -> str:
        """Write ``value`` under a freshly generated key and return the key."""

    @abstractmethod
    def generate_key(self, collection_path: str) -> str:
        """Generate a new chronologically ordered key without writing."""

    @abstractmethod
    async def transaction(
        self,
        path: str,
        transform: Callable[[Any | None], Any],
    ) -> Any:
        """Atomically replace the value at ``path`` with ``transform(current)``.

        The transform may be invoked more than once when the backend detects
        a concurrent write and retries; it must be free of side effects.

        Returns:
            The committed value.

        Raises:
            TransactionConflictError: If the backend gave up retrying.
        """

    async def close(self) -> None:
        """Release backend resources."""
        return None
