# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Current-identity provider interface.

Authentication and session handling live outside famlink. Services only
need to know who is acting, so they depend on the IdentityProvider protocol.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller.

    Attributes:
        id: Key of the caller's document in the users collection.
        role: Role claimed by the session ("Parent", "Teacher", ...).
        claims: Any further claims issued by the identity provider.
    """

    id: str
    role: str | None = None
    claims: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class IdentityProvider(Protocol):
    """Source of the current identity."""

    async def get_current_user(self) -> CurrentIdentity | None:
        """Return the acting identity, or None when nobody is signed in."""
        ...


class StaticIdentityProvider:
    """IdentityProvider returning a fixed identity.

    Example:
        provider = StaticIdentityProvider(CurrentIdentity(id="p1", role="Parent"))
    """

    def __init__(self, identity: CurrentIdentity | None = None) -> None:
        self._identity = identity

    async def get_current_user(self) -> CurrentIdentity | None:
        return self._identity
