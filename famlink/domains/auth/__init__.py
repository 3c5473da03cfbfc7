# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication boundary: the current-identity provider interface."""

from famlink.domains.auth.identity import (
    CurrentIdentity,
    IdentityProvider,
    StaticIdentityProvider,
)

__all__ = [
    "CurrentIdentity",
    "IdentityProvider",
    "StaticIdentityProvider",
]
