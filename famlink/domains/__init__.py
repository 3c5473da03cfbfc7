# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services layer for famlink.

This package contains domain services that encapsulate the family-link
rules. Each domain module orchestrates record access through the people
repository; none of them talks to the store directly for reads.

Domains:
    auth: Current-identity provider interface.
    class_: Class management.
    parent: Parent registration and the parent portal.
    parent_relation: Parent-student link synchronization.
    people: Record access and shape normalization.
    search: Student search.
"""
