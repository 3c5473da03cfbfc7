# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""famlink - parent, student and class records over a hierarchical document store.

Packages:
- core: configuration
- infrastructure: store adapters
- models: record and result types
- domains: repository, search, relationship synchronization and workflows
- utils: logging and datetime helpers
"""

__version__ = "0.1.0"
