# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components.

Exports:
    RequestContextMiddleware: Binds request_id and user_id to log lines.
"""

from src.api.middleware.request_context import RequestContextMiddleware

__all__ = ["RequestContextMiddleware"]
