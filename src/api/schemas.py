# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Response envelope shared by the analytics endpoints.

Every analytics response, successful or not, has the same shape:

    {"success": true, "data": {...}, "error": null}
    {"success": false, "data": null, "error": "Failed to fetch answers"}
"""

from typing import Any

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """Uniform response envelope."""

    success: bool = Field(description="Whether the request succeeded")
    data: Any | None = Field(None, description="Payload on success")
    error: str | None = Field(None, description="Human-readable error on failure")

    @classmethod
    def ok(cls, data: Any) -> "ApiResponse":
        """Wrap a successful payload."""
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(cls, message: str) -> "ApiResponse":
        """Wrap an error message."""
        return cls(success=False, data=None, error=message)
