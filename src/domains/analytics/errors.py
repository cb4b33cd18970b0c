# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics error taxonomy.

FetchError aborts the bundle it belongs to and is surfaced to the caller.
PartialEnrichmentError marks an optional lookup that failed; callers log it
and carry on without the enrichment. An empty result is never an error.
"""

from __future__ import annotations


class AnalyticsError(Exception):
    """Base exception for analytics errors."""

    pass


class FetchError(AnalyticsError):
    """Raised when a store query fails or times out.

    Attributes:
        operation: Name of the store operation that failed.
        message: Human-readable error description.
        original_error: The underlying exception, if any.
    """

    def __init__(
        self,
        operation: str,
        message: str,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class PartialEnrichmentError(AnalyticsError):
    """Raised when an optional enrichment lookup fails."""

    def __init__(self, enrichment: str, original_error: Exception) -> None:
        super().__init__(f"Enrichment '{enrichment}' unavailable: {original_error}")
        self.enrichment = enrichment
        self.original_error = original_error
