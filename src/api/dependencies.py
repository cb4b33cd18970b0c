# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Resolve the calling user from the gateway header
- Build the store client over the shared sessionmaker
- Build the analytics service instances

Example:
    @router.get("/stats")
    async def get_stats(
        user_id: CurrentUserId,
        service: Dashboard,
    ):
        ...
"""

import logging
from typing import Annotated
from uuid import UUID

from fastapi import Depends, Header, HTTPException, status

from src.core.config import get_settings
from src.domains.analytics import AnalyticsService, DashboardService, SqlStoreClient, StoreClient
from src.infrastructure.database import DatabaseError, get_sessionmaker

logger = logging.getLogger(__name__)

# Header set by the upstream auth gateway
USER_ID_HEADER = "X-User-Id"


def require_user_id(
    x_user_id: Annotated[str | None, Header(alias=USER_ID_HEADER)] = None,
) -> str:
    """Require the authenticated user's ID.

    Identity is established by the auth gateway in front of this service,
    which forwards the user's UUID in the X-User-Id header.

    Args:
        x_user_id: Raw header value.

    Returns:
        The user ID in canonical UUID form.

    Raises:
        HTTPException: If the header is missing or not a UUID.
    """
    if not x_user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    try:
        return str(UUID(x_user_id))
    except ValueError:
        logger.warning("Rejected malformed user id header: %r", x_user_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid user identity",
        ) from None


# =========================================================================
# Service Dependencies
# =========================================================================


def get_store() -> StoreClient:
    """Get a store client over the application sessionmaker.

    Returns:
        SqlStoreClient bounded by the configured query timeout.

    Raises:
        HTTPException: If the database has not been initialized.
    """
    try:
        sessionmaker = get_sessionmaker()
    except DatabaseError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database not initialized",
        ) from e
    settings = get_settings()
    return SqlStoreClient(sessionmaker, timeout_seconds=settings.analytics.store_timeout_seconds)


def get_dashboard_service(store: StoreClient = Depends(get_store)) -> DashboardService:
    """Get DashboardService instance.

    Args:
        store: Store client.

    Returns:
        DashboardService.
    """
    return DashboardService(store, get_settings().analytics)


def get_analytics_service(store: StoreClient = Depends(get_store)) -> AnalyticsService:
    """Get AnalyticsService instance.

    Args:
        store: Store client.

    Returns:
        AnalyticsService.
    """
    return AnalyticsService(store, get_settings().analytics)


# =========================================================================
# Type Aliases for Cleaner Endpoint Signatures
# =========================================================================

CurrentUserId = Annotated[str, Depends(require_user_id)]
Dashboard = Annotated[DashboardService, Depends(get_dashboard_service)]
Analytics = Annotated[AnalyticsService, Depends(get_analytics_service)]
