# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API v1 routes package.

This package contains all v1 API endpoint definitions.
Each module provides a FastAPI router for a specific area.

Modules:
    dashboard: Dashboard stats, activity feed and topic progress.
    analytics: Analytics page charts.
"""

from fastapi import APIRouter

from src.api.v1 import analytics, dashboard

# Create the main v1 router
router = APIRouter(prefix="/api/v1")

router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
router.include_router(analytics.router, prefix="/analytics", tags=["Analytics"])

__all__ = ["router"]
