# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Dashboard API endpoints.

This module provides endpoints for the learner dashboard:
- GET /stats - Totals, average score and study streak
- GET /activity - Recent quiz activity feed
- GET /progress - Progress per parent topic
- GET /progress/all - Progress for every topic
- GET /all - Stats, activity and progress in one call

Example:
    GET /api/v1/dashboard/activity?limit=5
    X-User-Id: 0b6f...
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query

from src.api.dependencies import CurrentUserId, Dashboard
from src.api.schemas import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/stats",
    response_model=ApiResponse,
    summary="Get dashboard stats",
    description="Get totals, average quiz score and study streak for the current user.",
)
async def get_dashboard_stats(user_id: CurrentUserId, service: Dashboard) -> ApiResponse:
    """Get dashboard statistics.

    Args:
        user_id: Authenticated user ID.
        service: Dashboard service.

    Returns:
        Envelope with DashboardStats.
    """
    logger.info("Getting dashboard stats for user: %s", user_id)
    stats = await service.get_dashboard_stats(user_id)
    return ApiResponse.ok(stats.to_dict())


@router.get(
    "/activity",
    response_model=ApiResponse,
    summary="Get recent activity",
    description="Get quiz creation and completion events, newest first.",
)
async def get_recent_activity(
    user_id: CurrentUserId,
    service: Dashboard,
    limit: Annotated[int | None, Query(ge=1, le=100, description="Maximum entries")] = None,
) -> ApiResponse:
    """Get the recent activity feed.

    Args:
        user_id: Authenticated user ID.
        service: Dashboard service.
        limit: Maximum number of entries; the configured default when omitted.

    Returns:
        Envelope with a list of activity entries.
    """
    logger.info("Getting recent activity for user: %s (limit=%s)", user_id, limit)
    feed = await service.get_recent_activity(user_id, limit=limit)
    return ApiResponse.ok([entry.to_dict() for entry in feed])


@router.get(
    "/progress",
    response_model=ApiResponse,
    summary="Get topic progress",
    description="Get progress per parent topic, rolled up from its subtopics.",
)
async def get_topic_progress(user_id: CurrentUserId, service: Dashboard) -> ApiResponse:
    progress = await service.get_topic_progress(user_id)
    return ApiResponse.ok([topic.to_dict() for topic in progress])


@router.get(
    "/progress/all",
    response_model=ApiResponse,
    summary="Get all topic progress",
    description="Get progress for every topic, annotated with its parent topic.",
)
async def get_all_topic_progress(user_id: CurrentUserId, service: Dashboard) -> ApiResponse:
    progress = await service.get_all_topic_progress(user_id)
    return ApiResponse.ok([topic.to_dict() for topic in progress])


@router.get(
    "/all",
    response_model=ApiResponse,
    summary="Get full dashboard",
    description="Get stats, recent activity and topic progress in one call.",
)
async def get_all_dashboard_data(user_id: CurrentUserId, service: Dashboard) -> ApiResponse:
    """Get the complete dashboard bundle.

    Fails as a whole when any part cannot be fetched.
    """
    logger.info("Getting full dashboard for user: %s", user_id)
    bundle = await service.get_all_dashboard_data(user_id)
    return ApiResponse.ok(bundle.to_dict())
