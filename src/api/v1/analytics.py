# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics API endpoints.

This module provides endpoints for the analytics page charts:
- GET /progress-over-time - Daily answer totals
- GET /activity-heatmap - Activity per calendar day
- GET /accuracy-breakdown - Accuracy by question type and difficulty
- GET /quiz-performance-trend - Quiz scores over time
- GET /flashcard-analytics - Flashcard mastery and recent activity
- GET /best-worst-topics - Strongest and weakest topics
- GET /study-time - Total answering time
- GET /comprehensive - All charts in one call

Example:
    GET /api/v1/analytics/activity-heatmap?year=2025
    X-User-Id: 0b6f...
"""

import logging
from datetime import date
from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, status

from src.api.dependencies import Analytics, CurrentUserId
from src.api.schemas import ApiResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/progress-over-time",
    response_model=ApiResponse,
    summary="Get progress over time",
    description="Get daily answer totals, optionally within an inclusive date range.",
)
async def get_progress_over_time(
    user_id: CurrentUserId,
    service: Analytics,
    date_from: Annotated[date | None, Query(alias="from", description="First day (YYYY-MM-DD)")] = None,
    date_to: Annotated[date | None, Query(alias="to", description="Last day (YYYY-MM-DD)")] = None,
) -> ApiResponse:
    """Get progress over time.

    Args:
        user_id: Authenticated user ID.
        service: Analytics service.
        date_from: First day of the range.
        date_to: Last day of the range.

    Returns:
        Envelope with daily progress points, oldest first.

    Raises:
        HTTPException: If the range ends before it starts.
    """
    if date_from is not None and date_to is not None and date_from > date_to:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="'from' must not be after 'to'",
        )

    points = await service.get_progress_over_time(user_id, date_from=date_from, date_to=date_to)
    return ApiResponse.ok([point.to_dict() for point in points])


@router.get(
    "/activity-heatmap",
    response_model=ApiResponse,
    summary="Get activity heatmap",
    description="Get activity counts per day for a year, or the trailing 30 days.",
)
async def get_activity_heatmap(
    user_id: CurrentUserId,
    service: Analytics,
    year: Annotated[int | None, Query(ge=1970, le=9999, description="Calendar year")] = None,
) -> ApiResponse:
    """Get the activity heatmap.

    Args:
        user_id: Authenticated user ID.
        service: Analytics service.
        year: Calendar year to cover; the trailing window when omitted.

    Returns:
        Envelope with {date, activity_count} entries ascending by date.
    """
    logger.info("Getting activity heatmap for user: %s (year=%s)", user_id, year)
    heatmap = await service.get_activity_heatmap(user_id, year=year)
    return ApiResponse.ok([day.to_dict() for day in heatmap])


@router.get(
    "/accuracy-breakdown",
    response_model=ApiResponse,
    summary="Get accuracy breakdown",
)
async def get_accuracy_breakdown(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    breakdown = await service.get_accuracy_breakdown(user_id)
    return ApiResponse.ok(breakdown.to_dict())


@router.get(
    "/quiz-performance-trend",
    response_model=ApiResponse,
    summary="Get quiz performance trend",
)
async def get_quiz_performance_trend(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    trend = await service.get_quiz_performance_trend(user_id)
    return ApiResponse.ok([point.to_dict() for point in trend])


@router.get(
    "/flashcard-analytics",
    response_model=ApiResponse,
    summary="Get flashcard analytics",
)
async def get_flashcard_analytics(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    analytics = await service.get_flashcard_analytics(user_id)
    return ApiResponse.ok(analytics.to_dict())


@router.get(
    "/best-worst-topics",
    response_model=ApiResponse,
    summary="Get best and worst topics",
)
async def get_best_worst_topics(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    ranking = await service.get_best_worst_topics(user_id)
    return ApiResponse.ok(ranking.to_dict())


@router.get(
    "/study-time",
    response_model=ApiResponse,
    summary="Get total study time",
)
async def get_total_study_time(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    seconds = await service.get_total_study_time(user_id)
    return ApiResponse.ok({"total_study_time_seconds": seconds})


@router.get(
    "/comprehensive",
    response_model=ApiResponse,
    summary="Get all analytics",
    description="Get every analytics chart in one call. Fails as a whole if any chart fails.",
)
async def get_comprehensive_analytics(user_id: CurrentUserId, service: Analytics) -> ApiResponse:
    logger.info("Getting comprehensive analytics for user: %s", user_id)
    analytics = await service.get_comprehensive_analytics(user_id)
    return ApiResponse.ok(analytics.to_dict())
