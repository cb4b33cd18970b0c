# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics domain.

Turns raw learning activity (answers, quizzes, completions, flashcards,
exams and topic progress) into dashboard and analytics page data:
- Quiz scoring and study streaks
- Topic progress rollups over the two-level topic tree
- Calendar heatmaps and chart series
- Recent activity feed and best/worst topic ranking

Aggregators are pure functions over typed records. The services fetch
those records concurrently through a StoreClient and compose the results.

Usage:
    from src.domains.analytics import AnalyticsService, DashboardService, SqlStoreClient

    store = SqlStoreClient(get_sessionmaker(), timeout_seconds=10.0)

    dashboard = DashboardService(store, settings.analytics)
    stats = await dashboard.get_dashboard_stats(user_id)

    analytics = AnalyticsService(store, settings.analytics)
    heatmap = await analytics.get_activity_heatmap(user_id, year=2025)
"""

from src.domains.analytics.activity import RecentActivity, assemble_recent_activity
from src.domains.analytics.concurrency import gather_all
from src.domains.analytics.errors import AnalyticsError, FetchError, PartialEnrichmentError
from src.domains.analytics.heatmap import (
    DateWindow,
    HeatmapDay,
    build_activity_heatmap,
    heatmap_window,
)
from src.domains.analytics.insights import (
    AccuracyBreakdown,
    FlashcardAnalytics,
    ProgressPoint,
    QuizTrendPoint,
    build_accuracy_breakdown,
    build_flashcard_analytics,
    build_progress_over_time,
    build_quiz_performance_trend,
    calculate_total_study_time,
)
from src.domains.analytics.ranking import BestWorstTopics, RankedTopic, rank_best_worst_topics
from src.domains.analytics.scores import (
    ScoreSummary,
    calculate_average_score,
    round_half_up,
)
from src.domains.analytics.service import (
    AnalyticsService,
    ComprehensiveAnalytics,
    DashboardData,
    DashboardService,
    DashboardStats,
)
from src.domains.analytics.store import SqlStoreClient, StoreClient
from src.domains.analytics.streak import calculate_streak
from src.domains.analytics.topics import (
    TopicProgress,
    TopicProgressDetail,
    annotate_all_topic_progress,
    rollup_topic_progress,
)

__all__ = [
    # Services
    "AnalyticsService",
    "DashboardService",
    "DashboardData",
    "DashboardStats",
    "ComprehensiveAnalytics",
    # Store
    "StoreClient",
    "SqlStoreClient",
    # Errors
    "AnalyticsError",
    "FetchError",
    "PartialEnrichmentError",
    # Aggregators
    "calculate_average_score",
    "calculate_streak",
    "rollup_topic_progress",
    "annotate_all_topic_progress",
    "heatmap_window",
    "build_activity_heatmap",
    "assemble_recent_activity",
    "rank_best_worst_topics",
    "build_progress_over_time",
    "build_accuracy_breakdown",
    "build_quiz_performance_trend",
    "build_flashcard_analytics",
    "calculate_total_study_time",
    "gather_all",
    "round_half_up",
    # Results
    "ScoreSummary",
    "TopicProgress",
    "TopicProgressDetail",
    "DateWindow",
    "HeatmapDay",
    "RecentActivity",
    "RankedTopic",
    "BestWorstTopics",
    "ProgressPoint",
    "AccuracyBreakdown",
    "QuizTrendPoint",
    "FlashcardAnalytics",
]
