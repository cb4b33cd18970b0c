# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics services.

DashboardService and AnalyticsService orchestrate the aggregators: each
operation issues its independent store queries concurrently, waits for all
of them, then runs the pure aggregation over the fetched rows.

Bundled operations (get_all_dashboard_data, get_comprehensive_analytics)
fail as a whole. If any required query fails, the first FetchError is
raised and the sibling queries still in flight are cancelled; no partial
bundle is ever returned. The topic-name lookup for the activity feed is the
only optional enrichment and degrades to entries without a topic.

Usage:
    from src.domains.analytics import DashboardService, SqlStoreClient

    store = SqlStoreClient(get_sessionmaker(), timeout_seconds=10.0)
    service = DashboardService(store, settings.analytics)

    stats = await service.get_dashboard_stats(user_id)
    bundle = await service.get_all_dashboard_data(user_id)
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from src.core.config.settings import AnalyticsSettings
from src.domains.analytics.activity import RecentActivity, assemble_recent_activity
from src.domains.analytics.concurrency import gather_all
from src.domains.analytics.errors import FetchError, PartialEnrichmentError
from src.domains.analytics.heatmap import HeatmapDay, build_activity_heatmap, heatmap_window
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
from src.domains.analytics.ranking import BestWorstTopics, rank_best_worst_topics
from src.domains.analytics.records import TopicRecord
from src.domains.analytics.scores import calculate_average_score
from src.domains.analytics.store import StoreClient
from src.domains.analytics.streak import calculate_streak
from src.domains.analytics.topics import (
    TopicProgress,
    TopicProgressDetail,
    annotate_all_topic_progress,
    rollup_topic_progress,
)
from src.utils.datetime import utc_date, utc_now
from src.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class DashboardStats:
    """Summary statistics for the dashboard header."""

    total_quizzes: int = 0
    total_exams: int = 0
    total_flashcards: int = 0
    average_score: int = 0
    study_streak: int = 0
    questions_answered: int = 0
    correct_answers: int = 0
    total_study_time_seconds: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "totalQuizzes": self.total_quizzes,
            "totalExams": self.total_exams,
            "totalFlashcards": self.total_flashcards,
            "averageScore": self.average_score,
            "studyStreak": self.study_streak,
            "questionsAnswered": self.questions_answered,
            "correctAnswers": self.correct_answers,
            "totalStudyTimeSeconds": self.total_study_time_seconds,
        }


@dataclass
class DashboardData:
    """Complete dashboard bundle."""

    stats: DashboardStats
    recent_activity: list[RecentActivity] = field(default_factory=list)
    topic_progress: list[TopicProgress] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "stats": self.stats.to_dict(),
            "recentActivity": [entry.to_dict() for entry in self.recent_activity],
            "topicProgress": [topic.to_dict() for topic in self.topic_progress],
        }


@dataclass
class ComprehensiveAnalytics:
    """All analytics page charts, fetched as one batch."""

    progress_over_time: list[ProgressPoint]
    activity_heatmap: list[HeatmapDay]
    accuracy_breakdown: AccuracyBreakdown
    quiz_performance_trend: list[QuizTrendPoint]
    flashcard_analytics: FlashcardAnalytics
    best_worst_topics: BestWorstTopics

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "progressOverTime": [point.to_dict() for point in self.progress_over_time],
            "activityHeatmap": [day.to_dict() for day in self.activity_heatmap],
            "accuracyBreakdown": self.accuracy_breakdown.to_dict(),
            "quizPerformanceTrend": [point.to_dict() for point in self.quiz_performance_trend],
            "flashcardAnalytics": self.flashcard_analytics.to_dict(),
            "bestWorstTopics": self.best_worst_topics.to_dict(),
        }


class _ClockMixin:
    _clock: Callable[[], datetime]

    def _today(self) -> date:
        return utc_date(self._clock())


class DashboardService(_ClockMixin):
    """Dashboard summary, activity feed and topic progress.

    Attributes:
        store: Read-only query surface.
        settings: Analytics tuning knobs.
    """

    def __init__(
        self,
        store: StoreClient,
        settings: AnalyticsSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        """Initialize the dashboard service.

        Args:
            store: StoreClient used for every query.
            settings: Analytics settings (limits, thresholds).
            clock: Source of the current time, anchoring streaks.
        """
        self.store = store
        self.settings = settings
        self._clock = clock

    async def get_dashboard_stats(self, user_id: str) -> DashboardStats:
        """Get totals, average score and study streak for a user.

        Args:
            user_id: The user's ID.

        Returns:
            DashboardStats; all zeros for a user with no activity.

        Raises:
            FetchError: If any underlying query fails.
        """
        quizzes, exams, flashcards, answers = await gather_all(
            self.store.quizzes_by_user(user_id),
            self.store.exams_by_user(user_id),
            self.store.flashcards_by_user(user_id),
            self.store.answers_by_user(user_id),
        )

        scores = calculate_average_score(answers)
        stats = DashboardStats(
            total_quizzes=len(quizzes),
            total_exams=len(exams),
            total_flashcards=len(flashcards),
            average_score=scores.average_score,
            study_streak=calculate_streak((a.created_at for a in answers), self._today()),
            questions_answered=scores.questions_answered,
            correct_answers=scores.correct_answers,
            total_study_time_seconds=calculate_total_study_time(answers),
        )

        logger.info(
            "dashboard_stats_computed",
            user_id=user_id,
            quizzes_scored=scores.quizzes_scored,
            average_score=stats.average_score,
            study_streak=stats.study_streak,
        )
        return stats

    async def get_recent_activity(
        self,
        user_id: str,
        limit: int | None = None,
    ) -> list[RecentActivity]:
        """Get the activity feed built from the user's latest quizzes.

        Args:
            user_id: The user's ID.
            limit: Maximum number of entries; defaults to the configured limit.

        Returns:
            Activity entries, newest first.

        Raises:
            FetchError: If a required query fails.
        """
        if limit is None:
            limit = self.settings.recent_activity_limit

        quizzes, completions, links, answers, topics = await gather_all(
            self.store.quizzes_by_user(user_id, newest_first=True, limit=limit),
            self.store.quiz_completions_by_user(user_id),
            self.store.quiz_question_links(),
            self.store.answers_by_user(user_id),
            self._topics_for_enrichment(),
        )

        feed = assemble_recent_activity(quizzes, completions, links, answers, topics, limit)
        logger.debug("recent_activity_assembled", user_id=user_id, entries=len(feed))
        return feed

    async def _topics_for_enrichment(self) -> list[TopicRecord] | None:
        """Fetch topic names, or None when the lookup is unavailable."""
        try:
            return await self.store.all_topics()
        except FetchError as e:
            error = PartialEnrichmentError("topic_names", e)
            logger.warning("enrichment_skipped", enrichment=error.enrichment, error=str(error))
            return None

    async def get_topic_progress(self, user_id: str) -> list[TopicProgress]:
        """Get per-parent topic progress rolled up from subtopics."""
        topics, progress = await gather_all(
            self.store.all_topics(),
            self.store.topic_progress_by_user(user_id),
        )
        return rollup_topic_progress(topics, progress)

    async def get_all_topic_progress(self, user_id: str) -> list[TopicProgressDetail]:
        """Get progress for every topic in an active family."""
        topics, progress = await gather_all(
            self.store.all_topics(),
            self.store.topic_progress_by_user(user_id),
        )
        return annotate_all_topic_progress(topics, progress)

    async def get_all_dashboard_data(self, user_id: str) -> DashboardData:
        """Get stats, activity feed and topic progress in one call.

        Raises:
            FetchError: If any part fails; no partial bundle is returned.
        """
        stats, recent_activity, topic_progress = await gather_all(
            self.get_dashboard_stats(user_id),
            self.get_recent_activity(user_id),
            self.get_topic_progress(user_id),
        )
        logger.info("dashboard_bundle_computed", user_id=user_id)
        return DashboardData(
            stats=stats,
            recent_activity=recent_activity,
            topic_progress=topic_progress,
        )


class AnalyticsService(_ClockMixin):
    """Charts for the analytics page.

    Attributes:
        store: Read-only query surface.
        settings: Analytics tuning knobs.
    """

    def __init__(
        self,
        store: StoreClient,
        settings: AnalyticsSettings,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.store = store
        self.settings = settings
        self._clock = clock

    async def get_progress_over_time(
        self,
        user_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[ProgressPoint]:
        """Get daily answer totals, optionally within an inclusive date range."""
        rows = await self.store.daily_analytics_by_user(
            user_id, date_from=date_from, date_to=date_to
        )
        return build_progress_over_time(rows)

    async def get_activity_heatmap(self, user_id: str, year: int | None = None) -> list[HeatmapDay]:
        """Get per-day activity counts for a year or the trailing window.

        Args:
            user_id: The user's ID.
            year: Calendar year to cover; the trailing window when None.

        Returns:
            Days with activity, ascending by date.
        """
        window = heatmap_window(self._today(), year, self.settings.heatmap_window_days)
        bounds = {"since": window.start, "until": window.end}

        answers, flashcards, quizzes, exams, sessions = await gather_all(
            self.store.answers_by_user(user_id, **bounds),
            self.store.flashcards_by_user(user_id, **bounds),
            self.store.quizzes_by_user(user_id, **bounds),
            self.store.exams_by_user(user_id, **bounds),
            self.store.exam_sessions_by_user(user_id, **bounds),
        )

        heatmap = build_activity_heatmap(window, answers, flashcards, quizzes, exams, sessions)
        logger.debug(
            "activity_heatmap_built",
            user_id=user_id,
            first_day=window.first_day.isoformat(),
            last_day=window.last_day.isoformat(),
            active_days=len(heatmap),
        )
        return heatmap

    async def get_accuracy_breakdown(self, user_id: str) -> AccuracyBreakdown:
        answers = await self.store.answered_questions_by_user(user_id)
        return build_accuracy_breakdown(answers)

    async def get_quiz_performance_trend(self, user_id: str) -> list[QuizTrendPoint]:
        completions, quizzes = await gather_all(
            self.store.quiz_completions_by_user(user_id),
            self.store.quizzes_by_user(user_id, newest_first=False),
        )
        return build_quiz_performance_trend(completions, quizzes)

    async def get_flashcard_analytics(self, user_id: str) -> FlashcardAnalytics:
        flashcards = await self.store.flashcards_by_user(user_id)
        return build_flashcard_analytics(
            flashcards,
            self._today(),
            self.settings.flashcard_history_days,
        )

    async def get_best_worst_topics(self, user_id: str) -> BestWorstTopics:
        progress, topics = await gather_all(
            self.store.topic_progress_by_user(user_id),
            self.store.all_topics(),
        )
        return rank_best_worst_topics(
            progress,
            topics,
            min_attempts=self.settings.min_topic_attempts,
            size=self.settings.best_worst_size,
        )

    async def get_total_study_time(self, user_id: str) -> int:
        """Get total answering time in seconds."""
        answers = await self.store.answers_by_user(user_id)
        return calculate_total_study_time(answers)

    async def get_comprehensive_analytics(self, user_id: str) -> ComprehensiveAnalytics:
        """Get every analytics chart as one batch.

        Raises:
            FetchError: If any chart fails; no partial batch is returned.
        """
        (
            progress_over_time,
            activity_heatmap,
            accuracy_breakdown,
            quiz_performance_trend,
            flashcard_analytics,
            best_worst_topics,
        ) = await gather_all(
            self.get_progress_over_time(user_id),
            self.get_activity_heatmap(user_id),
            self.get_accuracy_breakdown(user_id),
            self.get_quiz_performance_trend(user_id),
            self.get_flashcard_analytics(user_id),
            self.get_best_worst_topics(user_id),
        )

        logger.info("comprehensive_analytics_computed", user_id=user_id)
        return ComprehensiveAnalytics(
            progress_over_time=progress_over_time,
            activity_heatmap=activity_heatmap,
            accuracy_breakdown=accuracy_breakdown,
            quiz_performance_trend=quiz_performance_trend,
            flashcard_analytics=flashcard_analytics,
            best_worst_topics=best_worst_topics,
        )
