# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the analytics page chart builders."""

from datetime import date, datetime, timedelta, timezone

import pytest

from src.domains.analytics.insights import (
    DEFAULT_EASE_FACTOR,
    build_accuracy_breakdown,
    build_flashcard_analytics,
    build_progress_over_time,
    build_quiz_performance_trend,
    calculate_total_study_time,
)
from src.domains.analytics.records import (
    AnsweredQuestionRecord,
    AnswerRecord,
    DailyAnalyticsRecord,
    FlashcardRecord,
    QuizCompletionRecord,
    QuizRecord,
)


def flashcard(
    card_id: str,
    created: datetime,
    status: str | None = None,
    ease: float | None = None,
) -> FlashcardRecord:
    return FlashcardRecord(
        flashcard_id=card_id,
        user_id="user-1",
        mastery_status=status,
        ease_factor=ease,
        created_at=created,
        updated_at=created,
    )


class TestBuildProgressOverTime:
    """Tests for build_progress_over_time."""

    def test_points_are_sorted_oldest_first(self):
        rows = [
            DailyAnalyticsRecord(user_id="u", activity_date=date(2025, 3, 12), total_questions=4, correct_answers=3),
            DailyAnalyticsRecord(user_id="u", activity_date=date(2025, 3, 10), total_questions=2, correct_answers=1),
        ]

        points = build_progress_over_time(rows)

        assert [p.day for p in points] == [date(2025, 3, 10), date(2025, 3, 12)]

    def test_to_dict_includes_accuracy(self):
        rows = [
            DailyAnalyticsRecord(
                user_id="u",
                activity_date=date(2025, 3, 10),
                total_questions=3,
                correct_answers=2,
                average_time_seconds=12.5,
            )
        ]

        assert build_progress_over_time(rows)[0].to_dict() == {
            "date": "2025-03-10",
            "total_questions": 3,
            "correct_answers": 2,
            "average_time_seconds": 12.5,
            "accuracy_percentage": 67,
        }

    def test_missing_average_time_reads_as_zero(self):
        rows = [DailyAnalyticsRecord(user_id="u", activity_date=date(2025, 3, 10))]

        point = build_progress_over_time(rows)[0]

        assert point.average_time_seconds == 0.0
        assert point.accuracy_percentage == 0

    def test_empty(self):
        assert build_progress_over_time([]) == []


class TestBuildAccuracyBreakdown:
    """Tests for build_accuracy_breakdown."""

    def test_groups_by_type_and_difficulty(self):
        answers = [
            AnsweredQuestionRecord(is_correct=True, question_type="multiple_choice", difficulty=1),
            AnsweredQuestionRecord(is_correct=False, question_type="multiple_choice", difficulty=1),
            AnsweredQuestionRecord(is_correct=True, question_type="essay", difficulty=3),
        ]

        data = build_accuracy_breakdown(answers).to_dict()

        assert data["byType"] == [
            {"question_type": "essay", "total_attempts": 1, "correct_attempts": 1, "accuracy_percentage": 100},
            {"question_type": "multiple_choice", "total_attempts": 2, "correct_attempts": 1, "accuracy_percentage": 50},
        ]
        assert [row["difficulty"] for row in data["byDifficulty"]] == [1, 3]

    def test_missing_dimension_is_skipped_independently(self):
        answers = [
            AnsweredQuestionRecord(is_correct=True, question_type=None, difficulty=2),
            AnsweredQuestionRecord(is_correct=True, question_type="short_answer", difficulty=None),
        ]

        breakdown = build_accuracy_breakdown(answers)

        assert list(breakdown.by_type) == ["short_answer"]
        assert list(breakdown.by_difficulty) == [2]

    def test_difficulty_zero_is_kept(self):
        breakdown = build_accuracy_breakdown([AnsweredQuestionRecord(is_correct=False, difficulty=0)])

        assert breakdown.by_difficulty[0].total_attempts == 1
        assert breakdown.by_difficulty[0].accuracy_percentage == 0

    def test_empty(self):
        assert build_accuracy_breakdown([]).to_dict() == {"byType": [], "byDifficulty": []}


class TestBuildQuizPerformanceTrend:
    """Tests for build_quiz_performance_trend."""

    def test_pairs_titles_and_sorts_by_completion(self):
        created = datetime(2025, 3, 1, tzinfo=timezone.utc)
        quizzes = [
            QuizRecord(quiz_id="q1", user_id="u", title="Algebra", created_at=created),
            QuizRecord(quiz_id="q2", user_id="u", title="Geometry", created_at=created),
        ]
        completions = [
            QuizCompletionRecord(
                quiz_id="q2",
                user_id="u",
                completed_at=datetime(2025, 3, 5, 23, 30, tzinfo=timezone.utc),
                score_percentage=60.0,
                total_questions=5,
                correct_answers=3,
            ),
            QuizCompletionRecord(
                quiz_id="q1",
                user_id="u",
                completed_at=datetime(2025, 3, 2, tzinfo=timezone.utc),
                score_percentage=100.0,
                total_questions=4,
                correct_answers=4,
                time_spent_seconds=300,
            ),
        ]

        trend = build_quiz_performance_trend(completions, quizzes)

        assert [p.title for p in trend] == ["Algebra", "Geometry"]
        assert trend[0].time_spent_seconds == 300
        assert trend[1].time_spent_seconds == 0
        assert trend[1].to_dict()["date"] == "2025-03-05"

    def test_completions_of_unknown_quizzes_are_dropped(self):
        completions = [
            QuizCompletionRecord(
                quiz_id="other",
                user_id="u",
                completed_at=datetime(2025, 3, 2, tzinfo=timezone.utc),
                score_percentage=50.0,
                total_questions=2,
                correct_answers=1,
            )
        ]

        assert build_quiz_performance_trend(completions, []) == []


class TestBuildFlashcardAnalytics:
    """Tests for build_flashcard_analytics."""

    def test_empty_returns_defaults(self, today: date):
        analytics = build_flashcard_analytics([], today)

        assert analytics.total_flashcards == 0
        assert analytics.average_ease_factor == DEFAULT_EASE_FACTOR
        assert analytics.mastery_distribution == []
        assert analytics.recent_reviews == []

    def test_mastery_counts(self, today: date):
        created = datetime(2025, 3, 14, 8, 0, tzinfo=timezone.utc)
        cards = [
            flashcard("c1", created, status="mastered", ease=2.9),
            flashcard("c2", created, status="new"),
            flashcard("c3", created, status="learning", ease=2.2),
            flashcard("c4", created, status=None),
        ]

        analytics = build_flashcard_analytics(cards, today)

        assert analytics.total_flashcards == 4
        assert analytics.mastered_flashcards == 1
        assert analytics.new_flashcards == 1
        assert analytics.learning_flashcards == 2
        assert [(m.level, m.count, m.percentage) for m in analytics.mastery_distribution] == [
            ("learning", 2, 50),
            ("mastered", 1, 25),
            ("new", 1, 25),
        ]

    def test_average_ease_factor_uses_default_for_missing(self, today: date):
        created = datetime(2025, 3, 14, tzinfo=timezone.utc)
        cards = [flashcard("c1", created, ease=2.0), flashcard("c2", created, ease=None)]

        assert build_flashcard_analytics(cards, today).average_ease_factor == 2.25

    def test_recent_reviews_cover_trailing_window(self, today: date):
        noon = datetime(today.year, today.month, today.day, 12, tzinfo=timezone.utc)
        cards = [
            flashcard("c1", noon),
            flashcard("c2", noon),
            flashcard("c3", noon - timedelta(days=29)),
            flashcard("c4", noon - timedelta(days=30)),
        ]

        analytics = build_flashcard_analytics(cards, today)

        assert [(d.day, d.cards_reviewed) for d in analytics.recent_reviews] == [
            (today - timedelta(days=29), 1),
            (today, 2),
        ]

    def test_to_dict_keys(self, today: date):
        data = build_flashcard_analytics([], today).to_dict()

        assert set(data) == {
            "totalFlashcards",
            "masteredFlashcards",
            "learningFlashcards",
            "newFlashcards",
            "masteryDistribution",
            "recentReviews",
            "averageEaseFactor",
        }


class TestCalculateTotalStudyTime:
    """Tests for calculate_total_study_time."""

    @pytest.mark.parametrize(
        "durations,expected",
        [
            ([], 0),
            ([30, 45], 75),
            ([30, None, 10], 40),
            ([None], 0),
        ],
    )
    def test_sums_known_durations(self, durations, expected):
        answers = [
            AnswerRecord(
                user_id="u",
                question_id=f"q{i}",
                is_correct=True,
                created_at=datetime(2025, 3, 1, tzinfo=timezone.utc),
                time_taken_seconds=seconds,
            )
            for i, seconds in enumerate(durations)
        ]

        assert calculate_total_study_time(answers) == expected
