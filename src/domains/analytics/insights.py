# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Chart-oriented analytics.

Pure builders behind the analytics page: progress over time, accuracy by
question type and difficulty, quiz performance trend, flashcard mastery and
total study time. Each takes already-fetched records and returns result
objects with a to_dict() for the API layer.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Any

from src.domains.analytics.records import (
    AnsweredQuestionRecord,
    AnswerRecord,
    DailyAnalyticsRecord,
    FlashcardRecord,
    QuizCompletionRecord,
    QuizRecord,
)
from src.domains.analytics.scores import percentage, round_half_up
from src.utils.datetime import utc_date

DEFAULT_EASE_FACTOR = 2.5
MASTERED = "mastered"
LEARNING = "learning"
NEW = "new"


# =============================================================================
# Progress over time
# =============================================================================


@dataclass
class ProgressPoint:
    """Answer totals for one day."""

    day: date
    total_questions: int
    correct_answers: int
    average_time_seconds: float = 0.0

    @property
    def accuracy_percentage(self) -> int:
        return percentage(self.correct_answers, self.total_questions)

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.day.isoformat(),
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "average_time_seconds": self.average_time_seconds,
            "accuracy_percentage": self.accuracy_percentage,
        }


def build_progress_over_time(rows: Iterable[DailyAnalyticsRecord]) -> list[ProgressPoint]:
    """Turn daily rollup rows into chart points, oldest first."""
    points = [
        ProgressPoint(
            day=row.activity_date,
            total_questions=row.total_questions,
            correct_answers=row.correct_answers,
            average_time_seconds=row.average_time_seconds or 0.0,
        )
        for row in rows
    ]
    points.sort(key=lambda point: point.day)
    return points


# =============================================================================
# Accuracy breakdown
# =============================================================================


@dataclass
class AccuracyBucket:
    total_attempts: int = 0
    correct_attempts: int = 0

    @property
    def accuracy_percentage(self) -> int:
        return percentage(self.correct_attempts, self.total_attempts)

    def add(self, is_correct: bool) -> None:
        self.total_attempts += 1
        self.correct_attempts += int(is_correct)


@dataclass
class AccuracyBreakdown:
    """Accuracy grouped by question type and by difficulty."""

    by_type: dict[str, AccuracyBucket] = field(default_factory=dict)
    by_difficulty: dict[int, AccuracyBucket] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "byType": [
                {
                    "question_type": question_type,
                    "total_attempts": bucket.total_attempts,
                    "correct_attempts": bucket.correct_attempts,
                    "accuracy_percentage": bucket.accuracy_percentage,
                }
                for question_type, bucket in sorted(self.by_type.items())
            ],
            "byDifficulty": [
                {
                    "difficulty": difficulty,
                    "total_attempts": bucket.total_attempts,
                    "correct_attempts": bucket.correct_attempts,
                    "accuracy_percentage": bucket.accuracy_percentage,
                }
                for difficulty, bucket in sorted(self.by_difficulty.items())
            ],
        }


def build_accuracy_breakdown(answers: Iterable[AnsweredQuestionRecord]) -> AccuracyBreakdown:
    """Group answers by question type and difficulty.

    An answer whose question lacks a type (or difficulty) is skipped for
    that dimension only.
    """
    breakdown = AccuracyBreakdown()
    for answer in answers:
        if answer.question_type:
            breakdown.by_type.setdefault(answer.question_type, AccuracyBucket()).add(
                answer.is_correct
            )
        if answer.difficulty is not None:
            breakdown.by_difficulty.setdefault(answer.difficulty, AccuracyBucket()).add(
                answer.is_correct
            )
    return breakdown


# =============================================================================
# Quiz performance trend
# =============================================================================


@dataclass
class QuizTrendPoint:
    quiz_id: str
    title: str
    completed_at: datetime
    score_percentage: float
    total_questions: int
    correct_answers: int
    time_spent_seconds: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": utc_date(self.completed_at).isoformat(),
            "quiz_id": self.quiz_id,
            "title": self.title,
            "score_percentage": self.score_percentage,
            "total_questions": self.total_questions,
            "correct_answers": self.correct_answers,
            "time_spent_seconds": self.time_spent_seconds,
        }


def build_quiz_performance_trend(
    completions: Iterable[QuizCompletionRecord],
    quizzes: Iterable[QuizRecord],
) -> list[QuizTrendPoint]:
    """Pair completions with quiz titles, oldest completion first.

    Completions whose quiz is not among `quizzes` are dropped.
    """
    titles = {quiz.quiz_id: quiz.title for quiz in quizzes}
    trend = [
        QuizTrendPoint(
            quiz_id=completion.quiz_id,
            title=titles[completion.quiz_id],
            completed_at=completion.completed_at,
            score_percentage=completion.score_percentage,
            total_questions=completion.total_questions,
            correct_answers=completion.correct_answers,
            time_spent_seconds=completion.time_spent_seconds or 0,
        )
        for completion in completions
        if completion.quiz_id in titles
    ]
    trend.sort(key=lambda point: point.completed_at)
    return trend


# =============================================================================
# Flashcards
# =============================================================================


@dataclass
class MasteryLevel:
    level: str
    count: int
    percentage: int

    def to_dict(self) -> dict[str, Any]:
        return {"level": self.level, "count": self.count, "percentage": self.percentage}


@dataclass
class FlashcardDay:
    day: date
    cards_reviewed: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), "cards_reviewed": self.cards_reviewed}


@dataclass
class FlashcardAnalytics:
    """Mastery counts and recent flashcard activity."""

    total_flashcards: int = 0
    mastered_flashcards: int = 0
    learning_flashcards: int = 0
    new_flashcards: int = 0
    mastery_distribution: list[MasteryLevel] = field(default_factory=list)
    recent_reviews: list[FlashcardDay] = field(default_factory=list)
    average_ease_factor: float = DEFAULT_EASE_FACTOR

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalFlashcards": self.total_flashcards,
            "masteredFlashcards": self.mastered_flashcards,
            "learningFlashcards": self.learning_flashcards,
            "newFlashcards": self.new_flashcards,
            "masteryDistribution": [level.to_dict() for level in self.mastery_distribution],
            "recentReviews": [day.to_dict() for day in self.recent_reviews],
            "averageEaseFactor": self.average_ease_factor,
        }


def build_flashcard_analytics(
    flashcards: Sequence[FlashcardRecord],
    today: date,
    history_days: int = 30,
) -> FlashcardAnalytics:
    """Summarize a user's flashcards.

    Cards without a mastery status count as learning. Statuses other than
    mastered and new are kept as their own distribution level but counted
    as learning in the totals. Recent reviews are cards created per day
    over the trailing history_days ending today, days with activity only.

    Args:
        flashcards: All of the user's flashcards.
        today: The anchoring UTC date.
        history_days: Length of the recent activity window.

    Returns:
        FlashcardAnalytics; averages fall back to the default ease factor.
    """
    if not flashcards:
        return FlashcardAnalytics()

    statuses = Counter(card.mastery_status or LEARNING for card in flashcards)
    total = len(flashcards)
    mastered = statuses.get(MASTERED, 0)
    new = statuses.get(NEW, 0)

    first_day = today - timedelta(days=history_days - 1)
    created = Counter(utc_date(card.created_at) for card in flashcards)
    recent = [
        FlashcardDay(day=day, cards_reviewed=count)
        for day, count in sorted(created.items())
        if first_day <= day <= today
    ]

    ease_total = sum(
        card.ease_factor if card.ease_factor is not None else DEFAULT_EASE_FACTOR
        for card in flashcards
    )

    return FlashcardAnalytics(
        total_flashcards=total,
        mastered_flashcards=mastered,
        learning_flashcards=total - mastered - new,
        new_flashcards=new,
        mastery_distribution=[
            MasteryLevel(level=level, count=count, percentage=percentage(count, total))
            for level, count in sorted(statuses.items())
        ],
        recent_reviews=recent,
        average_ease_factor=round_half_up(ease_total / total, 2),
    )


# =============================================================================
# Study time
# =============================================================================


def calculate_total_study_time(answers: Iterable[AnswerRecord]) -> int:
    """Sum answer durations in seconds, ignoring answers without one."""
    return sum(
        answer.time_taken_seconds for answer in answers if answer.time_taken_seconds is not None
    )
