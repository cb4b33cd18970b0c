# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Quiz score aggregation.

The overall score is the unweighted mean of per-quiz percentages, never the
pooled ratio of correct answers. A user who aces a one-question quiz and
gets one of four right on another scores 63, not 40.

Only the latest answer to each (quiz, question) pair counts; earlier
attempts are superseded.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, overload

from src.domains.analytics.records import AnswerRecord


@overload
def round_half_up(value: float) -> int: ...


@overload
def round_half_up(value: float, places: int) -> float: ...


def round_half_up(value: float, places: int = 0) -> int | float:
    """Round half away from zero, so 62.5 becomes 63.

    Python's round() uses banker's rounding and would give 62.

    Args:
        value: Number to round.
        places: Decimal places to keep.

    Returns:
        An int when places is 0, otherwise a float.
    """
    exponent = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if places == 0:
        return int(rounded)
    return float(rounded)


def percentage(part: int | float, whole: int | float) -> int:
    """Integer percentage, 0 when the whole is empty."""
    if not whole:
        return 0
    return round_half_up(part / whole * 100)


@dataclass
class QuizScore:
    """Score for one quiz after deduplication."""

    quiz_id: str
    correct: int
    total: int

    @property
    def percentage(self) -> float:
        return self.correct / self.total * 100

    def to_dict(self) -> dict[str, Any]:
        return {
            "quiz_id": self.quiz_id,
            "correct": self.correct,
            "total": self.total,
            "percentage": round_half_up(self.percentage),
        }


@dataclass
class ScoreSummary:
    """Aggregated quiz scores for a user.

    questions_answered and correct_answers are for display only; the
    average is computed from the per-quiz percentages.
    """

    average_score: int = 0
    questions_answered: int = 0
    correct_answers: int = 0
    quiz_scores: list[QuizScore] = field(default_factory=list)

    @property
    def quizzes_scored(self) -> int:
        return len(self.quiz_scores)

    def to_dict(self) -> dict[str, Any]:
        return {
            "average_score": self.average_score,
            "questions_answered": self.questions_answered,
            "correct_answers": self.correct_answers,
            "quizzes_scored": self.quizzes_scored,
            "quiz_scores": [score.to_dict() for score in self.quiz_scores],
        }


def latest_quiz_answers(answers: Iterable[AnswerRecord]) -> list[AnswerRecord]:
    """Keep the latest answer per (quiz_id, question_id).

    Answers without a quiz are dropped. On equal timestamps the record seen
    first wins.
    """
    latest: dict[tuple[str, str], AnswerRecord] = {}
    for answer in answers:
        if answer.quiz_id is None:
            continue
        key = (answer.quiz_id, answer.question_id)
        current = latest.get(key)
        if current is None or answer.created_at > current.created_at:
            latest[key] = answer
    return list(latest.values())


def calculate_average_score(answers: Iterable[AnswerRecord]) -> ScoreSummary:
    """Compute per-quiz and overall scores from raw answer records.

    Args:
        answers: Every answer the user has given, in any order.

    Returns:
        ScoreSummary with quiz scores ordered by quiz id.
    """
    tallies: dict[str, list[int]] = {}
    for answer in latest_quiz_answers(answers):
        tally = tallies.setdefault(answer.quiz_id, [0, 0])  # type: ignore[arg-type]
        tally[0] += int(answer.is_correct)
        tally[1] += 1

    quiz_scores = [
        QuizScore(quiz_id=quiz_id, correct=correct, total=total)
        for quiz_id, (correct, total) in sorted(tallies.items())
    ]
    if not quiz_scores:
        return ScoreSummary()

    mean = sum(score.percentage for score in quiz_scores) / len(quiz_scores)
    return ScoreSummary(
        average_score=round_half_up(mean),
        questions_answered=sum(score.total for score in quiz_scores),
        correct_answers=sum(score.correct for score in quiz_scores),
        quiz_scores=quiz_scores,
    )
