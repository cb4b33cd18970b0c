# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for quiz score aggregation."""

from datetime import datetime, timedelta, timezone

import pytest

from src.domains.analytics.records import AnswerRecord
from src.domains.analytics.scores import (
    calculate_average_score,
    latest_quiz_answers,
    percentage,
    round_half_up,
)

BASE_TIME = datetime(2025, 3, 10, 9, 0, tzinfo=timezone.utc)


def answer(
    quiz_id: str | None,
    question_id: str,
    is_correct: bool,
    minutes: int = 0,
) -> AnswerRecord:
    return AnswerRecord(
        user_id="user-1",
        question_id=question_id,
        quiz_id=quiz_id,
        is_correct=is_correct,
        created_at=BASE_TIME + timedelta(minutes=minutes),
    )


class TestRoundHalfUp:
    """Tests for half-up rounding."""

    def test_rounds_half_away_from_zero(self):
        """62.5 rounds up, unlike banker's rounding."""
        assert round_half_up(62.5) == 63
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3

    def test_rounds_below_half_down(self):
        assert round_half_up(62.4) == 62

    def test_decimal_places(self):
        assert round_half_up(2.345, 2) == 2.35
        assert round_half_up(2.5, 2) == 2.5

    def test_percentage_of_empty_whole_is_zero(self):
        assert percentage(3, 0) == 0
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67


class TestCalculateAverageScore:
    """Tests for calculate_average_score."""

    def test_average_of_quiz_percentages_not_pooled(self):
        """1/1 and 1/4 average to 63, not the pooled 40."""
        answers = [
            answer("quiz-a", "q1", True),
            answer("quiz-b", "q1", True),
            answer("quiz-b", "q2", False),
            answer("quiz-b", "q3", False),
            answer("quiz-b", "q4", False),
        ]

        summary = calculate_average_score(answers)

        assert summary.average_score == 63
        assert summary.questions_answered == 5
        assert summary.correct_answers == 2
        assert summary.quizzes_scored == 2

    def test_latest_attempt_wins(self):
        """Only the later answer to the same quiz question counts."""
        answers = [
            answer("quiz-a", "q1", False, minutes=0),
            answer("quiz-a", "q1", True, minutes=5),
        ]

        summary = calculate_average_score(answers)

        assert summary.average_score == 100
        assert summary.questions_answered == 1
        assert summary.correct_answers == 1

    def test_latest_attempt_wins_regardless_of_input_order(self):
        answers = [
            answer("quiz-a", "q1", True, minutes=5),
            answer("quiz-a", "q1", False, minutes=0),
        ]

        assert calculate_average_score(answers).average_score == 100

    def test_answers_without_quiz_are_ignored(self):
        answers = [
            answer(None, "q1", False),
            answer("quiz-a", "q2", True),
        ]

        summary = calculate_average_score(answers)

        assert summary.average_score == 100
        assert summary.questions_answered == 1

    def test_no_answers_yields_zero(self):
        summary = calculate_average_score([])

        assert summary.average_score == 0
        assert summary.questions_answered == 0
        assert summary.correct_answers == 0
        assert summary.quiz_scores == []

    def test_only_flashcard_answers_yields_zero(self):
        summary = calculate_average_score([answer(None, "q1", True)])

        assert summary.average_score == 0
        assert summary.quizzes_scored == 0

    def test_quiz_scores_are_ordered_by_quiz_id(self):
        answers = [answer("quiz-b", "q1", True), answer("quiz-a", "q1", False)]

        summary = calculate_average_score(answers)

        assert [score.quiz_id for score in summary.quiz_scores] == ["quiz-a", "quiz-b"]
        assert summary.to_dict()["quiz_scores"][0] == {
            "quiz_id": "quiz-a",
            "correct": 0,
            "total": 1,
            "percentage": 0,
        }

    def test_same_result_on_rerun(self):
        answers = [answer("quiz-a", "q1", True), answer("quiz-b", "q2", False)]

        assert calculate_average_score(answers) == calculate_average_score(answers)


class TestLatestQuizAnswers:
    """Tests for answer deduplication."""

    def test_equal_timestamps_keep_first_seen(self):
        first = answer("quiz-a", "q1", True)
        second = answer("quiz-a", "q1", False)

        assert latest_quiz_answers([first, second]) == [first]

    def test_distinct_questions_are_kept(self):
        answers = [answer("quiz-a", "q1", True), answer("quiz-a", "q2", True)]

        assert len(latest_quiz_answers(answers)) == 2

    @pytest.mark.parametrize("quiz_id", ["quiz-a", "quiz-b"])
    def test_same_question_in_different_quizzes_is_kept(self, quiz_id):
        answers = [answer("quiz-a", "q1", True), answer("quiz-b", "q1", True)]

        kept = latest_quiz_answers(answers)

        assert any(a.quiz_id == quiz_id for a in kept)
