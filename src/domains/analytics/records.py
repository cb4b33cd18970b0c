# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Typed input records for the analytics aggregators.

Rows leave the store as these immutable models. Validation happens once at
the store boundary, so aggregation code never touches ORM objects or raw
mappings. Timestamps are normalized to timezone-aware UTC.
"""

from datetime import date, datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from src.utils.datetime import ensure_utc

UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)


class AnswerRecord(_Record):
    """A single answer; re-attempts produce additional records."""

    user_id: str
    question_id: str
    quiz_id: str | None = None
    session_id: str | None = None
    is_correct: bool
    created_at: UtcDatetime
    time_taken_seconds: int | None = None


class AnsweredQuestionRecord(_Record):
    """An answer joined with the type and difficulty of its question."""

    is_correct: bool
    question_type: str | None = None
    difficulty: int | None = None


class QuizRecord(_Record):
    quiz_id: str
    user_id: str
    title: str
    topic_id: str | None = None
    created_at: UtcDatetime


class QuizQuestionLink(_Record):
    quiz_id: str
    question_id: str


class QuizCompletionRecord(_Record):
    """A finished quiz attempt. The only evidence that a quiz was taken."""

    quiz_id: str
    user_id: str
    completed_at: UtcDatetime
    score_percentage: float
    total_questions: int
    correct_answers: int
    time_spent_seconds: int | None = None


class TopicRecord(_Record):
    """A topic; parents have no parent_topic_id."""

    topic_id: str
    name: str
    parent_topic_id: str | None = None

    @property
    def is_parent(self) -> bool:
        return self.parent_topic_id is None


class TopicProgressRecord(_Record):
    user_id: str
    topic_id: str
    proficiency_level: float = Field(ge=0.0, le=1.0)
    questions_attempted: int = 0
    questions_correct: int = 0
    last_activity: UtcDatetime | None = None


class FlashcardRecord(_Record):
    flashcard_id: str
    user_id: str
    topic_id: str | None = None
    source_question_id: str | None = None
    mastery_status: str | None = None
    ease_factor: float | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


class ExamRecord(_Record):
    exam_id: str
    user_id: str
    created_at: UtcDatetime


class ExamSessionRecord(_Record):
    session_id: str
    user_id: str
    created_at: UtcDatetime


class DailyAnalyticsRecord(_Record):
    """Upstream per-day answer rollup."""

    user_id: str
    activity_date: date
    total_questions: int = 0
    correct_answers: int = 0
    average_time_seconds: float | None = None
