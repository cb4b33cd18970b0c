# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning activity tables.

Quizzes, exams, answers, flashcards and the topic tree, as written by the
upstream CRUD services. Primary keys are UUID strings generated by the
database.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.database.models.base import Base, CreatedAtMixin, TimestampMixin


class Topic(Base, CreatedAtMixin):
    """A topic; rows without a parent are top-level topics."""

    __tablename__ = "topics"

    topic_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    parent_topic_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("topics.topic_id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )


class Question(Base, CreatedAtMixin):
    """A question that can be linked to quizzes and exams."""

    __tablename__ = "questions"

    question_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    topic_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("topics.topic_id", ondelete="SET NULL"),
        nullable=True,
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    question_type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    difficulty: Mapped[int | None] = mapped_column(Integer, nullable=True)


class Quiz(Base, TimestampMixin):
    """A quiz created by a user."""

    __tablename__ = "quizzes"

    quiz_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    topic_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("topics.topic_id", ondelete="SET NULL"),
        nullable=True,
    )


class QuizQuestion(Base):
    """Link between a quiz and one of its questions."""

    __tablename__ = "quiz_questions"

    quiz_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("quizzes.quiz_id", ondelete="CASCADE"),
        primary_key=True,
    )
    question_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("questions.question_id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)


class QuizCompletion(Base):
    """A finished quiz attempt; absence means the quiz was never taken."""

    __tablename__ = "quiz_completions"

    completion_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    quiz_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("quizzes.quiz_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    completed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    score_percentage: Mapped[Decimal] = mapped_column(Numeric(5, 2), nullable=False)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False)
    time_spent_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)


class UserAnswer(Base, CreatedAtMixin):
    """A single answer; re-attempts create new rows."""

    __tablename__ = "user_answers"

    answer_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    question_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("questions.question_id", ondelete="CASCADE"),
        nullable=False,
    )
    quiz_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("quizzes.quiz_id", ondelete="SET NULL"),
        nullable=True,
    )
    session_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("exam_sessions.session_id", ondelete="SET NULL"),
        nullable=True,
    )
    is_correct: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    time_taken_seconds: Mapped[int | None] = mapped_column(Integer, nullable=True)


class UserTopicProgress(Base):
    """Per-user, per-topic proficiency maintained by the answer pipeline."""

    __tablename__ = "user_topic_progress"

    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    topic_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("topics.topic_id", ondelete="CASCADE"),
        primary_key=True,
    )
    proficiency_level: Mapped[Decimal] = mapped_column(Numeric(4, 3), nullable=False, default=0)
    questions_attempted: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    questions_correct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_activity: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)


class Flashcard(Base, TimestampMixin):
    """A flashcard, optionally generated from a question."""

    __tablename__ = "flashcards"

    flashcard_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    topic_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("topics.topic_id", ondelete="SET NULL"),
        nullable=True,
    )
    source_question_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("questions.question_id", ondelete="SET NULL"),
        nullable=True,
    )
    mastery_status: Mapped[str | None] = mapped_column(String(20), nullable=True)
    ease_factor: Mapped[Decimal | None] = mapped_column(Numeric(4, 2), nullable=True)


class Exam(Base, TimestampMixin):
    """An exam created by a user."""

    __tablename__ = "exams"

    exam_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)


class ExamSession(Base, CreatedAtMixin):
    """A single sitting of an exam."""

    __tablename__ = "exam_sessions"

    session_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    exam_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("exams.exam_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), nullable=False, index=True)


class DailyAnalytics(Base):
    """Upstream per-day answer rollup (the user_analytics table)."""

    __tablename__ = "user_analytics"

    user_id: Mapped[str] = mapped_column(UUID(as_uuid=False), primary_key=True)
    activity_date: Mapped[date] = mapped_column("date", Date, primary_key=True)
    total_questions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    correct_answers: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    average_time_seconds: Mapped[Decimal | None] = mapped_column(Numeric(8, 2), nullable=True)
