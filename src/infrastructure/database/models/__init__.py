# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy models for the platform database.

Only the tables read by the analytics engine are mapped here. The schema
itself is owned and migrated by the upstream CRUD services.
"""

from src.infrastructure.database.models.base import Base
from src.infrastructure.database.models.learning import (
    DailyAnalytics,
    Exam,
    ExamSession,
    Flashcard,
    Question,
    Quiz,
    QuizCompletion,
    QuizQuestion,
    Topic,
    UserAnswer,
    UserTopicProgress,
)

__all__ = [
    "Base",
    "DailyAnalytics",
    "Exam",
    "ExamSession",
    "Flashcard",
    "Question",
    "Quiz",
    "QuizCompletion",
    "QuizQuestion",
    "Topic",
    "UserAnswer",
    "UserTopicProgress",
]
