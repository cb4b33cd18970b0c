# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Read-only query surface used by the analytics services.

StoreClient is the protocol the services depend on. SqlStoreClient
implements it over the platform database: every query opens its own
session from the shared sessionmaker, so concurrent queries issued by one
request never share a session. Each query runs under a timeout, and any
database failure (including an unreachable server) or timeout is
reported as a FetchError.

Usage:
    from src.domains.analytics.store import SqlStoreClient
    from src.infrastructure.database import get_sessionmaker

    store = SqlStoreClient(get_sessionmaker(), timeout_seconds=10.0)
    answers = await store.answers_by_user(user_id, quiz_id=quiz_id)
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from datetime import date, datetime
from typing import Any, Protocol, TypeVar

from pydantic import BaseModel, ValidationError
from sqlalchemy import Select, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.domains.analytics.errors import FetchError
from src.domains.analytics.records import (
    AnsweredQuestionRecord,
    AnswerRecord,
    DailyAnalyticsRecord,
    ExamRecord,
    ExamSessionRecord,
    FlashcardRecord,
    QuizCompletionRecord,
    QuizQuestionLink,
    QuizRecord,
    TopicProgressRecord,
    TopicRecord,
)
from src.infrastructure.database.models import (
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
from src.utils.logging import get_logger

logger = get_logger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)


class StoreClient(Protocol):
    """Read-only queries over persisted learning activity."""

    async def answers_by_user(
        self,
        user_id: str,
        *,
        quiz_id: str | None = None,
        session_id: str | None = None,
        topic_id: str | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[AnswerRecord]: ...

    async def answered_questions_by_user(self, user_id: str) -> list[AnsweredQuestionRecord]: ...

    async def quizzes_by_user(
        self,
        user_id: str,
        *,
        newest_first: bool = True,
        limit: int | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[QuizRecord]: ...

    async def quiz_completions_by_user(
        self,
        user_id: str,
        quiz_id: str | None = None,
    ) -> list[QuizCompletionRecord]: ...

    async def quiz_question_links(self) -> list[QuizQuestionLink]: ...

    async def all_topics(self) -> list[TopicRecord]: ...

    async def topic_progress_by_user(self, user_id: str) -> list[TopicProgressRecord]: ...

    async def flashcards_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[FlashcardRecord]: ...

    async def exams_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ExamRecord]: ...

    async def exam_sessions_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ExamSessionRecord]: ...

    async def daily_analytics_by_user(
        self,
        user_id: str,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[DailyAnalyticsRecord]: ...


def _within(stmt: Select, column: Any, since: Any, until: Any) -> Select:
    """Restrict a statement to an inclusive range on one column."""
    if since is not None:
        stmt = stmt.where(column >= since)
    if until is not None:
        stmt = stmt.where(column <= until)
    return stmt


def _validate(model: type[RecordT], rows: Iterable[Any]) -> list[RecordT]:
    return [model.model_validate(row) for row in rows]


class SqlStoreClient:
    """StoreClient backed by the SQLAlchemy async sessionmaker.

    Attributes:
        timeout_seconds: Upper bound for a single query.
    """

    def __init__(
        self,
        sessionmaker: async_sessionmaker[AsyncSession],
        timeout_seconds: float = 10.0,
    ) -> None:
        self._sessionmaker = sessionmaker
        self.timeout_seconds = timeout_seconds

    async def _run(
        self,
        operation: str,
        query: Callable[[AsyncSession], Awaitable[list[RecordT]]],
    ) -> list[RecordT]:
        """Run one query in a fresh session, translating failures to FetchError."""
        try:
            async with self._sessionmaker() as session:
                return await asyncio.wait_for(query(session), timeout=self.timeout_seconds)
        except TimeoutError as e:
            logger.warning(
                "store_query_timeout",
                operation=operation,
                timeout_seconds=self.timeout_seconds,
            )
            raise FetchError(
                operation,
                f"Timed out after {self.timeout_seconds}s fetching {operation}",
                e,
            ) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error("store_query_failed", operation=operation, error=str(e))
            raise FetchError(operation, f"Failed to fetch {operation}", e) from e
        except ValidationError as e:
            logger.error("store_row_invalid", operation=operation, error=str(e))
            raise FetchError(operation, f"Invalid row returned for {operation}", e) from e

    async def answers_by_user(
        self,
        user_id: str,
        *,
        quiz_id: str | None = None,
        session_id: str | None = None,
        topic_id: str | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[AnswerRecord]:
        stmt = select(UserAnswer).where(UserAnswer.user_id == user_id)
        if quiz_id is not None:
            stmt = stmt.where(UserAnswer.quiz_id == quiz_id)
        if session_id is not None:
            stmt = stmt.where(UserAnswer.session_id == session_id)
        if topic_id is not None:
            stmt = stmt.join(Question, Question.question_id == UserAnswer.question_id).where(
                Question.topic_id == topic_id
            )
        stmt = _within(stmt, UserAnswer.created_at, since, until)
        stmt = stmt.order_by(UserAnswer.created_at.desc())

        async def query(session: AsyncSession) -> list[AnswerRecord]:
            result = await session.execute(stmt)
            return _validate(AnswerRecord, result.scalars().all())

        return await self._run("answers", query)

    async def answered_questions_by_user(self, user_id: str) -> list[AnsweredQuestionRecord]:
        stmt = (
            select(UserAnswer.is_correct, Question.question_type, Question.difficulty)
            .join(Question, Question.question_id == UserAnswer.question_id)
            .where(UserAnswer.user_id == user_id)
        )

        async def query(session: AsyncSession) -> list[AnsweredQuestionRecord]:
            result = await session.execute(stmt)
            return _validate(AnsweredQuestionRecord, (dict(row) for row in result.mappings()))

        return await self._run("answered_questions", query)

    async def quizzes_by_user(
        self,
        user_id: str,
        *,
        newest_first: bool = True,
        limit: int | None = None,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[QuizRecord]:
        stmt = select(Quiz).where(Quiz.user_id == user_id)
        stmt = _within(stmt, Quiz.created_at, since, until)
        order = Quiz.created_at.desc() if newest_first else Quiz.created_at.asc()
        stmt = stmt.order_by(order)
        if limit is not None:
            stmt = stmt.limit(limit)

        async def query(session: AsyncSession) -> list[QuizRecord]:
            result = await session.execute(stmt)
            return _validate(QuizRecord, result.scalars().all())

        return await self._run("quizzes", query)

    async def quiz_completions_by_user(
        self,
        user_id: str,
        quiz_id: str | None = None,
    ) -> list[QuizCompletionRecord]:
        stmt = select(QuizCompletion).where(QuizCompletion.user_id == user_id)
        if quiz_id is not None:
            stmt = stmt.where(QuizCompletion.quiz_id == quiz_id)
        stmt = stmt.order_by(QuizCompletion.completed_at.desc())

        async def query(session: AsyncSession) -> list[QuizCompletionRecord]:
            result = await session.execute(stmt)
            return _validate(QuizCompletionRecord, result.scalars().all())

        return await self._run("quiz_completions", query)

    async def quiz_question_links(self) -> list[QuizQuestionLink]:
        stmt = select(QuizQuestion)

        async def query(session: AsyncSession) -> list[QuizQuestionLink]:
            result = await session.execute(stmt)
            return _validate(QuizQuestionLink, result.scalars().all())

        return await self._run("quiz_question_links", query)

    async def all_topics(self) -> list[TopicRecord]:
        stmt = select(Topic).order_by(Topic.name)

        async def query(session: AsyncSession) -> list[TopicRecord]:
            result = await session.execute(stmt)
            return _validate(TopicRecord, result.scalars().all())

        return await self._run("topics", query)

    async def topic_progress_by_user(self, user_id: str) -> list[TopicProgressRecord]:
        stmt = select(UserTopicProgress).where(UserTopicProgress.user_id == user_id)

        async def query(session: AsyncSession) -> list[TopicProgressRecord]:
            result = await session.execute(stmt)
            return _validate(TopicProgressRecord, result.scalars().all())

        return await self._run("topic_progress", query)

    async def flashcards_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[FlashcardRecord]:
        stmt = select(Flashcard).where(Flashcard.user_id == user_id)
        stmt = _within(stmt, Flashcard.created_at, since, until)
        stmt = stmt.order_by(Flashcard.created_at.desc())

        async def query(session: AsyncSession) -> list[FlashcardRecord]:
            result = await session.execute(stmt)
            return _validate(FlashcardRecord, result.scalars().all())

        return await self._run("flashcards", query)

    async def exams_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ExamRecord]:
        stmt = select(Exam).where(Exam.user_id == user_id)
        stmt = _within(stmt, Exam.created_at, since, until)
        stmt = stmt.order_by(Exam.created_at.desc())

        async def query(session: AsyncSession) -> list[ExamRecord]:
            result = await session.execute(stmt)
            return _validate(ExamRecord, result.scalars().all())

        return await self._run("exams", query)

    async def exam_sessions_by_user(
        self,
        user_id: str,
        *,
        since: datetime | None = None,
        until: datetime | None = None,
    ) -> list[ExamSessionRecord]:
        stmt = select(ExamSession).where(ExamSession.user_id == user_id)
        stmt = _within(stmt, ExamSession.created_at, since, until)
        stmt = stmt.order_by(ExamSession.created_at.desc())

        async def query(session: AsyncSession) -> list[ExamSessionRecord]:
            result = await session.execute(stmt)
            return _validate(ExamSessionRecord, result.scalars().all())

        return await self._run("exam_sessions", query)

    async def daily_analytics_by_user(
        self,
        user_id: str,
        *,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[DailyAnalyticsRecord]:
        stmt = select(DailyAnalytics).where(DailyAnalytics.user_id == user_id)
        stmt = _within(stmt, DailyAnalytics.activity_date, date_from, date_to)
        stmt = stmt.order_by(DailyAnalytics.activity_date.asc())

        async def query(session: AsyncSession) -> list[DailyAnalyticsRecord]:
            result = await session.execute(stmt)
            return _validate(DailyAnalyticsRecord, result.scalars().all())

        return await self._run("daily_analytics", query)
