# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Recent activity feed.

Every fetched quiz yields a "Created" entry. A "Completed" entry is added
only when a completion record exists; answers alone never mark a quiz as
taken. Entries are merged newest first and capped.
"""

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.domains.analytics.records import (
    AnswerRecord,
    QuizCompletionRecord,
    QuizQuestionLink,
    QuizRecord,
    TopicRecord,
)
from src.utils.datetime import format_iso


@dataclass
class RecentActivity:
    """One entry of the activity feed."""

    id: str
    title: str
    completed_at: datetime
    type: str = "quiz"
    score: float | None = None
    topic: str | None = None
    question_count: int = 0
    answered_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "completed_at": format_iso(self.completed_at),
            "question_count": self.question_count,
            "answered_count": self.answered_count,
        }
        if self.score is not None:
            data["score"] = self.score
        if self.topic is not None:
            data["topic"] = self.topic
        return data


def _latest_completions(
    completions: Iterable[QuizCompletionRecord],
) -> dict[str, QuizCompletionRecord]:
    latest: dict[str, QuizCompletionRecord] = {}
    for completion in completions:
        current = latest.get(completion.quiz_id)
        if current is None or completion.completed_at > current.completed_at:
            latest[completion.quiz_id] = completion
    return latest


def assemble_recent_activity(
    quizzes: Sequence[QuizRecord],
    completions: Iterable[QuizCompletionRecord],
    links: Iterable[QuizQuestionLink],
    answers: Iterable[AnswerRecord],
    topics: Iterable[TopicRecord] | None,
    limit: int,
) -> list[RecentActivity]:
    """Build the activity feed for a user's most recent quizzes.

    Args:
        quizzes: The user's most recently created quizzes.
        completions: All of the user's quiz completions.
        links: Quiz-question links, used to size each quiz.
        answers: All of the user's answers.
        topics: Topics for name lookup, or None when unavailable.
        limit: Maximum number of entries to return.

    Returns:
        Entries sorted by completed_at descending. Equal timestamps keep
        creation entries ahead of completions.
    """
    question_counts = Counter(link.quiz_id for link in links)
    answered: dict[str, set[str]] = {}
    for answer in answers:
        if answer.quiz_id is not None:
            answered.setdefault(answer.quiz_id, set()).add(answer.question_id)
    topic_names = {topic.topic_id: topic.name for topic in topics or ()}
    latest_completion = _latest_completions(completions)

    created: list[RecentActivity] = []
    completed: list[RecentActivity] = []
    for quiz in quizzes:
        common = {
            "topic": topic_names.get(quiz.topic_id) if quiz.topic_id else None,
            "question_count": question_counts.get(quiz.quiz_id, 0),
            "answered_count": len(answered.get(quiz.quiz_id, ())),
        }
        created.append(
            RecentActivity(
                id=f"create_{quiz.quiz_id}",
                title=f'Created "{quiz.title}" quiz',
                completed_at=quiz.created_at,
                **common,
            )
        )
        completion = latest_completion.get(quiz.quiz_id)
        if completion is not None:
            completed.append(
                RecentActivity(
                    id=f"complete_{quiz.quiz_id}",
                    title=f'Completed "{quiz.title}" quiz',
                    completed_at=completion.completed_at,
                    score=completion.score_percentage,
                    **common,
                )
            )

    feed = sorted([*created, *completed], key=lambda entry: entry.completed_at, reverse=True)
    return feed[:limit]
