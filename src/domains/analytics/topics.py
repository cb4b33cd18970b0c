# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Topic hierarchy aggregation.

Topics form a two-level tree: parents have no parent_topic_id and every
other topic hangs directly off one parent. A family is a parent plus its
direct subtopics. Deeper nesting is not aggregated.

Two views are produced:
- rollup_topic_progress: one entry per parent, summing the family's
  attempted/correct counts and averaging proficiency over the members
  that have a progress row.
- annotate_all_topic_progress: every topic with its own numbers and its
  parent's name, for detailed breakdowns.

Both are ordered by most recent activity first, topics without activity
last, ties broken by name.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from src.domains.analytics.records import TopicProgressRecord, TopicRecord
from src.domains.analytics.scores import percentage, round_half_up
from src.utils.datetime import format_iso


@dataclass
class TopicProgress:
    """Rolled-up progress for a parent topic."""

    topic_id: str
    topic_name: str
    progress_percentage: int
    questions_attempted: int
    questions_correct: int
    last_activity: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "topic_name": self.topic_name,
            "progress_percentage": self.progress_percentage,
            "questions_attempted": self.questions_attempted,
            "questions_correct": self.questions_correct,
            "last_activity": format_iso(self.last_activity),
        }


@dataclass
class TopicProgressDetail:
    """Progress for a single topic, parent or subtopic."""

    topic_id: str
    topic_name: str
    parent_topic_id: str | None
    parent_topic_name: str | None
    proficiency_level: int
    questions_attempted: int
    questions_correct: int
    accuracy_percentage: int
    last_activity: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "topic_name": self.topic_name,
            "parent_topic_id": self.parent_topic_id,
            "parent_topic_name": self.parent_topic_name,
            "proficiency_level": self.proficiency_level,
            "questions_attempted": self.questions_attempted,
            "questions_correct": self.questions_correct,
            "accuracy_percentage": self.accuracy_percentage,
            "last_activity": format_iso(self.last_activity),
        }


class _HasActivity(Protocol):
    topic_id: str
    topic_name: str
    last_activity: datetime | None


def _by_recent_activity(item: _HasActivity) -> tuple[bool, float, str, str]:
    if item.last_activity is None:
        return (True, 0.0, item.topic_name, item.topic_id)
    return (False, -item.last_activity.timestamp(), item.topic_name, item.topic_id)


def _children_by_parent(topics: Iterable[TopicRecord]) -> dict[str, list[TopicRecord]]:
    children: dict[str, list[TopicRecord]] = {}
    for topic in topics:
        if topic.parent_topic_id is not None:
            children.setdefault(topic.parent_topic_id, []).append(topic)
    return children


def _latest(values: Iterable[datetime | None]) -> datetime | None:
    present = [value for value in values if value is not None]
    return max(present) if present else None


def rollup_topic_progress(
    topics: Sequence[TopicRecord],
    progress: Iterable[TopicProgressRecord],
) -> list[TopicProgress]:
    """Roll subtopic progress up into each parent topic.

    A parent's attempted count is its own plus its direct subtopics'.
    Proficiency is the mean over family members that have progress, so a
    subtopic the user never touched does not drag the average down.
    Parents whose family has no attempts are left out.

    Args:
        topics: The full topic tree.
        progress: The user's per-topic progress rows.

    Returns:
        One TopicProgress per active parent topic.
    """
    progress_by_topic = {row.topic_id: row for row in progress}
    children = _children_by_parent(topics)

    rollup: list[TopicProgress] = []
    for parent in topics:
        if not parent.is_parent:
            continue

        family = [parent, *children.get(parent.topic_id, [])]
        rows = [progress_by_topic[t.topic_id] for t in family if t.topic_id in progress_by_topic]
        attempted = sum(row.questions_attempted for row in rows)
        if attempted <= 0:
            continue

        proficiency = sum(row.proficiency_level for row in rows) / len(rows)
        rollup.append(
            TopicProgress(
                topic_id=parent.topic_id,
                topic_name=parent.name,
                progress_percentage=round_half_up(proficiency * 100),
                questions_attempted=attempted,
                questions_correct=sum(row.questions_correct for row in rows),
                last_activity=_latest(row.last_activity for row in rows),
            )
        )

    rollup.sort(key=_by_recent_activity)
    return rollup


def annotate_all_topic_progress(
    topics: Sequence[TopicRecord],
    progress: Iterable[TopicProgressRecord],
) -> list[TopicProgressDetail]:
    """List every topic in a family with progress, with its own numbers.

    A topic is listed when it has a progress row or when any other member
    of its family does. Topics without a row report zeros.

    Args:
        topics: The full topic tree.
        progress: The user's per-topic progress rows.

    Returns:
        TopicProgressDetail entries, most recently active first.
    """
    progress_by_topic = {row.topic_id: row for row in progress}
    names = {topic.topic_id: topic.name for topic in topics}

    active_families: set[str] = set()
    for topic in topics:
        if topic.topic_id not in progress_by_topic:
            continue
        active_families.add(topic.parent_topic_id or topic.topic_id)

    details: list[TopicProgressDetail] = []
    for topic in topics:
        family_id = topic.parent_topic_id or topic.topic_id
        if family_id not in active_families:
            continue

        row = progress_by_topic.get(topic.topic_id)
        attempted = row.questions_attempted if row else 0
        correct = row.questions_correct if row else 0
        details.append(
            TopicProgressDetail(
                topic_id=topic.topic_id,
                topic_name=topic.name,
                parent_topic_id=topic.parent_topic_id,
                parent_topic_name=names.get(topic.parent_topic_id) if topic.parent_topic_id else None,
                proficiency_level=round_half_up(row.proficiency_level * 100) if row else 0,
                questions_attempted=attempted,
                questions_correct=correct,
                accuracy_percentage=percentage(correct, attempted),
                last_activity=row.last_activity if row else None,
            )
        )

    details.sort(key=_by_recent_activity)
    return details
