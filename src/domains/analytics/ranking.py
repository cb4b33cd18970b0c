# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Best and worst topic ranking."""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.domains.analytics.records import TopicProgressRecord, TopicRecord
from src.domains.analytics.scores import round_half_up

UNKNOWN_TOPIC = "Unknown Topic"


@dataclass
class RankedTopic:
    topic_id: str
    topic_name: str
    accuracy_percentage: int
    questions_attempted: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "topic_id": self.topic_id,
            "topic_name": self.topic_name,
            "accuracy_percentage": self.accuracy_percentage,
            "questions_attempted": self.questions_attempted,
        }


@dataclass
class BestWorstTopics:
    """Strongest topics first in best, weakest topics first in worst."""

    best_topics: list[RankedTopic] = field(default_factory=list)
    worst_topics: list[RankedTopic] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bestTopics": [topic.to_dict() for topic in self.best_topics],
            "worstTopics": [topic.to_dict() for topic in self.worst_topics],
        }


def rank_best_worst_topics(
    progress: Iterable[TopicProgressRecord],
    topics: Sequence[TopicRecord],
    min_attempts: int = 5,
    size: int = 5,
) -> BestWorstTopics:
    """Rank topics by proficiency, ignoring thinly sampled ones.

    Topics with fewer than min_attempts attempts never appear, however
    extreme their proficiency. With fewer than 2 * size eligible topics the
    two lists overlap.

    Args:
        progress: The user's per-topic progress rows.
        topics: Topics for name lookup.
        min_attempts: Minimum attempts for a topic to be ranked.
        size: Maximum length of each list.

    Returns:
        BestWorstTopics; either list may be short or empty.
    """
    names = {topic.topic_id: topic.name for topic in topics}
    ranked = [
        RankedTopic(
            topic_id=row.topic_id,
            topic_name=names.get(row.topic_id, UNKNOWN_TOPIC),
            accuracy_percentage=round_half_up(row.proficiency_level * 100),
            questions_attempted=row.questions_attempted,
        )
        for row in progress
        if row.questions_attempted >= min_attempts
    ]
    ranked.sort(key=lambda t: (-t.accuracy_percentage, t.topic_name, t.topic_id))

    if size <= 0:
        return BestWorstTopics()
    return BestWorstTopics(
        best_topics=ranked[:size],
        worst_topics=list(reversed(ranked[-size:])),
    )
