# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Calendar activity heatmap.

Counts learning activity per UTC day from five independent sources:
answers, flashcards, quizzes, exams and exam sessions. Contributions are
additive, so one day may collect counts from every source.

A flashcard counts once on the day it was created and once more on the day
it was last updated, but only if that is a different day inside the window.
Editing a card on the day it was made is still one unit of activity.
"""

from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from src.domains.analytics.records import (
    AnswerRecord,
    ExamRecord,
    ExamSessionRecord,
    FlashcardRecord,
    QuizRecord,
)
from src.utils.datetime import day_end, day_start, utc_date


@dataclass(frozen=True)
class DateWindow:
    """An inclusive range of UTC days."""

    first_day: date
    last_day: date

    @property
    def start(self) -> datetime:
        return day_start(self.first_day)

    @property
    def end(self) -> datetime:
        return day_end(self.last_day)

    def __contains__(self, day: date) -> bool:
        return self.first_day <= day <= self.last_day


@dataclass
class HeatmapDay:
    """Activity count for one calendar day."""

    day: date
    activity_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"date": self.day.isoformat(), "activity_count": self.activity_count}


def heatmap_window(today: date, year: int | None = None, window_days: int = 30) -> DateWindow:
    """Select the days a heatmap covers.

    Args:
        today: The anchoring UTC date.
        year: Calendar year to cover in full, if given.
        window_days: Length of the trailing window otherwise.

    Returns:
        All of `year`, or the trailing window ending today inclusive.
    """
    if year is not None:
        return DateWindow(date(year, 1, 1), date(year, 12, 31))
    return DateWindow(today - timedelta(days=window_days - 1), today)


def build_activity_heatmap(
    window: DateWindow,
    answers: Iterable[AnswerRecord],
    flashcards: Iterable[FlashcardRecord],
    quizzes: Iterable[QuizRecord],
    exams: Iterable[ExamRecord],
    exam_sessions: Iterable[ExamSessionRecord],
) -> list[HeatmapDay]:
    """Merge activity sources into per-day counts.

    Rows are expected to be bounded by the window on their creation time
    already; only the flashcard update date is checked here.

    Args:
        window: Days covered by the heatmap.
        answers: Answers created inside the window.
        flashcards: Flashcards created inside the window.
        quizzes: Quizzes created inside the window.
        exams: Exams created inside the window.
        exam_sessions: Exam sessions started inside the window.

    Returns:
        Days with activity, ascending by date.
    """
    counts: Counter[date] = Counter()

    for rows in (answers, quizzes, exams, exam_sessions):
        counts.update(utc_date(row.created_at) for row in rows)

    for card in flashcards:
        created_on = utc_date(card.created_at)
        counts[created_on] += 1
        updated_on = utc_date(card.updated_at)
        if updated_on != created_on and updated_on in window:
            counts[updated_on] += 1

    return [HeatmapDay(day=day, activity_count=count) for day, count in sorted(counts.items())]
