# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Consecutive-day study streak."""

from collections.abc import Iterable
from datetime import date, datetime, timedelta

from src.utils.datetime import utc_date


def calculate_streak(timestamps: Iterable[datetime], today: date) -> int:
    """Count consecutive UTC days with activity, ending today.

    The walk starts at today and moves back one day at a time, stopping
    at the first day without activity. No activity today means no streak,
    whatever happened before.

    Args:
        timestamps: Activity timestamps in any order.
        today: The anchoring UTC date.

    Returns:
        Number of consecutive active days, 0 when there is no activity.

    Example:
        >>> calculate_streak([today_ts, yesterday_ts, three_days_ago_ts], today)
        2
    """
    unique_dates = sorted({utc_date(ts) for ts in timestamps}, reverse=True)

    streak = 0
    for offset, day in enumerate(unique_dates):
        if day != today - timedelta(days=offset):
            break
        streak += 1
    return streak
