"""StudyPulse Backend.

Learning-platform backend whose core is the analytics aggregation engine:
dashboard summaries, activity feeds, topic rollups, streaks and heatmaps
computed per request from persisted quiz, answer and flashcard data.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"
