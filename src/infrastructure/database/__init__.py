# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database infrastructure for PostgreSQL connections.

This package provides the SQLAlchemy async engine and session factory for
the platform database. The analytics engine opens one short-lived session
per query so that concurrent reads never share a session.

Example:
    from src.infrastructure.database import init_database, get_sessionmaker

    await init_database(settings)

    async with get_sessionmaker()() as session:
        result = await session.execute(select(Quiz))
"""

from src.infrastructure.database.connection import (
    DatabaseError,
    check_database_connection,
    close_database,
    get_engine,
    get_sessionmaker,
    init_database,
)

__all__ = [
    "DatabaseError",
    "check_database_connection",
    "close_database",
    "get_engine",
    "get_sessionmaker",
    "init_database",
]
