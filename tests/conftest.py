"""Shared test fixtures."""

from __future__ import annotations

import pytest

from row_bind.core.connection import ConnectionConfig, ConnectionManager
from row_bind.core.engine import Engine


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config with a single pooled connection."""
    return ConnectionConfig(driver="sqlite", database=":memory:", pool_size=1)


@pytest.fixture
def engine(sqlite_config: ConnectionConfig):
    """Engine over an in-memory SQLite database with a seeded users table."""
    manager = ConnectionManager(sqlite_config)
    eng = Engine(manager)

    with manager.get_connection() as conn:
        conn.execute(
            "CREATE TABLE users (id INTEGER PRIMARY KEY AUTOINCREMENT, name TEXT, "
            "email TEXT, active INTEGER NOT NULL DEFAULT 1, joined TEXT)"
        )
        conn.execute(
            "INSERT INTO users (name, email, active, joined) "
            "VALUES ('Alice', 'alice@example.com', 1, '2024-01-15T09:30:00')"
        )
        conn.execute(
            "INSERT INTO users (name, email, active, joined) "
            "VALUES ('Bob', NULL, 0, NULL)"
        )
        conn.commit()

    yield eng
    eng.close()
