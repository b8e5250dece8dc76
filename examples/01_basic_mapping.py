"""
Example 01: Basic Mapping

This example demonstrates binding result columns to attributes and setter methods.
"""

from row_bind import Engine, ConnectionConfig, SqlType
from row_bind.mapping import Column, NotNull, RowDecoder, column_setter, entity
from datetime import datetime
from typing import Annotated, Optional
import tempfile
import sqlite3
from pathlib import Path


@entity
class User:
    """User bound by column name"""
    id: Annotated[int, Column("id"), NotNull()] = 0
    name: Annotated[Optional[str], Column("name")] = None
    active: Annotated[bool, Column("active")] = False
    joined: Annotated[Optional[datetime], Column("joined")] = None

    def __init__(self):
        self.email = None

    @column_setter("email")
    def set_email(self, value: Optional[str]):
        self.email = value.lower() if value else None


def main():
    # Set up database
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT,
            active INTEGER DEFAULT 1,
            joined TEXT
        )
    """)
    conn.execute(
        "INSERT INTO users (name, email, joined) VALUES ('Alice', 'Alice@Example.com', '2024-01-15T09:30:00')"
    )
    conn.execute("INSERT INTO users (name, active) VALUES ('Bob', 0)")
    conn.commit()
    conn.close()

    # Configure engine
    config = ConnectionConfig(driver="sqlite", database=db_path)
    engine = Engine.from_config(config)
    mapper = RowDecoder(User)

    print("=== Basic Mapping ===\n")

    # SQLite reports no column types; declare the ones that need converting
    types = {"active": SqlType.BOOLEAN, "joined": SqlType.TIMESTAMP}

    print("1. All columns:")
    users = engine.fetch_all("SELECT * FROM users ORDER BY id", mapper=mapper, column_types=types)
    for u in users:
        print(f"   - {u.id}: {u.name} <{u.email}> active={u.active} joined={u.joined}")
    print()

    # Columns missing from the result leave attributes untouched
    print("2. Partial projection:")
    user = engine.fetch_one("SELECT id, name FROM users WHERE id = :id", {"id": 2}, mapper=mapper)
    print(f"   {user.name}: email={user.email} joined={user.joined}\n")

    engine.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
