"""
Example 03: Repository Pattern

This example demonstrates using the Repository pattern for DDD-style code organization.
"""

from row_bind import Engine, ConnectionConfig, EmptyResultError, SqlType
from row_bind.mapping import Column, NotNull, entity
from row_bind.repository import Repository
from typing import Annotated, Optional
import tempfile
import sqlite3
from pathlib import Path


@entity
class User:
    """User entity"""
    id: Annotated[int, Column("id"), NotNull()] = 0
    name: Annotated[Optional[str], Column("name")] = None
    email: Annotated[Optional[str], Column("email")] = None
    active: Annotated[bool, Column("active")] = True


class UserRepository(Repository[User]):
    """Repository for User entities"""

    _TYPES = {"active": SqlType.BOOLEAN}

    def __init__(self, engine: Engine):
        super().__init__(engine, target_class=User)

    def find_by_id(self, user_id: int) -> User:
        """Find user by ID"""
        return self.load_object(
            "SELECT * FROM users WHERE id = :id", {"id": user_id}, column_types=self._TYPES
        )

    def find_all_active(self) -> list[User]:
        """Find all active users"""
        return self.load_list(
            "SELECT * FROM users WHERE active = 1 ORDER BY id", column_types=self._TYPES
        )

    def add(self, name: str, email: str) -> int:
        """Insert a user"""
        return self.execute(
            "INSERT INTO users (name, email) VALUES (:name, :email)",
            {"name": name, "email": email},
        )

    def deactivate(self, ids: list[int]) -> int:
        """Deactivate several users at once"""
        placeholders = ", ".join("?" for _ in ids)
        return self.execute(f"UPDATE users SET active = 0 WHERE id IN ({placeholders})", ids)

    def count(self) -> int:
        return self.load_scalar("SELECT COUNT(*) FROM users")


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE users (
            id INTEGER PRIMARY KEY,
            name TEXT NOT NULL,
            email TEXT NOT NULL,
            active INTEGER DEFAULT 1
        )
    """)
    conn.commit()
    conn.close()

    config = ConnectionConfig(driver="sqlite", database=db_path)
    engine = Engine.from_config(config)
    repo = UserRepository(engine)

    print("=== Repository Pattern ===\n")

    repo.add("Alice", "alice@example.com")
    repo.add("Bob", "bob@example.com")
    repo.add("Carol", "carol@example.com")
    print(f"1. Inserted {repo.count()} users\n")

    user = repo.find_by_id(1)
    print(f"2. Found: {user.name} <{user.email}>\n")

    repo.deactivate([2, 3])
    print("3. Active users:")
    for u in repo.find_all_active():
        print(f"   - {u.name}")
    print()

    print("4. Missing user:")
    try:
        repo.find_by_id(99)
    except EmptyResultError as e:
        print(f"   {e}\n")

    engine.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
