"""
Example 02: Inherited Bindings

This example demonstrates sharing bindings through @mapped_base ancestors.
"""

from row_bind import Engine, ConnectionConfig, SqlType
from row_bind.core.exceptions import MappingDefinitionError, NullRequiredFieldError
from row_bind.mapping import Column, NotNull, RowDecoder, entity, mapped_base
from datetime import datetime
from typing import Annotated, Optional
import tempfile
import sqlite3
from pathlib import Path


@mapped_base
class Audited:
    """Columns shared by every audited table"""
    created_at: Annotated[Optional[datetime], Column("created_at")] = None
    version: Annotated[int, Column("version"), NotNull()] = 0


@entity
class Document(Audited):
    """Document row; inherits the audit columns"""
    id: Annotated[int, Column("id"), NotNull()] = 0
    title: Annotated[Optional[str], Column("title")] = None


class Plain:
    title: Annotated[Optional[str], Column("title")] = None


def main():
    db_file = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    db_path = db_file.name
    db_file.close()

    conn = sqlite3.connect(db_path)
    conn.execute("""
        CREATE TABLE documents (
            id INTEGER PRIMARY KEY,
            title TEXT,
            version INTEGER,
            created_at TEXT
        )
    """)
    conn.execute("INSERT INTO documents (title, version, created_at) VALUES ('Draft', 3, '2024-02-01T10:00:00')")
    conn.execute("INSERT INTO documents (title, version) VALUES ('Orphan', NULL)")
    conn.commit()
    conn.close()

    config = ConnectionConfig(driver="sqlite", database=db_path)
    engine = Engine.from_config(config)
    mapper = RowDecoder(Document)

    print("=== Inherited Bindings ===\n")

    print("1. Bindings resolved across the hierarchy:")
    for binding in mapper.metadata.field_bindings:
        print(f"   - {binding.attribute} <- {binding.column} (from {binding.declared_in.__name__})")
    print()

    print("2. Decoding:")
    doc = engine.fetch_one(
        "SELECT * FROM documents WHERE id = 1",
        mapper=mapper,
        column_types={"created_at": SqlType.TIMESTAMP},
    )
    print(f"   {doc.title} v{doc.version} created {doc.created_at}\n")

    # A null in a NotNull column fails the whole call
    print("3. Required column is null:")
    try:
        engine.fetch_all("SELECT * FROM documents", mapper=mapper)
    except NullRequiredFieldError as e:
        print(f"   {e}\n")

    # Classes must carry @entity or @mapped_base
    print("4. Unmarked class:")
    try:
        RowDecoder(Plain)
    except MappingDefinitionError as e:
        print(f"   {e}\n")

    engine.close()
    Path(db_path).unlink()


if __name__ == "__main__":
    main()
