"""Database backend and SQL type code enumerations."""

from __future__ import annotations

from enum import Enum, IntEnum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"


class SqlType(IntEnum):
    """SQL type codes reported for result columns.

    Values follow the JDBC ``java.sql.Types`` numbering so codes coming from
    any driver bridge can be compared directly.
    """

    BIT = -7
    TINYINT = -6
    SMALLINT = 5
    INTEGER = 4
    BIGINT = -5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    NUMERIC = 2
    DECIMAL = 3
    CHAR = 1
    VARCHAR = 12
    LONGVARCHAR = -1
    NCHAR = -15
    NVARCHAR = -9
    LONGNVARCHAR = -16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    TIME_WITH_TIMEZONE = 2013
    TIMESTAMP_WITH_TIMEZONE = 2014
    BINARY = -2
    VARBINARY = -3
    LONGVARBINARY = -4
    NULL = 0
    OTHER = 1111
    JAVA_OBJECT = 2000
    DISTINCT = 2001
    STRUCT = 2002
    ARRAY = 2003
    BLOB = 2004
    CLOB = 2005
    REF = 2006
    SQLXML = 2009
    NCLOB = 2011
    BOOLEAN = 16
    ROWID = -8


def type_name(type_code: int) -> str:
    """Human-readable name for a type code, falling back to the raw number."""
    try:
        return SqlType(type_code).name
    except ValueError:
        return f"UNKNOWN({type_code})"
