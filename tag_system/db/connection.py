"""
Database connection utilities for the tag store.
"""

from pathlib import Path
from typing import Union

import duckdb

DEFAULT_DB_PATH = Path("data") / "tags.duckdb"

IN_MEMORY = ":memory:"


def init_schema(conn: duckdb.DuckDBPyConnection) -> None:
    """
    Initialize the tag schema if tables don't exist.

    Creates TagNode, TagEdge and TagAssignment tables.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS TagNode (
            tag_id VARCHAR NOT NULL,
            name VARCHAR NOT NULL,
            description VARCHAR,
            parent_id VARCHAR,
            sort_order INTEGER NOT NULL,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS TagEdge (
            parent_id VARCHAR NOT NULL,
            child_id VARCHAR NOT NULL,
            sort_order INTEGER NOT NULL
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS TagAssignment (
            entity_id VARCHAR NOT NULL,
            tag_id VARCHAR NOT NULL,
            sort_order INTEGER NOT NULL
        )
    """)


def get_connection(db_path: Union[str, Path] = DEFAULT_DB_PATH) -> duckdb.DuckDBPyConnection:
    """
    Get a DuckDB connection to the tag database.

    Args:
        db_path: Path to the DuckDB file, or ":memory:"

    Returns:
        DuckDB connection with the schema initialized
    """
    if str(db_path) != IN_MEMORY:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = duckdb.connect(str(db_path))
    init_schema(conn)
    return conn
