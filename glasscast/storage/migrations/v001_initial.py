"""Initial schema: local key-value preference store."""

import sqlite3

DDL = [
    # Recent searches, unit preference and the auth session live here,
    # each as a single JSON or plain-string value.
    """
    CREATE TABLE IF NOT EXISTS preferences (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
