"""SQLite CREATE TABLE statements."""

from __future__ import annotations

TABLES: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS decisions (
        id TEXT PRIMARY KEY,
        skill_name TEXT NOT NULL,
        environment TEXT NOT NULL,
        username TEXT DEFAULT '',
        state TEXT NOT NULL,
        risk_level INTEGER,
        blast_radius INTEGER DEFAULT 0,
        reason TEXT DEFAULT '',
        command TEXT DEFAULT '',
        created_at TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS violations (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        decision_id TEXT NOT NULL,
        policy_name TEXT NOT NULL,
        severity TEXT NOT NULL,
        enforcement TEXT NOT NULL,
        blocking INTEGER DEFAULT 0,
        reason TEXT DEFAULT '',
        FOREIGN KEY (decision_id) REFERENCES decisions(id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS executions (
        id TEXT PRIMARY KEY,
        decision_id TEXT NOT NULL,
        status TEXT NOT NULL,
        exit_code INTEGER,
        output TEXT DEFAULT '',
        error TEXT DEFAULT '',
        duration REAL DEFAULT 0,
        executed_at TEXT NOT NULL,
        FOREIGN KEY (decision_id) REFERENCES decisions(id)
    )
    """,
]
