"""Database schema and initialization."""

import pathlib
import sqlite3

SCHEMA = """
CREATE TABLE IF NOT EXISTS cards (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    deck TEXT NOT NULL DEFAULT 'default',
    card_type TEXT NOT NULL DEFAULT 'standard' CHECK(card_type IN ('standard','vignette','input')),
    front TEXT NOT NULL,
    back TEXT NOT NULL,
    notes TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS card_state (
    card_id TEXT PRIMARY KEY REFERENCES cards(id) ON DELETE CASCADE,
    interval REAL NOT NULL DEFAULT 0 CHECK(interval >= 0),
    repetitions INTEGER NOT NULL DEFAULT 0 CHECK(repetitions >= 0),
    ease_factor REAL NOT NULL DEFAULT 2.5 CHECK(ease_factor >= 1.3),
    status TEXT NOT NULL DEFAULT 'new' CHECK(status IN ('new','learning','review','relearning')),
    due_date TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS card_tags (
    card_id TEXT NOT NULL REFERENCES cards(id) ON DELETE CASCADE,
    tag TEXT NOT NULL,
    PRIMARY KEY (card_id, tag)
);

CREATE TABLE IF NOT EXISTS card_flags (
    card_id TEXT NOT NULL REFERENCES cards(id) ON DELETE CASCADE,
    flag TEXT NOT NULL,
    note TEXT,
    created_at TEXT NOT NULL DEFAULT (datetime('now')),
    PRIMARY KEY (card_id, flag)
);

CREATE TABLE IF NOT EXISTS review_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    card_id TEXT NOT NULL REFERENCES cards(id) ON DELETE CASCADE,
    session_id TEXT,
    timestamp TEXT NOT NULL DEFAULT (datetime('now')),
    reviewed_on TEXT NOT NULL,
    grade INTEGER NOT NULL CHECK(grade IN (0, 3, 4, 5)),
    interval REAL NOT NULL,
    ease_factor REAL NOT NULL,
    status TEXT NOT NULL,
    time_on_card_ms INTEGER
);
"""


def init_db(db_path: pathlib.Path | str) -> sqlite3.Connection:
    db_path = pathlib.Path(db_path)
    if str(db_path) != ":memory:":
        db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path), timeout=5, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    if str(db_path) != ":memory:":
        conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    conn.executescript(SCHEMA)
    conn.commit()
    return conn
