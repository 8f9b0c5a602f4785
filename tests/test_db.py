"""Tests for flashsr.db."""

import sqlite3

import pytest

from flashsr.db import SCHEMA, init_db


def test_schema_creation():
    conn = init_db(":memory:")
    tables = [r[0] for r in conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name").fetchall()]
    assert "cards" in tables
    assert "card_state" in tables
    assert "card_tags" in tables
    assert "card_flags" in tables
    assert "review_log" in tables
    conn.close()


def test_foreign_keys_enabled():
    conn = init_db(":memory:")
    fk = conn.execute("PRAGMA foreign_keys").fetchone()[0]
    assert fk == 1
    conn.close()


def test_idempotent_schema():
    conn = init_db(":memory:")
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


def test_file_db(tmp_path):
    db_path = tmp_path / "sub" / "test.db"
    conn = init_db(db_path)
    assert db_path.exists()
    wal = conn.execute("PRAGMA journal_mode").fetchone()[0]
    assert wal == "wal"
    conn.close()


def test_state_constraints(db_conn):
    db_conn.execute("INSERT INTO cards (id, front, back) VALUES ('c1', 'Q', 'A')")
    with pytest.raises(sqlite3.IntegrityError):
        db_conn.execute("""
            INSERT INTO card_state (card_id, ease_factor, due_date)
            VALUES ('c1', 1.1, '2025-01-01')
        """)
    with pytest.raises(sqlite3.IntegrityError):
        db_conn.execute("""
            INSERT INTO card_state (card_id, status, due_date)
            VALUES ('c1', 'mastered', '2025-01-01')
        """)


def test_review_log_grade_constraint(db_conn):
    db_conn.execute("INSERT INTO cards (id, front, back) VALUES ('c1', 'Q', 'A')")
    with pytest.raises(sqlite3.IntegrityError):
        db_conn.execute("""
            INSERT INTO review_log (card_id, reviewed_on, grade, interval, ease_factor, status)
            VALUES ('c1', '2025-01-01', 2, 1, 2.5, 'review')
        """)
