"""Card flags: marking cards to come back to, e.g. a wrong or unclear answer."""

import sqlite3

FLAGGED = "flagged"


def _require_card(conn: sqlite3.Connection, card_id: str):
    if conn.execute("SELECT 1 FROM cards WHERE id = ?", (card_id,)).fetchone() is None:
        raise KeyError(f"Unknown card: {card_id}")


def add_flag(conn: sqlite3.Connection, card_id: str, flag: str = FLAGGED, note: str | None = None):
    """Set `flag` on a card, replacing the note of an existing flag."""
    _require_card(conn, card_id)
    with conn:
        conn.execute("""
            INSERT INTO card_flags (card_id, flag, note) VALUES (?, ?, ?)
            ON CONFLICT (card_id, flag) DO UPDATE SET note = excluded.note
        """, (card_id, flag, note))


def remove_flag(conn: sqlite3.Connection, card_id: str, flag: str = FLAGGED) -> bool:
    """Clear `flag` on a card. Returns False if the card did not have it."""
    _require_card(conn, card_id)
    with conn:
        cur = conn.execute("DELETE FROM card_flags WHERE card_id = ? AND flag = ?",
                           (card_id, flag))
    return cur.rowcount > 0


def get_flags(conn: sqlite3.Connection, card_id: str) -> list[dict]:
    return [dict(r) for r in conn.execute(
        "SELECT flag, note FROM card_flags WHERE card_id = ? ORDER BY created_at, flag",
        (card_id,))]
