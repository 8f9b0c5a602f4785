"""Collection statistics for the status command."""

import sqlite3
from datetime import date, timedelta

from flashsr.cards import list_cards
from flashsr.models import CardStatus, format_date
from flashsr.selector import select_due


def review_streak(conn: sqlite3.Connection, today: date) -> int:
    """Consecutive days with at least one review, counting back from today.

    A streak that ended yesterday still counts until today is over.
    """
    days = {r["reviewed_on"] for r in conn.execute(
        "SELECT DISTINCT reviewed_on FROM review_log WHERE reviewed_on <= ?",
        (format_date(today),))}
    day = today if format_date(today) in days else today - timedelta(days=1)
    streak = 0
    while format_date(day) in days:
        streak += 1
        day -= timedelta(days=1)
    return streak


def collection_stats(conn: sqlite3.Connection, today: date) -> dict:
    today_str = format_date(today)
    by_status = {s.value: 0 for s in CardStatus}
    for row in conn.execute("SELECT status, COUNT(*) AS cnt FROM card_state GROUP BY status"):
        by_status[row["status"]] = row["cnt"]

    due = select_due(list_cards(conn), today)

    flagged = conn.execute(
        "SELECT COUNT(DISTINCT card_id) AS cnt FROM card_flags").fetchone()["cnt"]
    reviewed_today = conn.execute(
        "SELECT COUNT(*) AS cnt FROM review_log WHERE reviewed_on = ?",
        (today_str,)).fetchone()["cnt"]
    total_reviews = conn.execute("SELECT COUNT(*) AS cnt FROM review_log").fetchone()["cnt"]

    return {
        "total": sum(by_status.values()),
        "by_status": by_status,
        "due": len(due),
        "malformed": len(due.malformed),
        "flagged": flagged,
        "reviewed_today": reviewed_today,
        "total_reviews": total_reviews,
        "streak": review_streak(conn, today),
    }
