"""Card storage: creating, loading and saving reviewed cards."""

import json
import logging
import pathlib
import sqlite3
import uuid
from datetime import date

from flashsr.models import Card, CardReviewState, CardType, ReviewEvent

logger = logging.getLogger(__name__)


def new_card_id() -> str:
    return uuid.uuid4().hex[:12]


def _insert_card(conn: sqlite3.Connection, card: Card):
    conn.execute("""
        INSERT INTO cards (id, deck, card_type, front, back, notes)
        VALUES (?, ?, ?, ?, ?, ?)
    """, (card.id, card.deck, card.card_type.value, card.front, card.back, card.notes))
    s = card.state
    conn.execute("""
        INSERT INTO card_state (card_id, interval, repetitions, ease_factor, status, due_date)
        VALUES (?, ?, ?, ?, ?, ?)
    """, (card.id, s.interval, s.repetitions, s.ease_factor, s.status.value, s.due_date))
    for tag in card.tags:
        conn.execute("INSERT OR IGNORE INTO card_tags (card_id, tag) VALUES (?, ?)",
                     (card.id, tag))


def add_card(conn: sqlite3.Connection, card: Card):
    with conn:
        _insert_card(conn, card)


def create_card(conn: sqlite3.Connection, front: str, back: str, today: date,
                deck: str = "default", card_type: CardType = CardType.STANDARD,
                notes: str | None = None, tags: list[str] | None = None,
                card_id: str | None = None) -> Card:
    """Create a new card, due immediately, and store it."""
    card = Card(id=card_id or new_card_id(), front=front, back=back,
                state=CardReviewState.new(today), deck=deck,
                card_type=card_type, notes=notes, tags=list(tags or []))
    add_card(conn, card)
    return card


def _row_to_card(row: sqlite3.Row, tags: list[str]) -> Card:
    state = CardReviewState(
        interval=row["interval"], repetitions=row["repetitions"],
        ease_factor=row["ease_factor"], status=row["status"], due_date=row["due_date"],
    )
    return Card(id=row["id"], front=row["front"], back=row["back"], state=state,
                deck=row["deck"], card_type=CardType(row["card_type"]),
                notes=row["notes"], tags=tags)


def _tags_by_card(conn: sqlite3.Connection) -> dict[str, list[str]]:
    tags: dict[str, list[str]] = {}
    for row in conn.execute("SELECT card_id, tag FROM card_tags ORDER BY tag"):
        tags.setdefault(row["card_id"], []).append(row["tag"])
    return tags


_CARD_SELECT = """
    SELECT c.id, c.deck, c.card_type, c.front, c.back, c.notes,
           cs.interval, cs.repetitions, cs.ease_factor, cs.status, cs.due_date
    FROM cards c
    JOIN card_state cs ON c.id = cs.card_id
"""


def get_card(conn: sqlite3.Connection, card_id: str) -> Card | None:
    row = conn.execute(_CARD_SELECT + " WHERE c.id = ?", (card_id,)).fetchone()
    if not row:
        return None
    tags = [r["tag"] for r in conn.execute(
        "SELECT tag FROM card_tags WHERE card_id = ? ORDER BY tag", (card_id,))]
    return _row_to_card(row, tags)


def list_cards(conn: sqlite3.Connection, deck: str | None = None,
               tag: str | None = None, flag: str | None = None) -> list[Card]:
    """All cards in insertion order, optionally filtered."""
    clauses = []
    params: list = []
    if deck:
        clauses.append("c.deck = ?")
        params.append(deck)
    if tag:
        clauses.append("c.id IN (SELECT card_id FROM card_tags WHERE tag = ?)")
        params.append(tag)
    if flag:
        clauses.append("c.id IN (SELECT card_id FROM card_flags WHERE flag = ?)")
        params.append(flag)
    where = (" WHERE " + " AND ".join(clauses)) if clauses else ""
    rows = conn.execute(_CARD_SELECT + where + " ORDER BY c.seq", params).fetchall()
    tags = _tags_by_card(conn)
    return [_row_to_card(row, tags.get(row["id"], [])) for row in rows]


def record_review(conn: sqlite3.Connection, card: Card, event: ReviewEvent):
    """Persist a graded card's new state together with its review log entry."""
    s = card.state
    with conn:
        cur = conn.execute("""
            UPDATE card_state
            SET interval = ?, repetitions = ?, ease_factor = ?, status = ?, due_date = ?,
                updated_at = datetime('now')
            WHERE card_id = ?
        """, (s.interval, s.repetitions, s.ease_factor, s.status.value, s.due_date, card.id))
        if cur.rowcount == 0:
            raise KeyError(f"Unknown card: {card.id}")
        conn.execute("""
            INSERT INTO review_log (card_id, session_id, reviewed_on, grade, interval,
                                    ease_factor, status, time_on_card_ms)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """, (event.card_id, event.session_id, event.reviewed_on, int(event.grade),
              event.interval, event.ease_factor, event.status.value, event.time_on_card_ms))


def _parse_deck_item(path, i: int, item, today: date) -> Card:
    if not isinstance(item, dict) or "front" not in item or "back" not in item:
        raise ValueError(f"{path}: card {i} needs 'front' and 'back'")
    try:
        card_type = CardType(item.get("type", "standard"))
    except ValueError:
        raise ValueError(f"{path}: card {i} has unknown type {item.get('type')!r}") from None
    tags = item.get("tags", [])
    if not isinstance(tags, list):
        raise ValueError(f"{path}: card {i} tags must be a list")
    return Card(id=item.get("id") or new_card_id(), front=item["front"], back=item["back"],
                state=CardReviewState.new(today), deck=item.get("deck", "default"),
                card_type=card_type, notes=item.get("notes"), tags=list(tags))


def import_deck(conn: sqlite3.Connection, path: pathlib.Path, today: date) -> dict:
    """Import cards from a JSON list of {front, back, id?, deck?, type?, notes?, tags?}.

    The whole file is checked before anything is written, and the cards are
    inserted in one transaction, so a bad file leaves the store untouched.
    Cards whose id already exists (in the store or earlier in the file) are
    skipped. Returns counts.
    """
    data = json.loads(pathlib.Path(path).read_text())
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of cards")
    cards = [_parse_deck_item(path, i, item, today) for i, item in enumerate(data)]

    stats = {"added": 0, "skipped": 0}
    seen: set[str] = set()
    with conn:
        for card in cards:
            if card.id in seen or get_card(conn, card.id) is not None:
                logger.info("Skipping existing card %s", card.id)
                stats["skipped"] += 1
                continue
            _insert_card(conn, card)
            seen.add(card.id)
            stats["added"] += 1
    return stats
