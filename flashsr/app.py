"""App: central object that wires together the data dir, db and scheduler."""

import pathlib
import sqlite3
from datetime import date

from flashsr.cards import list_cards, record_review
from flashsr.config import get_sr_dir, load_settings
from flashsr.db import init_db
from flashsr.models import Card, ReviewEvent
from flashsr.review_session import ReviewSession
from flashsr.schedulers import load_scheduler
from flashsr.selector import DueSet, select_due


class App:
    """Holds all shared state for a flashsr run.

    Usage:
        app = App(sr_dir="/path/to/flashsr")
        app.init_db()                    # uses sr_dir/flashsr.db
        app.load_scheduler()             # uses settings["scheduler"]
        session = app.start_session(date.today())
        app.close()

    For testing:
        app = App(sr_dir=tmp_path)
        app.init_db(":memory:")
    """

    def __init__(self, sr_dir: pathlib.Path | str | None = None):
        if sr_dir is None:
            sr_dir = get_sr_dir()
        self.sr_dir = pathlib.Path(sr_dir)
        self.settings = load_settings(self.sr_dir)
        self.conn: sqlite3.Connection | None = None
        self.scheduler = None

    @property
    def db_path(self) -> pathlib.Path:
        return self.sr_dir / "flashsr.db"

    def init_db(self, db_path: pathlib.Path | str | None = None) -> sqlite3.Connection:
        """Initialize (or connect to) the database.

        Args:
            db_path: Path to the SQLite database file, or ":memory:" for
                     in-memory databases (useful for testing). Defaults to
                     sr_dir/flashsr.db.
        """
        if db_path is None:
            db_path = self.db_path
        self.conn = init_db(db_path)
        return self.conn

    def load_scheduler(self, name: str | None = None):
        """Load and store the scheduler.

        Args:
            name: Scheduler name. Defaults to settings["scheduler"].
        """
        if name is None:
            name = self.settings.get("scheduler", "sm2")
        self.scheduler = load_scheduler(name, self.sr_dir)
        return self.scheduler

    def due_cards(self, today: date, deck: str | None = None, tag: str | None = None,
                  flag: str | None = None, limit: int | None = None) -> DueSet:
        cards = list_cards(self.conn, deck=deck, tag=tag, flag=flag)
        if limit is None:
            limit = self.settings.get("session_limit") or None
        return select_due(cards, today, limit=limit)

    def save_review(self, card: Card, event: ReviewEvent):
        record_review(self.conn, card, event)

    def start_session(self, today: date, deck: str | None = None, tag: str | None = None,
                      flag: str | None = None, limit: int | None = None) -> ReviewSession:
        if self.scheduler is None:
            self.load_scheduler()
        due = self.due_cards(today, deck=deck, tag=tag, flag=flag, limit=limit)
        return ReviewSession(due, self.scheduler, self.save_review, today)

    def close(self):
        """Close the database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
