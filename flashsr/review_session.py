"""ReviewSession: walks a due set one card at a time, independent of any UI."""

import enum
import logging
import time
import uuid
from dataclasses import dataclass
from datetime import date
from typing import Callable, Sequence

from flashsr.models import Card, Grade, ReviewEvent, format_date
from flashsr.schedulers import Scheduler
from flashsr.selector import DueSet

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    ACTIVE = "active"
    FINISHED = "finished"


class SessionError(ValueError):
    pass


class SessionFinishedError(SessionError):
    pass


class AnswerNotRevealedError(SessionError):
    pass


@dataclass
class FailedSave:
    card: Card
    error: Exception


class ReviewSession:
    """Presents each due card once and grades it through the scheduler.

    `persist(card, event)` is called exactly once per grade, before the
    session moves on. If it raises, the failure is kept in `failed_saves`
    and the session still advances.
    """

    def __init__(self, due: Sequence[Card], scheduler: Scheduler,
                 persist: Callable[[Card, ReviewEvent], None], today: date,
                 session_id: str | None = None):
        self._queue = list(due)
        self.scheduler = scheduler
        self.persist = persist
        self.today = today
        self.session_id = session_id or str(uuid.uuid4())
        self._index = 0
        self._revealed = False
        self.serve_time = time.time() if self._queue else None
        self.reviewed = 0
        self.failed_saves: list[FailedSave] = []
        self.malformed = list(due.malformed) if isinstance(due, DueSet) else []

    @property
    def state(self) -> SessionState:
        if self._index >= len(self._queue):
            return SessionState.FINISHED
        return SessionState.ACTIVE

    @property
    def finished(self) -> bool:
        return self.state is SessionState.FINISHED

    @property
    def current_card(self) -> Card | None:
        if self.finished:
            return None
        return self._queue[self._index]

    @property
    def position(self) -> int:
        return self._index

    @property
    def total(self) -> int:
        return len(self._queue)

    @property
    def remaining(self) -> int:
        return len(self._queue) - self._index

    @property
    def revealed(self) -> bool:
        return self._revealed

    def reveal(self) -> Card:
        if self.finished:
            raise SessionFinishedError("Session is finished")
        self._revealed = True
        return self._queue[self._index]

    def grade(self, grade: Grade) -> Card:
        """Grade the current card, hand it to `persist` and advance."""
        if not isinstance(grade, Grade):
            raise TypeError(f"grade must be a Grade, got {grade!r}")
        if self.finished:
            raise SessionFinishedError("Session is finished")
        if not self._revealed:
            raise AnswerNotRevealedError("Answer has not been revealed")

        card = self._queue[self._index]
        new_state = self.scheduler.next_state(card.state, grade, self.today)
        updated = card.with_state(new_state)
        time_on_card_ms = int((time.time() - self.serve_time) * 1000) if self.serve_time else None
        event = ReviewEvent(
            card_id=card.id, session_id=self.session_id, grade=grade,
            reviewed_on=format_date(self.today),
            interval=new_state.interval, ease_factor=new_state.ease_factor,
            status=new_state.status, time_on_card_ms=time_on_card_ms,
        )
        logger.debug("card %s graded %s: interval %s -> %s, due %s", card.id, grade.name,
                     card.state.interval, new_state.interval, new_state.due_date)

        try:
            self.persist(updated, event)
        except Exception as e:
            logger.warning("Failed to save card %s: %s", card.id, e)
            self.failed_saves.append(FailedSave(card=updated, error=e))

        self.reviewed += 1
        self._index += 1
        self._revealed = False
        self.serve_time = time.time() if not self.finished else None
        return updated
