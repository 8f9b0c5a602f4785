"""Due-set selection: which cards are eligible for review on a given day."""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator

from flashsr.models import Card, MalformedDueDate, parse_date

logger = logging.getLogger(__name__)


def is_due(due_date: date | str, today: date) -> bool:
    """True when due_date is today or earlier. Raises MalformedDueDate."""
    if isinstance(due_date, str):
        due_date = parse_date(due_date)
    return due_date <= today


@dataclass
class DueSet:
    """Cards due for review, in the order they were given.

    Cards whose due date could not be parsed are left out of `cards` and
    reported in `malformed` instead.
    """

    cards: list[Card] = field(default_factory=list)
    malformed: list[MalformedDueDate] = field(default_factory=list)

    def __iter__(self) -> Iterator[Card]:
        return iter(self.cards)

    def __len__(self) -> int:
        return len(self.cards)

    def __bool__(self) -> bool:
        return bool(self.cards)


def select_due(cards: Iterable[Card], today: date, limit: int | None = None) -> DueSet:
    """Filter `cards` down to those due on `today`.

    Input order is preserved. `limit` caps the number of due cards
    returned; None or 0 means no cap.
    """
    result = DueSet()
    for card in cards:
        try:
            due = is_due(card.state.due_date, today)
        except MalformedDueDate as e:
            err = MalformedDueDate(e.value, card_id=card.id)
            logger.warning("%s; treating card as not due", err)
            result.malformed.append(err)
            continue
        if due:
            result.cards.append(card)
    if limit:
        result.cards = result.cards[:limit]
    return result
