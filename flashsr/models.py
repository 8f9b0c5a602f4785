"""Shared data classes: grades, review state, cards and review events."""

import dataclasses
import enum
import re
from dataclasses import dataclass, field
from datetime import date

MIN_EASE = 1.3
DEFAULT_EASE = 2.5

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class MalformedDueDate(ValueError):
    """A due date that is not a zero-padded YYYY-MM-DD calendar date."""

    def __init__(self, value, card_id: str | None = None):
        self.value = value
        self.card_id = card_id
        where = f" on card {card_id}" if card_id is not None else ""
        super().__init__(f"Malformed due date{where}: {value!r}")


def format_date(d: date) -> str:
    return d.isoformat()


def parse_date(value: str) -> date:
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise MalformedDueDate(value)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise MalformedDueDate(value) from None


class Grade(enum.IntEnum):
    """The four review buttons and their SM-2 quality values."""

    AGAIN = 0
    HARD = 3
    GOOD = 4
    EASY = 5

    @classmethod
    def from_label(cls, label: str) -> "Grade":
        key = label.strip().lower()
        for grade in cls:
            name = grade.name.lower()
            if key in (name, name[0]):
                return grade
        raise ValueError(f"Unknown grade: {label!r}")

    @property
    def is_failure(self) -> bool:
        return self < 3


class CardStatus(str, enum.Enum):
    NEW = "new"
    LEARNING = "learning"
    REVIEW = "review"
    RELEARNING = "relearning"


class CardType(str, enum.Enum):
    STANDARD = "standard"
    VIGNETTE = "vignette"
    INPUT = "input"


@dataclass(frozen=True)
class CardReviewState:
    """Scheduling memory of one card.

    due_date is an ISO date string; it is kept as received so that a bad
    value from storage reaches the due-set selector instead of failing here.
    """

    interval: float = 0
    repetitions: int = 0
    ease_factor: float = DEFAULT_EASE
    status: CardStatus = CardStatus.NEW
    due_date: str = ""

    def __post_init__(self):
        if self.ease_factor < MIN_EASE:
            raise ValueError(f"ease_factor must be >= {MIN_EASE}, got {self.ease_factor}")
        if self.interval < 0:
            raise ValueError(f"interval must be >= 0, got {self.interval}")
        if self.repetitions < 0:
            raise ValueError(f"repetitions must be >= 0, got {self.repetitions}")
        if not isinstance(self.status, CardStatus):
            object.__setattr__(self, "status", CardStatus(self.status))

    @classmethod
    def new(cls, today: date) -> "CardReviewState":
        return cls(due_date=format_date(today))


@dataclass
class Card:
    id: str
    front: str
    back: str
    state: CardReviewState
    deck: str = "default"
    card_type: CardType = CardType.STANDARD
    notes: str | None = None
    tags: list[str] = field(default_factory=list)

    def with_state(self, state: CardReviewState) -> "Card":
        return dataclasses.replace(self, state=state, tags=list(self.tags))


@dataclass
class ReviewEvent:
    card_id: str
    session_id: str
    grade: Grade
    reviewed_on: str
    interval: float
    ease_factor: float
    status: CardStatus
    time_on_card_ms: int | None = None
