"""flashsr — flashcard spaced repetition."""

__version__ = "0.1.0"

from flashsr.models import Card, CardReviewState, CardStatus, Grade, ReviewEvent
from flashsr.review_session import ReviewSession
from flashsr.selector import DueSet, is_due, select_due
from flashsr.sm2 import SM2Scheduler
from flashsr.app import App

__all__ = ["App", "Card", "CardReviewState", "CardStatus", "DueSet", "Grade",
           "ReviewEvent", "ReviewSession", "SM2Scheduler", "is_due", "select_due"]
