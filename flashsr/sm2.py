"""SM-2 Scheduler — SuperMemo 2 algorithm.

Maps a card's review state and a quality grade to its next state:

    Again (0)        -> repetitions reset, review again tomorrow
    Hard/Good/Easy   -> interval 1, then 6, then previous interval * ease

The ease factor is updated on every success with the standard SM-2 formula
and never drops below 1.3. A failure leaves the ease factor untouched.
"""

import math
from datetime import date, timedelta

from flashsr.models import MIN_EASE, CardReviewState, CardStatus, Grade, format_date

FIRST_INTERVAL = 1
SECOND_INTERVAL = 6
RELEARN_INTERVAL = 1


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def next_ease(ease_factor: float, quality: int) -> float:
    """EF' = EF + (0.1 - (5 - q) * (0.08 + (5 - q) * 0.02)), floored at 1.3."""
    miss = 5 - quality
    ease = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(ease, MIN_EASE)


class SM2Scheduler:
    scheduler_id = "sm2"

    def next_state(self, state: CardReviewState, grade: Grade, today: date) -> CardReviewState:
        """Return the state a card moves to after being graded on `today`."""
        if not isinstance(grade, Grade):
            raise TypeError(f"grade must be a Grade, got {grade!r}")

        if grade.is_failure:
            return CardReviewState(
                interval=RELEARN_INTERVAL,
                repetitions=0,
                ease_factor=state.ease_factor,
                status=CardStatus.RELEARNING,
                due_date=format_date(today + timedelta(days=RELEARN_INTERVAL)),
            )

        reps = state.repetitions + 1
        if reps == 1:
            interval = FIRST_INTERVAL
        elif reps == 2:
            interval = SECOND_INTERVAL
        else:
            interval = _round_half_up(state.interval * state.ease_factor)

        return CardReviewState(
            interval=interval,
            repetitions=reps,
            ease_factor=next_ease(state.ease_factor, int(grade)),
            status=CardStatus.REVIEW,
            due_date=format_date(today + timedelta(days=interval)),
        )
