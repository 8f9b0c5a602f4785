"""Tests for ReviewSession logic."""

from datetime import date

import pytest

from flashsr.models import Card, CardReviewState, CardStatus, Grade
from flashsr.review_session import (AnswerNotRevealedError, ReviewSession, SessionError,
                                    SessionFinishedError, SessionState)
from flashsr.selector import select_due
from flashsr.sm2 import SM2Scheduler

TODAY = date(2025, 3, 10)


def _card(card_id, due_date="2025-03-10", **state):
    return Card(id=card_id, front=f"Q{card_id}", back=f"A{card_id}",
                state=CardReviewState(due_date=due_date, **state))


class Recorder:
    def __init__(self, fail_on=()):
        self.saved = []
        self.fail_on = set(fail_on)

    def __call__(self, card, event):
        if card.id in self.fail_on:
            raise OSError("disk full")
        self.saved.append((card, event))


def _session(cards, persist=None):
    return ReviewSession(cards, SM2Scheduler(), persist or Recorder(), TODAY)


def test_empty_session_is_finished():
    session = _session([])
    assert session.state is SessionState.FINISHED
    assert session.finished
    assert session.current_card is None
    assert session.total == 0


def test_starts_active_on_first_card():
    cards = [_card("a"), _card("b")]
    session = _session(cards)
    assert session.state is SessionState.ACTIVE
    assert session.current_card.id == "a"
    assert session.position == 0
    assert session.remaining == 2


def test_grade_requires_reveal():
    session = _session([_card("a")])
    with pytest.raises(AnswerNotRevealedError):
        session.grade(Grade.GOOD)
    assert session.reviewed == 0


def test_grade_rejects_raw_integer():
    session = _session([_card("a")])
    session.reveal()
    with pytest.raises(TypeError):
        session.grade(4)


def test_grade_persists_and_advances():
    rec = Recorder()
    session = _session([_card("a"), _card("b")], rec)
    assert session.reveal().id == "a"
    updated = session.grade(Grade.GOOD)

    assert updated.id == "a"
    assert updated.state.interval == 1
    assert updated.state.status is CardStatus.REVIEW
    assert len(rec.saved) == 1
    saved_card, event = rec.saved[0]
    assert saved_card == updated
    assert event.card_id == "a"
    assert event.grade is Grade.GOOD
    assert event.reviewed_on == "2025-03-10"
    assert event.session_id == session.session_id
    assert event.interval == 1
    assert session.current_card.id == "b"
    assert not session.revealed


def test_cannot_grade_same_card_twice():
    rec = Recorder()
    session = _session([_card("a"), _card("b")], rec)
    session.reveal()
    session.grade(Grade.GOOD)
    # the next presentation is a different card and needs its own reveal
    with pytest.raises(AnswerNotRevealedError):
        session.grade(Grade.GOOD)
    assert [c.id for c, _ in rec.saved] == ["a"]


def test_n_grades_finish_session():
    cards = [_card("a"), _card("b", repetitions=1, interval=1), _card("c", repetitions=2, interval=6)]
    rec = Recorder()
    session = _session(cards, rec)
    for grade in (Grade.AGAIN, Grade.GOOD, Grade.EASY):
        assert session.state is SessionState.ACTIVE
        session.reveal()
        session.grade(grade)
    assert session.state is SessionState.FINISHED
    assert session.reviewed == 3
    assert len(rec.saved) == 3

    sched = SM2Scheduler()
    for original, grade, (saved, _) in zip(cards, (Grade.AGAIN, Grade.GOOD, Grade.EASY), rec.saved):
        assert saved.state == sched.next_state(original.state, grade, TODAY)


def test_finished_rejects_grades_and_reveal():
    session = _session([_card("a")])
    session.reveal()
    session.grade(Grade.EASY)
    with pytest.raises(SessionFinishedError):
        session.reveal()
    with pytest.raises(SessionFinishedError):
        session.grade(Grade.GOOD)


def test_session_errors_are_value_errors():
    assert issubclass(SessionFinishedError, SessionError)
    assert issubclass(AnswerNotRevealedError, ValueError)


def test_failed_save_does_not_block(caplog):
    rec = Recorder(fail_on={"a"})
    session = _session([_card("a"), _card("b")], rec)
    session.reveal()
    session.grade(Grade.GOOD)
    assert session.current_card.id == "b"
    assert len(session.failed_saves) == 1
    assert session.failed_saves[0].card.id == "a"
    assert isinstance(session.failed_saves[0].error, OSError)
    assert "Failed to save card a" in caplog.text

    session.reveal()
    session.grade(Grade.GOOD)
    assert session.finished
    assert [c.id for c, _ in rec.saved] == ["b"]


def test_queue_is_copied():
    cards = [_card("a")]
    session = _session(cards)
    cards.append(_card("b"))
    assert session.total == 1


def test_session_from_due_set_keeps_malformed():
    due = select_due([_card("a"), _card("bad", due_date="soon")], TODAY)
    session = _session(due)
    assert session.total == 1
    assert [e.card_id for e in session.malformed] == ["bad"]


def test_independent_sessions():
    cards = [_card("a"), _card("b")]
    s1 = _session(cards)
    s2 = _session(cards)
    s1.reveal()
    s1.grade(Grade.GOOD)
    assert s1.current_card.id == "b"
    assert s2.current_card.id == "a"
    assert s1.session_id != s2.session_id


def test_time_on_card_recorded():
    rec = Recorder()
    session = _session([_card("a")], rec)
    session.reveal()
    session.grade(Grade.HARD)
    assert rec.saved[0][1].time_on_card_ms >= 0
