"""
Tests for calculator session commit and cancel
"""
import pytest

from errors import SessionClosedError
from session import CalculatorSession, SessionState
from tape import Tape


@pytest.fixture
def committed():
    return []


def make_session(committed, initial_value=0.0, decimal_places=2, **kwargs):
    return CalculatorSession(initial_value, decimal_places, sink=committed.append, **kwargs)


@pytest.mark.parametrize("initial, display", [
    (123.45, "123.45"),
    (0.0, "0"),
    (-5.0, "0"),
    (float("nan"), "0"),
])
def test_seeding(committed, initial, display):
    session = make_session(committed, initial)
    assert session.display == display
    assert session.is_open


def test_done_commits_evaluated_result(committed):
    session = make_session(committed)
    session.press_all("2+3=")
    assert session.done() == 5.0
    assert committed == [5.0]
    assert session.state == SessionState.COMMITTED


def test_done_with_unevaluated_expression_commits_zero(committed):
    session = make_session(committed)
    session.press_all("2+3")
    assert session.done() == 0.0
    assert committed == [0.0]


def test_done_after_typing_over_seed(committed):
    session = make_session(committed, 12.5)
    session.press_all("⌫⌫⌫9")
    assert session.display == "19"
    assert session.done() == 19.0


def test_done_rounds_to_decimal_places(committed):
    session = make_session(committed)
    session.press_all("10/3=")
    assert session.display == "3.333333"
    session.done()
    assert committed == [3.33]


def test_done_with_three_decimal_places(committed):
    session = make_session(committed, decimal_places=3)
    session.press_all("1/8=")
    assert session.done() == 0.125


def test_negative_result_commits_zero(committed):
    session = make_session(committed)
    session.press_all("7±")
    assert session.display == "-7"
    session.done()
    assert committed == [0.0]


def test_error_commits_zero(committed):
    session = make_session(committed)
    session.press_all("5/0=")
    assert session.display == "Error"
    assert session.done() == 0.0


def test_closed_session_rejects_further_use(committed):
    session = make_session(committed)
    session.done()
    with pytest.raises(SessionClosedError):
        session.done()
    with pytest.raises(SessionClosedError):
        session.press("1")
    with pytest.raises(SessionClosedError):
        session.cancel()
    assert committed == [0.0]


def test_cancel_restores_seed_and_never_commits(committed):
    session = make_session(committed, 12.0)
    session.press_all(["5", "M+", "+", "1", "="])
    assert session.display == "126"
    session.cancel()
    assert session.display == "12"
    assert session.memory_value == 0.0
    assert session.state == SessionState.CANCELLED
    assert len(session.tape) == 1
    assert committed == []
    with pytest.raises(SessionClosedError):
        session.press("1")


def test_sessions_have_independent_tapes(committed):
    first = make_session(committed)
    second = make_session(committed)
    first.press_all("1+1=")
    assert len(first.tape) == 1
    assert len(second.tape) == 0


def test_shared_tape(committed):
    tape = Tape()
    first = make_session(committed, tape=tape)
    second = make_session(committed, tape=tape)
    first.press_all("1+1=")
    second.press_all("2+2=")
    assert [step.expression for step in tape] == ["1+1", "2+2"]


def test_listener_receives_feedback(committed):
    session = make_session(committed)
    events = []
    session.add_listener(events.append)
    session.press_all(["3", "*", "M+"])
    assert len(events) == 2


def test_result_value_does_not_commit(committed):
    session = make_session(committed)
    session.press_all("4*2=")
    assert session.result_value() == 8.0
    assert session.is_open
    assert committed == []


def test_to_dict(committed):
    session = make_session(committed, 3.0)
    session.press_all("+")
    data = session.to_dict()
    assert data['state'] == "open"
    assert data['display'] == "3+"
    assert data['pending_operation'] == "+"
    assert data['error'] is False
    assert data['committed_value'] is None
    assert data['tape'] == []
