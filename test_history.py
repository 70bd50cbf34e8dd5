"""
Test calculation tape history
"""
import dataclasses

import pytest

from number_formatter import NumberFormatter
from tape import CalculationStep, Tape


@pytest.fixture
def tape():
    tape = Tape()
    tape.add_calculation("2+3", 5.0)
    tape.add_calculation("10/4", 2.5)
    return tape


def test_steps_are_in_chronological_order(tape):
    assert [step.expression for step in tape] == ["2+3", "10/4"]
    assert tape.last.result == 2.5
    assert len(tape) == 2


def test_step_ids_are_unique(tape):
    ids = {step.id for step in tape.steps}
    assert len(ids) == 2


def test_steps_cannot_be_changed(tape):
    step = tape.steps[0]
    with pytest.raises(dataclasses.FrozenInstanceError):
        step.result = 99.0
    assert isinstance(tape.steps, tuple)


def test_empty_tape():
    tape = Tape()
    assert tape.last is None
    assert len(tape) == 0
    assert tape.format_calculation_history(NumberFormatter()) == []


def test_format_calculation_history(tape):
    assert tape.format_calculation_history(NumberFormatter()) == ["2+3 = 5", "10/4 = 2.5"]


def test_as_dicts(tape):
    rows = tape.as_dicts()
    assert rows[0]["expression"] == "2+3"
    assert rows[0]["result"] == 5.0
    assert set(rows[1]) == {"id", "expression", "result"}


def test_add_calculation_returns_step():
    step = Tape().add_calculation("1+1", 2.0)
    assert isinstance(step, CalculationStep)
    assert step.expression == "1+1"
