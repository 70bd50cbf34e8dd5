"""
Calculator Session for RideCalc
One calculator popup bound to one host field: open -> edit -> done | cancel
"""
import logging
import math
from enum import Enum

import config
from actions import Action
from calculator import Calculator
from errors import SessionClosedError

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    CANCELLED = "cancelled"


class CalculatorSession:
    """Calculator state owned by the caller for the lifetime of one edit.

    initial_value seeds the display when it is positive. sink is called
    exactly once, by done(), with the rounded and clamped value. A fresh
    tape is created unless the caller deliberately shares one.
    """

    def __init__(self, initial_value=0.0, decimal_places=config.DEFAULT_DECIMAL_PLACES, sink=None, tape=None):
        self.initial_value = initial_value
        self.sink = sink
        self.calculator = Calculator(decimal_places, tape=tape)
        self.state = SessionState.OPEN
        self.committed_value = None
        if initial_value and math.isfinite(initial_value) and initial_value > 0:
            self.calculator.buffer.load_number(self.calculator.formatter.format_display(initial_value))
        self._start = self.calculator.buffer.snapshot()

    @property
    def is_open(self):
        return self.state == SessionState.OPEN

    @property
    def display(self):
        return self.calculator.get_expression()

    @property
    def tape(self):
        return self.calculator.tape

    @property
    def memory_value(self):
        return self.calculator.memory.value

    @property
    def decimal_places(self):
        return self.calculator.formatter.decimal_places

    def add_listener(self, callback):
        """Register a callback for operator and memory presses (tactile feedback)"""
        self.calculator.listeners.append(callback)

    def _check_open(self):
        if not self.is_open:
            raise SessionClosedError(f"Session already {self.state.value}")

    def dispatch(self, action):
        self._check_open()
        return self.calculator.dispatch(action)

    def press(self, key):
        """Apply a button label or key name"""
        return self.dispatch(Action.from_key(key))

    def press_all(self, keys):
        for key in keys:
            self.press(key)
        return self.display

    def result_value(self):
        """The value Done would commit, without committing it.

        Only a display that reads as a plain number is used; an expression
        that was never evaluated with '=' commits 0.
        """
        formatter = self.calculator.formatter
        return formatter.commit_value(formatter.parse_number(self.display))

    def done(self):
        """Commit the value to the host and close the session"""
        self._check_open()
        value = self.result_value()
        self.state = SessionState.COMMITTED
        self.committed_value = value
        logger.debug("Session committed %r", value)
        if self.sink is not None:
            self.sink(value)
        return value

    def cancel(self):
        """Discard this session's edits; the host value is never touched"""
        self._check_open()
        self.calculator.buffer.restore(self._start)
        self.calculator.memory.clear()
        self.state = SessionState.CANCELLED
        logger.debug("Session cancelled")

    def to_dict(self):
        buffer = self.calculator.buffer
        return {
            'state': self.state.value,
            'display': self.display,
            'error': buffer.error,
            'waiting_for_operand': buffer.waiting_for_operand,
            'pending_operation': buffer.pending_operation,
            'memory': self.memory_value,
            'decimal_places': self.decimal_places,
            'tape': self.tape.as_dicts(),
            'committed_value': self.committed_value,
        }
