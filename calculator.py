"""
Calculator for RideCalc
Turns key presses into expression edits, evaluates on '=' and runs the memory keys
"""
import logging
import math
from enum import Enum

import config
from actions import ERROR_RECOVERY_KINDS, Action, ActionKind
from calculator_engine import engine, normalize_operator
from errors import CalculatorError
from expression_buffer import CLOSE, OPEN, ExpressionBuffer, Token, TokenKind
from memory_store import MemoryStore
from number_formatter import NumberFormatter
from tape import Tape

logger = logging.getLogger(__name__)


class EvaluationOutcome(str, Enum):
    EVALUATED = "evaluated"
    NO_OP = "no_op"
    ERROR = "error"


class Calculator:
    def __init__(self, decimal_places=config.DEFAULT_DECIMAL_PLACES, tape=None):
        self.formatter = NumberFormatter(decimal_places)
        self.buffer = ExpressionBuffer()
        self.tape = tape if tape is not None else Tape()
        self.memory = MemoryStore(self.current_value)
        self.listeners = []
        self._handlers = {
            ActionKind.DIGIT: lambda action: self.append_digit(action.value),
            ActionKind.DECIMAL_POINT: lambda action: self.append_decimal_point(),
            ActionKind.OPERATOR: lambda action: self.append_operator(action.value),
            ActionKind.OPEN_PAREN: lambda action: self.append_open_paren(),
            ActionKind.CLOSE_PAREN: lambda action: self.append_close_paren(),
            ActionKind.BACKSPACE: lambda action: self.backspace(),
            ActionKind.ALL_CLEAR: lambda action: self.all_clear(),
            ActionKind.TOGGLE_SIGN: lambda action: self.toggle_sign(),
            ActionKind.PERCENT: lambda action: self.apply_percent(),
            ActionKind.EQUALS: lambda action: self.evaluate(),
            ActionKind.MEMORY_ADD: lambda action: self.memory_add(),
            ActionKind.MEMORY_SUBTRACT: lambda action: self.memory_subtract(),
            ActionKind.MEMORY_RECALL: lambda action: self.memory_recall(),
            ActionKind.MEMORY_CLEAR: lambda action: self.memory_clear(),
        }

    # ── Dispatch ────────────────────────────────────────────────────────────
    def dispatch(self, action):
        """Apply one action and return the new display text"""
        if self.buffer.error and action.kind not in ERROR_RECOVERY_KINDS:
            logger.debug("Ignoring %s while showing Error", action.kind.value)
            return self.get_expression()
        self._handlers[action.kind](action)
        if action.wants_feedback:
            for listener in list(self.listeners):
                listener(action)
        return self.get_expression()

    def press(self, key):
        """Dispatch a button label or key name"""
        return self.dispatch(Action.from_key(key))

    def get_expression(self):
        """Get current display text"""
        return self.buffer.text

    # ── Expression editing ───────────────────────────────────────────────────
    def append_digit(self, digit):
        """Add a digit; a lone zero is replaced"""
        buffer = self.buffer
        if buffer.is_zero:
            buffer.load_number(digit)
        elif buffer.last.is_number:
            buffer.replace_last(Token.number(buffer.last.text + digit))
        else:
            buffer.append(Token.number(digit))
        buffer.waiting_for_operand = False

    def append_decimal_point(self):
        """Add a decimal point to the current number, or start a new fraction"""
        buffer = self.buffer
        last = buffer.last
        if buffer.is_zero:
            buffer.load_number("0.")
        elif last.is_number:
            if "." not in last.text:
                buffer.replace_last(Token.number(last.text + "."))
        elif last.kind in (TokenKind.OPERATOR, TokenKind.OPEN_PAREN):
            buffer.append(Token.number("0."))
        buffer.waiting_for_operand = False

    def append_operator(self, op):
        """Add an operator; a second operator in a row replaces the first"""
        op = normalize_operator(op)
        buffer = self.buffer
        if not buffer.is_zero:
            if buffer.last.is_operator:
                buffer.replace_last(Token.operator(op))
            else:
                buffer.append(Token.operator(op))
            buffer.pending_operation = op
        buffer.waiting_for_operand = False

    def append_open_paren(self):
        buffer = self.buffer
        last = buffer.last
        if buffer.is_zero:
            buffer.tokens = [OPEN]
        elif last.kind in (TokenKind.OPERATOR, TokenKind.OPEN_PAREN):
            buffer.append(OPEN)
        elif last.is_number:
            # 5( reads as 5*(
            buffer.append(Token.operator("*"), OPEN)
        else:
            return
        buffer.waiting_for_operand = False

    def append_close_paren(self):
        buffer = self.buffer
        if buffer.open_count > buffer.close_count and buffer.last.kind in (TokenKind.NUMBER, TokenKind.CLOSE_PAREN):
            buffer.append(CLOSE)
            buffer.waiting_for_operand = False

    def backspace(self):
        """Remove the last character (clears an Error display)"""
        buffer = self.buffer
        if buffer.error:
            buffer.clear()
            return
        last = buffer.last
        trimmed = last.text[:-1]
        if last.is_number and trimmed and trimmed != "-":
            buffer.replace_last(Token.number(trimmed))
        else:
            buffer.pop()

    def all_clear(self):
        """Reset the expression; the tape and memory are kept"""
        self.buffer.clear()

    def toggle_sign(self):
        """Negate the last number in place"""
        last = self.buffer.last
        if last.is_number:
            text = last.text[1:] if last.text.startswith("-") else "-" + last.text
            self.buffer.replace_last(Token.number(text))

    def apply_percent(self):
        """Replace the last number with a hundredth of it"""
        last = self.buffer.last
        if last.is_number:
            percent = float(last.text) / 100
            if not math.isfinite(percent):
                logger.info("Percent of %r is out of range", last.text)
                self.buffer.set_error()
                return
            self.buffer.replace_last(Token.number(self.formatter.format_display(percent)))

    # ── Evaluation ───────────────────────────────────────────────────────────
    def evaluate(self):
        """Evaluate the current expression (the '=' key)"""
        buffer = self.buffer
        if buffer.error or not buffer.has_operator:
            # A bare number is not a calculation
            return EvaluationOutcome.NO_OP

        expression = buffer.text
        try:
            result = engine.evaluate(buffer.tokens)
        except CalculatorError as e:
            logger.info("Calculation of %r failed: %s", expression, e)
            buffer.set_error()
            return EvaluationOutcome.ERROR

        self.tape.add_calculation(expression, result)
        buffer.load_number(self.formatter.format_display(result))
        buffer.pending_operation = None
        buffer.waiting_for_operand = True
        logger.debug("Calculated %s = %r", expression, result)
        return EvaluationOutcome.EVALUATED

    def current_value(self):
        """Value of the buffer: evaluated if possible, else parsed, else 0"""
        if self.buffer.error:
            return 0.0
        try:
            return engine.evaluate(self.buffer.tokens)
        except CalculatorError:
            pass
        value = self.formatter.parse_number(self.buffer.text)
        return value if value is not None else 0.0

    # ── Memory ───────────────────────────────────────────────────────────────
    def memory_add(self):
        """Add value to memory (M+)"""
        self.memory.add()

    def memory_subtract(self):
        """Subtract value from memory (M-)"""
        self.memory.subtract()

    def memory_clear(self):
        """Clear memory (MC)"""
        self.memory.clear()

    def memory_recall(self):
        """Recall memory value (MR).

        Replaces a lone "0", otherwise the value is typed onto the end of
        the expression, so "12" with 5 in memory becomes "125" and with -5
        becomes "12-5".
        """
        text = self.formatter.format_display(self.memory.value)
        if text == config.ERROR_DISPLAY:
            return
        buffer = self.buffer
        last = buffer.last
        if buffer.is_zero:
            buffer.load_number(text)
        elif last.kind in (TokenKind.OPERATOR, TokenKind.OPEN_PAREN):
            buffer.append(Token.number(text))
        elif text.startswith("-"):
            buffer.append(Token.operator("-"), Token.number(text[1:]))
        else:
            for char in text:
                if char == ".":
                    self.append_decimal_point()
                else:
                    self.append_digit(char)
        buffer.waiting_for_operand = False
