"""
Expression Buffer for RideCalc
Holds the live expression as a sequence of typed tokens plus the pending flags
"""
from dataclasses import dataclass
from enum import Enum

import config

OPERATORS = "+-*/"


class TokenKind(str, Enum):
    NUMBER = "number"
    OPERATOR = "operator"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str

    @classmethod
    def number(cls, text):
        return cls(TokenKind.NUMBER, text)

    @classmethod
    def operator(cls, op):
        return cls(TokenKind.OPERATOR, op)

    @property
    def is_number(self):
        return self.kind == TokenKind.NUMBER

    @property
    def is_operator(self):
        return self.kind == TokenKind.OPERATOR


OPEN = Token(TokenKind.OPEN_PAREN, "(")
CLOSE = Token(TokenKind.CLOSE_PAREN, ")")
ZERO = Token.number("0")


class ExpressionBuffer:
    """The in-progress expression.

    The token list is never empty: clearing it leaves a single "0".
    A NUMBER token carries its own sign, so "3+-5" is
    [3, +, -5] and never two operators in a row.
    """

    def __init__(self):
        self.tokens = [ZERO]
        self.waiting_for_operand = False
        self.pending_operation = None
        self.error = False

    @property
    def text(self):
        """Display string derived from the tokens"""
        if self.error:
            return config.ERROR_DISPLAY
        return "".join(token.text for token in self.tokens)

    def __str__(self):
        return self.text

    def __repr__(self):
        return f"ExpressionBuffer({self.text!r})"

    @property
    def is_zero(self):
        return not self.error and self.tokens == [ZERO]

    @property
    def last(self):
        return self.tokens[-1]

    @property
    def open_count(self):
        return sum(1 for token in self.tokens if token.kind == TokenKind.OPEN_PAREN)

    @property
    def close_count(self):
        return sum(1 for token in self.tokens if token.kind == TokenKind.CLOSE_PAREN)

    @property
    def has_operator(self):
        return any(token.is_operator for token in self.tokens)

    def append(self, *tokens):
        self.tokens.extend(tokens)

    def replace_last(self, token):
        self.tokens[-1] = token

    def pop(self):
        """Remove the last token, falling back to "0" when nothing is left"""
        token = self.tokens.pop()
        if not self.tokens:
            self.tokens = [ZERO]
        return token

    def load_number(self, text):
        """Replace the whole expression with one number"""
        self.tokens = [Token.number(text)]
        self.error = False

    def clear(self):
        self.tokens = [ZERO]
        self.waiting_for_operand = False
        self.pending_operation = None
        self.error = False

    def set_error(self):
        self.error = True
        self.pending_operation = None
        self.waiting_for_operand = True

    def snapshot(self):
        """Copy of the mutable state, used to restore a cancelled session"""
        return (list(self.tokens), self.waiting_for_operand, self.pending_operation, self.error)

    def restore(self, snapshot):
        tokens, waiting, pending, error = snapshot
        self.tokens = list(tokens)
        self.waiting_for_operand = waiting
        self.pending_operation = pending
        self.error = error
