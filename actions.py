"""
Calculator Actions for RideCalc
The closed set of key presses the calculator understands
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from calculator_engine import normalize_operator


class ActionKind(str, Enum):
    DIGIT = "digit"
    DECIMAL_POINT = "decimal_point"
    OPERATOR = "operator"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    BACKSPACE = "backspace"
    ALL_CLEAR = "all_clear"
    TOGGLE_SIGN = "toggle_sign"
    PERCENT = "percent"
    EQUALS = "equals"
    MEMORY_ADD = "memory_add"
    MEMORY_SUBTRACT = "memory_subtract"
    MEMORY_RECALL = "memory_recall"
    MEMORY_CLEAR = "memory_clear"


# Presses that produce an "action performed" notification for tactile feedback
FEEDBACK_KINDS = frozenset({
    ActionKind.OPERATOR,
    ActionKind.OPEN_PAREN,
    ActionKind.CLOSE_PAREN,
    ActionKind.TOGGLE_SIGN,
    ActionKind.PERCENT,
    ActionKind.MEMORY_ADD,
    ActionKind.MEMORY_SUBTRACT,
    ActionKind.MEMORY_RECALL,
    ActionKind.MEMORY_CLEAR,
})

# Still processed while the display shows "Error"
ERROR_RECOVERY_KINDS = frozenset({
    ActionKind.BACKSPACE,
    ActionKind.ALL_CLEAR,
    ActionKind.MEMORY_ADD,
    ActionKind.MEMORY_SUBTRACT,
    ActionKind.MEMORY_CLEAR,
})

# Button labels and keyboard keys (tkinter keysyms included)
KEY_MAP = {
    ".": ActionKind.DECIMAL_POINT,
    "period": ActionKind.DECIMAL_POINT,
    "(": ActionKind.OPEN_PAREN,
    ")": ActionKind.CLOSE_PAREN,
    "⌫": ActionKind.BACKSPACE,
    "BackSpace": ActionKind.BACKSPACE,
    "CE": ActionKind.BACKSPACE,
    "AC": ActionKind.ALL_CLEAR,
    "C": ActionKind.ALL_CLEAR,
    "Escape": ActionKind.ALL_CLEAR,
    "±": ActionKind.TOGGLE_SIGN,
    "+/-": ActionKind.TOGGLE_SIGN,
    "%": ActionKind.PERCENT,
    "=": ActionKind.EQUALS,
    "Return": ActionKind.EQUALS,
    "\r": ActionKind.EQUALS,
    "\n": ActionKind.EQUALS,
    "M+": ActionKind.MEMORY_ADD,
    "M-": ActionKind.MEMORY_SUBTRACT,
    "MR": ActionKind.MEMORY_RECALL,
    "MC": ActionKind.MEMORY_CLEAR,
}


@dataclass(frozen=True)
class Action:
    kind: ActionKind
    value: Optional[str] = None

    def __post_init__(self):
        if self.kind == ActionKind.DIGIT:
            if not isinstance(self.value, str) or len(self.value) != 1 or self.value not in "0123456789":
                raise ValueError(f"Digit action needs a single digit, got {self.value!r}")
        elif self.kind == ActionKind.OPERATOR:
            # frozen dataclass: normalise through object.__setattr__
            object.__setattr__(self, "value", normalize_operator(self.value))
        elif self.value is not None:
            raise ValueError(f"{self.kind.value} action takes no value")

    @property
    def wants_feedback(self):
        return self.kind in FEEDBACK_KINDS

    @classmethod
    def digit(cls, d):
        return cls(ActionKind.DIGIT, str(d))

    @classmethod
    def operator(cls, op):
        return cls(ActionKind.OPERATOR, op)

    @classmethod
    def from_key(cls, key):
        """Translate a button label or key name into an action"""
        if len(key) == 1 and key in "0123456789":
            return cls.digit(key)
        if key in ("+", "-", "*", "/", "×", "÷", "−", "plus", "minus", "asterisk", "slash"):
            keysyms = {"plus": "+", "minus": "-", "asterisk": "*", "slash": "/"}
            return cls.operator(keysyms.get(key, key))
        try:
            return cls(KEY_MAP[key])
        except KeyError:
            raise ValueError(f"Unknown calculator key: {key!r}") from None
