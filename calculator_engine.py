"""
Calculator Engine for RideCalc
Tokenizes and evaluates arithmetic expressions without eval()
"""
import logging
import math
import operator

from errors import MalformedExpression, NonFiniteResult
from expression_buffer import CLOSE, OPEN, OPERATORS, Token, TokenKind

logger = logging.getLogger(__name__)

# Display glyphs the keypad and free-text fields may contain
GLYPHS = {"×": "*", "÷": "/", "−": "-"}
MATH_CHARACTERS = set("+-*/()=×÷−")

BINARY = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def normalize_operator(op):
    """Map a display glyph to its ASCII operator"""
    op = GLYPHS.get(op, op)
    if op not in tuple(OPERATORS):
        raise ValueError(f"Unknown operator: {op!r}")
    return op


class _Parser:
    """Recursive-descent parser over a token list.

    expr   : term (('+' | '-') term)*
    term   : factor (('*' | '/') factor)*
    factor : '-' factor | NUMBER | '(' expr ')'
    """

    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def eat(self, kind):
        token = self.peek()
        if token is None or token.kind != kind:
            raise MalformedExpression(f"Expected {kind.value} at position {self.pos}, got {token!r}")
        self.pos += 1
        return token

    def parse(self):
        if not self.tokens:
            raise MalformedExpression("Empty expression")
        value = self.expr()
        if self.peek() is not None:
            raise MalformedExpression(f"Unexpected {self.peek()!r} at position {self.pos}")
        return value

    def expr(self):
        result = self.term()
        while self._at_operator("+-"):
            op = self.eat(TokenKind.OPERATOR).text
            result = BINARY[op](result, self.term())
        return result

    def term(self):
        result = self.factor()
        while self._at_operator("*/"):
            op = self.eat(TokenKind.OPERATOR).text
            rhs = self.factor()
            if op == "/" and rhs == 0:
                raise NonFiniteResult("Division by zero")
            result = BINARY[op](result, rhs)
        return result

    def factor(self):
        token = self.peek()
        if token is None:
            raise MalformedExpression("Expression ends where a number was expected")
        if token.is_operator and token.text == "-":
            self.pos += 1
            return -self.factor()
        if token.is_number:
            self.pos += 1
            try:
                return float(token.text)
            except ValueError:
                raise MalformedExpression(f"Bad number: {token.text!r}") from None
        if token.kind == TokenKind.OPEN_PAREN:
            self.eat(TokenKind.OPEN_PAREN)
            result = self.expr()
            self.eat(TokenKind.CLOSE_PAREN)
            return result
        raise MalformedExpression(f"Unexpected {token!r} at position {self.pos}")

    def _at_operator(self, ops):
        token = self.peek()
        return token is not None and token.is_operator and token.text in ops


class CalculatorEngine:
    def sanitize(self, text):
        """Normalise free text: glyphs to ASCII, no separators, no trailing '='"""
        cleaned = text.strip()
        for glyph, ascii_op in GLYPHS.items():
            cleaned = cleaned.replace(glyph, ascii_op)
        cleaned = cleaned.replace(",", "")
        if cleaned.endswith("="):
            cleaned = cleaned[:-1]
        return cleaned

    def tokenize(self, text):
        """Split free text into tokens. A leading '-' stays an operator token."""
        text = self.sanitize(text)
        tokens = []
        i = 0
        while i < len(text):
            char = text[i]
            if char.isspace():
                i += 1
            elif char.isdigit() or char == ".":
                start = i
                while i < len(text) and (text[i].isdigit() or text[i] == "."):
                    i += 1
                run = text[start:i]
                if run.count(".") > 1 or run == ".":
                    raise MalformedExpression(f"Bad number: {run!r}")
                tokens.append(Token.number(run))
            elif char in OPERATORS:
                tokens.append(Token.operator(char))
                i += 1
            elif char == "(":
                tokens.append(OPEN)
                i += 1
            elif char == ")":
                tokens.append(CLOSE)
                i += 1
            else:
                raise MalformedExpression(f"Invalid character {char!r}")
        return tokens

    def evaluate(self, tokens):
        """Evaluate a token sequence, raising on malformed or non-finite input"""
        try:
            result = _Parser(list(tokens)).parse()
        except OverflowError:
            raise NonFiniteResult("Overflow") from None
        except RecursionError:
            raise MalformedExpression("Expression nested too deeply") from None
        if not math.isfinite(result):
            raise NonFiniteResult(f"Non-finite result: {result}")
        logger.debug("Evaluated %s = %r", "".join(t.text for t in tokens), result)
        return result

    def evaluate_text(self, text):
        """Evaluate free text; None when it does not evaluate to a finite number"""
        logger.debug("Evaluating expression: %r", text)
        try:
            return self.evaluate(self.tokenize(text))
        except (MalformedExpression, NonFiniteResult) as e:
            logger.debug("Expression %r failed: %s", text, e)
            return None

    def contains_math_expression(self, text):
        """Check if the text holds any arithmetic operator or parenthesis"""
        return len(text) > 1 and any(char in MATH_CHARACTERS for char in text)

    def is_valid_expression(self, text):
        """Cheap structural check: no dangling operators, balanced parentheses"""
        if not self.contains_math_expression(text):
            return False
        trimmed = self.sanitize(text)
        if not trimmed:
            return False
        if trimmed[0] in "+*/" or trimmed[-1] in "+*/":
            return False
        depth = 0
        for char in trimmed:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth < 0:
                    return False
        return depth == 0


engine = CalculatorEngine()
