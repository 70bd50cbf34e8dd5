"""
Tests for expression tokenizing and evaluation
"""
import pytest

from calculator_engine import engine, normalize_operator
from errors import MalformedExpression, NonFiniteResult
from expression_buffer import Token, TokenKind


@pytest.mark.parametrize("text, expected", [
    ("2 + 3 * 4", 14.0),
    ("(2 + 3) * 4", 20.0),
    ("10 - 2 * 3 + 4 / 2", 6.0),
    ("((2 + 3) * (4 - 1))", 15.0),
    ("15 / 4", 3.75),
    ("-5 + 3", -2.0),
    ("2 * -3", -6.0),
    ("-(2 + 3)", -5.0),
    ("1,000 + 1", 1001.0),
    ("5×2÷4−1", 1.5),
    ("5+5=", 10.0),
    (".5 + 5.", 5.5),
])
def test_evaluate_text(text, expected):
    assert engine.evaluate_text(text) == pytest.approx(expected)


@pytest.mark.parametrize("text", ["5/0", "abc", "(2+3", "2+", "1.2.3", "", "2)(", "3 4"])
def test_evaluate_text_failures_return_none(text):
    assert engine.evaluate_text(text) is None


def test_division_by_zero_raises_non_finite():
    with pytest.raises(NonFiniteResult):
        engine.evaluate(engine.tokenize("1/(2-2)"))


def test_overflow_raises_non_finite():
    big = "9" * 200
    with pytest.raises(NonFiniteResult):
        engine.evaluate(engine.tokenize(f"{big}*{big}"))


def test_deep_nesting_is_malformed_not_a_crash():
    text = "(" * 5000 + "1" + ")" * 5000
    with pytest.raises(MalformedExpression):
        engine.evaluate(engine.tokenize(text))


def test_invalid_character_raises_malformed():
    with pytest.raises(MalformedExpression):
        engine.tokenize("2^3")


def test_tokenize_kinds():
    tokens = engine.tokenize("12.5*(3-1)")
    assert [t.kind for t in tokens] == [
        TokenKind.NUMBER, TokenKind.OPERATOR, TokenKind.OPEN_PAREN,
        TokenKind.NUMBER, TokenKind.OPERATOR, TokenKind.NUMBER, TokenKind.CLOSE_PAREN,
    ]
    assert tokens[0].text == "12.5"


def test_signed_number_tokens_evaluate():
    tokens = [Token.number("3"), Token.operator("+"), Token.number("-5")]
    assert engine.evaluate(tokens) == -2.0


@pytest.mark.parametrize("text, expected", [
    ("5", False),
    ("-", False),
    ("123", False),
    ("5+", True),
    ("(5)", True),
    ("4×2", True),
])
def test_contains_math_expression(text, expected):
    assert engine.contains_math_expression(text) is expected


@pytest.mark.parametrize("text, expected", [
    ("5+5", True),
    ("(5+5)*2", True),
    ("+5", False),
    ("5*", False),
    ("(5+5", False),
    (")5(", False),
    ("5", False),
])
def test_is_valid_expression(text, expected):
    assert engine.is_valid_expression(text) is expected


def test_normalize_operator():
    assert normalize_operator("×") == "*"
    assert normalize_operator("÷") == "/"
    assert normalize_operator("−") == "-"
    with pytest.raises(ValueError):
        normalize_operator("x")
