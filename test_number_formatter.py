"""
Tests for display and commit formatting
"""
import math

import pytest

from number_formatter import NumberFormatter


@pytest.fixture
def formatter():
    return NumberFormatter(2)


@pytest.mark.parametrize("value, expected", [
    (14.0, "14"),
    (2.5, "2.5"),
    (1 / 3, "0.333333"),
    (-7.0, "-7"),
    (-0.0, "0"),
    (1e-9, "0"),
    (1234567.5, "1234567.5"),
    (1e20, "100000000000000000000"),
])
def test_format_display(formatter, value, expected):
    assert formatter.format_display(value) == expected


def test_display_precision_follows_larger_decimal_places():
    assert NumberFormatter(8).format_display(1 / 3) == "0.33333333"
    assert NumberFormatter(0).format_display(1 / 3) == "0.333333"


def test_non_finite_displays_error(formatter):
    assert formatter.format_display(math.inf) == "Error"
    assert formatter.format_display(math.nan) == "Error"


@pytest.mark.parametrize("value, expected", [
    (-7.0, 0.0),
    (12.3456, 12.35),
    (2.0, 2.0),
    (-0.001, 0.0),
    (math.nan, 0.0),
    (None, 0.0),
])
def test_commit_value(formatter, value, expected):
    assert formatter.commit_value(value) == expected


def test_commit_value_respects_decimal_places():
    assert NumberFormatter(3).commit_value(3.14159) == 3.142
    assert NumberFormatter(0).commit_value(2.6) == 3.0


@pytest.mark.parametrize("text, expected", [
    ("42", 42.0),
    ("-7", -7.0),
    ("5.", 5.0),
    (".5", 0.5),
    (" 3 ", 3.0),
    ("5+3", None),
    ("Error", None),
    ("inf", None),
    ("1e5", None),
    ("", None),
])
def test_parse_number(text, expected):
    assert NumberFormatter.parse_number(text) == expected


def test_negative_decimal_places_rejected():
    with pytest.raises(ValueError):
        NumberFormatter(-1)
