"""
Number Formatter for RideCalc
Renders calculator values for the display and for the committed field value
"""
import math
import re

import config

_PLAIN_NUMBER = re.compile(r'^-?(\d+\.?\d*|\.\d+)$')


class NumberFormatter:
    def __init__(self, decimal_places=config.DEFAULT_DECIMAL_PLACES):
        if decimal_places < 0:
            raise ValueError(f"decimal_places must be >= 0, got {decimal_places}")
        self.decimal_places = decimal_places

    @property
    def display_fraction_digits(self):
        """Fraction digits shown while calculating (never fewer than the commit precision)"""
        return max(self.decimal_places, config.MIN_DISPLAY_FRACTION_DIGITS)

    def format_display(self, value):
        """Format a value for the calculator display.

        No grouping separators and no exponent notation; trailing zeros
        are trimmed so 14.0 shows as "14".
        """
        if not math.isfinite(value):
            return config.ERROR_DISPLAY
        text = f"{value:.{self.display_fraction_digits}f}"
        if '.' in text:
            text = text.rstrip('0').rstrip('.')
        if text in ("-0", ""):
            text = "0"
        return text

    def commit_value(self, value):
        """Round to the configured precision and clamp negatives to zero"""
        if value is None or not math.isfinite(value):
            return 0.0
        rounded = round(value, self.decimal_places)
        return rounded if rounded > 0 else 0.0

    @staticmethod
    def parse_number(text):
        """Parse text holding a single plain number, or return None"""
        if text is None:
            return None
        text = text.strip()
        if not _PLAIN_NUMBER.match(text):
            return None
        return float(text)
