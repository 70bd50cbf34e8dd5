"""
Calculator Text Field for RideCalc
Free-text numeric field that accepts arithmetic like "45+23*2"
"""
import logging

import config
from calculator_engine import engine
from number_formatter import NumberFormatter
from session import CalculatorSession

logger = logging.getLogger(__name__)


class CalculatorTextField:
    def __init__(self, name, value=0.0, decimal_places=config.DEFAULT_DECIMAL_PLACES, integer=False):
        self.name = name
        self.decimal_places = 0 if integer else decimal_places
        self.integer = integer
        self.formatter = NumberFormatter(self.decimal_places)
        self.value = 0.0
        self.set_value(value)

    def set_value(self, value):
        """Store a value from the host or from a committed calculator session"""
        value = float(value)
        if self.integer:
            value = float(round(value))
        self.value = value

    @property
    def text(self):
        """Text shown in the entry; empty for zero so the placeholder shows"""
        if self.value > 0:
            return self.formatter.format_display(self.value)
        return ""

    def submit(self, text):
        """Apply typed text to the field.

        Returns True when the value was updated. Negative results and
        unparseable text leave the previous value in place.
        """
        clean = text.replace(",", "").strip()
        logger.debug("%s processing input: %r", self.name, clean)

        if not clean:
            self.set_value(0.0)
            return True

        if engine.contains_math_expression(clean):
            result = engine.evaluate_text(clean)
            if result is not None and result >= 0:
                self.set_value(result)
                return True
            logger.debug("%s: evaluation failed or was negative", self.name)

        number = NumberFormatter.parse_number(clean)
        if number is not None and number >= 0:
            self.set_value(number)
            return True

        logger.debug("%s: could not parse %r", self.name, clean)
        return False

    def open_calculator(self, tape=None, sink=None):
        """Start a calculator session that writes back into this field on Done.

        A host that guards its fields with a lock passes its own sink.
        """
        return CalculatorSession(
            initial_value=self.value,
            decimal_places=self.decimal_places,
            sink=sink or self.set_value,
            tape=tape,
        )
