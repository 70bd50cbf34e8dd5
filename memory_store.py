"""
Memory Store for RideCalc
Single accumulator behind the M+, M-, MR and MC keys
"""
import logging

logger = logging.getLogger(__name__)


class MemoryStore:
    def __init__(self, value_source):
        """value_source: callable returning the current buffer value as a float"""
        self.value_source = value_source
        self.value = 0.0

    def add(self):
        """Add the current value to memory (M+)"""
        amount = self.value_source()
        self.value += amount
        logger.debug("M+ %r -> memory %r", amount, self.value)
        return self.value

    def subtract(self):
        """Subtract the current value from memory (M-)"""
        amount = self.value_source()
        self.value -= amount
        logger.debug("M- %r -> memory %r", amount, self.value)
        return self.value

    def clear(self):
        """Clear memory (MC)"""
        self.value = 0.0
