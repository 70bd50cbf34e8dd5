"""
Error types for RideCalc
Evaluation failures are recovered inside the calculator; only
SessionClosedError reaches the host, and only for misuse of a session.
"""


class CalculatorError(Exception):
    """Base class for calculator errors"""


class MalformedExpression(CalculatorError):
    """Token sequence or text that does not parse as arithmetic"""


class NonFiniteResult(CalculatorError):
    """Division by zero, overflow or any other non-finite outcome"""


class SessionClosedError(CalculatorError):
    """Action sent to a session that was already committed or cancelled"""
