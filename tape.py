"""
Calculation Tape for RideCalc
Append-only history of evaluated expressions, oldest first
"""
import uuid
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CalculationStep:
    expression: str
    result: float
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


class Tape:
    def __init__(self):
        self._steps = []

    def add_calculation(self, expression, result):
        """Add a calculation to the tape"""
        step = CalculationStep(expression, result)
        self._steps.append(step)
        return step

    @property
    def steps(self):
        """All steps in chronological order (a copy, so callers cannot reorder the tape)"""
        return tuple(self._steps)

    @property
    def last(self):
        return self._steps[-1] if self._steps else None

    def __len__(self):
        return len(self._steps)

    def __iter__(self):
        return iter(tuple(self._steps))

    def format_calculation_history(self, formatter):
        """Format the tape for display, one "expression = result" line per step"""
        formatted = []
        for step in self._steps:
            formatted.append(f"{step.expression} = {formatter.format_display(step.result)}")
        return formatted

    def as_dicts(self):
        return [
            {'id': step.id, 'expression': step.expression, 'result': step.result}
            for step in self._steps
        ]
