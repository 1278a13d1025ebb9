"""
Calculator Module: basic arithmetic on two numbers.
"""

import logging
import math
import operator

from core.registry import CapabilityModule
from models.models import Tool

logger = logging.getLogger("hello.modules.calculator")

OPERATIONS = {
    "add": operator.add,
    "subtract": operator.sub,
    "multiply": operator.mul,
    "divide": operator.truediv,
}


def format_number(value) -> str:
    """Render a number the way a plain numeric-to-string conversion would.

    Integral floats drop their fractional part, so ``6 / 3`` renders as ``2``.
    """
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return repr(value)
    return str(value)


def calculate(operation: str, a, b):
    func = OPERATIONS.get(operation)
    if func is None:
        raise ValueError(f"Unknown operation: {operation}")
    if operation == "divide" and b == 0:
        raise ZeroDivisionError("Division by zero is not allowed")
    return func(a, b)


class CalculatorModule(CapabilityModule):
    module_id = "calculator"

    def register_tools(self):
        return [
            Tool(
                name="calculate",
                description="Performs basic arithmetic operations",
                parameters={
                    "operation": {
                        "type": "string",
                        "enum": list(OPERATIONS),
                        "description": "The operation to perform",
                    },
                    "a": {
                        "type": "number",
                        "description": "First number",
                    },
                    "b": {
                        "type": "number",
                        "description": "Second number",
                    },
                },
                handler=self.calculate,
                module_id=self.module_id,
            ),
        ]

    def calculate(self, operation: str, a, b) -> str:
        result = calculate(operation, a, b)
        logger.debug("calculate: %s %s %s -> %s", a, operation, b, result)
        return f"{format_number(a)} {operation} {format_number(b)} = {format_number(result)}"
