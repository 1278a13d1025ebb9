import math

import pytest

from modules.calculator import CalculatorModule, calculate, format_number


@pytest.fixture
def calculator():
    return CalculatorModule()


@pytest.mark.parametrize(
    "operation,a,b,expected",
    [
        ("add", 2, 3, "2 add 3 = 5"),
        ("subtract", 5, 8, "5 subtract 8 = -3"),
        ("multiply", 2.5, 4, "2.5 multiply 4 = 10"),
        ("divide", 6, 3, "6 divide 3 = 2"),
        ("divide", 1, 3, "1 divide 3 = 0.3333333333333333"),
        ("add", 0.1, 0.2, "0.1 add 0.2 = 0.30000000000000004"),
        ("divide", -7, 2, "-7 divide 2 = -3.5"),
    ],
)
def test_calculate_renders_result(calculator, operation, a, b, expected):
    assert calculator.calculate(operation, a, b) == expected


def test_divide_by_zero_is_arithmetic_error():
    with pytest.raises(ArithmeticError, match="Division by zero is not allowed"):
        calculate("divide", 1, 0)
    with pytest.raises(ZeroDivisionError):
        calculate("divide", 0.0, 0.0)


def test_unknown_operation():
    with pytest.raises(ValueError, match="Unknown operation: power"):
        calculate("power", 2, 3)


def test_operation_names_are_case_sensitive():
    with pytest.raises(ValueError, match="Unknown operation: Add"):
        calculate("Add", 2, 3)


def test_format_number_special_values():
    assert format_number(math.inf) == "Infinity"
    assert format_number(-math.inf) == "-Infinity"
    assert format_number(math.nan) == "NaN"
    assert format_number(-0.5) == "-0.5"
    assert format_number(42) == "42"
    assert format_number(1e300) == "1e+300"


def test_calculate_tool_schema(calculator):
    (tool,) = calculator.register_tools()
    assert tool.name == "calculate"
    assert tool.required == ["operation", "a", "b"]
