"""Arithmetic operations behind the calculator tool server.

Each operation validates every operand before doing any arithmetic:
NaN, infinities, and non-numbers are rejected with
:class:`~calcchat.core.errors.InvalidInputError`.  The engine holds no
state between calls, so a single instance is safe to share across
concurrent requests.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass

from calcchat.core.errors import (
    DivisionByZeroError,
    InvalidInputError,
    NegativeSquareRootError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OperandSpec:
    """A named numeric parameter of an operation."""

    name: str
    description: str


class Operation(enum.Enum):
    """The fixed set of operations the calculator exposes.

    Each member carries its tool name, a human-readable description,
    its ordered operand list and the template used to render the
    expression in a result string.
    """

    ADD = (
        "add",
        "Add two numbers together",
        (OperandSpec("a", "First number"), OperandSpec("b", "Second number")),
        "{0} + {1}",
    )
    SUBTRACT = (
        "subtract",
        "Subtract second number from first number",
        (
            OperandSpec("a", "Number to subtract from"),
            OperandSpec("b", "Number to subtract"),
        ),
        "{0} - {1}",
    )
    MULTIPLY = (
        "multiply",
        "Multiply two numbers together",
        (OperandSpec("a", "First number"), OperandSpec("b", "Second number")),
        "{0} × {1}",
    )
    DIVIDE = (
        "divide",
        "Divide first number by second number",
        (OperandSpec("a", "Dividend"), OperandSpec("b", "Divisor")),
        "{0} ÷ {1}",
    )
    SQUARE = (
        "square",
        "Calculate the square of a number",
        (OperandSpec("value", "Number to square"),),
        "{0}²",
    )
    SQRT = (
        "sqrt",
        "Calculate the square root of a number",
        (OperandSpec("value", "Number to find square root of"),),
        "√{0}",
    )

    def __init__(
        self,
        tool_name: str,
        description: str,
        operands: tuple[OperandSpec, ...],
        template: str,
    ) -> None:
        self.tool_name = tool_name
        self.description = description
        self.operands = operands
        self.template = template

    @property
    def arity(self) -> int:
        return len(self.operands)

    def expression(self, *operands: float) -> str:
        """Render the operands as they appear left of ``=``."""
        return self.template.format(*(format_number(v) for v in operands))

    def render(self, operands: tuple[float, ...], result: float) -> str:
        """Render a successful calculation, e.g. ``"5 + 3 = 8"``."""
        return f"{self.expression(*operands)} = {format_number(result)}"


OPERATIONS: dict[str, Operation] = {op.tool_name: op for op in Operation}


def format_number(value: float) -> str:
    """Format a float for display, dropping ``.0`` on whole numbers."""
    value = float(value)
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def validate_operand(value: object) -> float:
    """Return *value* as a float, or raise InvalidInputError."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(f"Expected a number, got {type(value).__name__}")
    number = float(value)
    if math.isnan(number):
        raise InvalidInputError("NaN values are not allowed")
    if math.isinf(number):
        raise InvalidInputError("Infinite values are not allowed")
    return number


class OperationEngine:
    """Executes calculator operations on validated operands."""

    def _validate(self, op: Operation, *values: object) -> tuple[float, ...]:
        try:
            return tuple(validate_operand(v) for v in values)
        except InvalidInputError as e:
            logger.warning("Rejected %s operands %r: %s", op.tool_name, values, e)
            raise

    def add(self, a: float, b: float) -> float:
        a, b = self._validate(Operation.ADD, a, b)
        result = a + b
        logger.info("Adding %s + %s = %s", a, b, result)
        return result

    def subtract(self, a: float, b: float) -> float:
        a, b = self._validate(Operation.SUBTRACT, a, b)
        result = a - b
        logger.info("Subtracting %s - %s = %s", a, b, result)
        return result

    def multiply(self, a: float, b: float) -> float:
        a, b = self._validate(Operation.MULTIPLY, a, b)
        result = a * b
        logger.info("Multiplying %s * %s = %s", a, b, result)
        return result

    def divide(self, a: float, b: float) -> float:
        a, b = self._validate(Operation.DIVIDE, a, b)
        if b == 0.0:
            logger.warning("Division by zero attempted: %s / %s", a, b)
            raise DivisionByZeroError
        result = a / b
        logger.info("Dividing %s / %s = %s", a, b, result)
        return result

    def square(self, value: float) -> float:
        (value,) = self._validate(Operation.SQUARE, value)
        result = value * value
        logger.info("Squaring %s = %s", value, result)
        return result

    def sqrt(self, value: float) -> float:
        (value,) = self._validate(Operation.SQRT, value)
        if value < 0.0:
            logger.warning("Square root of negative number attempted: %s", value)
            raise NegativeSquareRootError(value)
        result = math.sqrt(value)
        logger.info("Square root of %s = %s", value, result)
        return result

    def execute(self, op: Operation, *operands: float) -> float:
        """Run *op* on *operands*.

        Raises:
            TypeError: If the operand count does not match the operation.
            OperationError: On invalid input or a domain failure.
        """
        if len(operands) != op.arity:
            msg = f"{op.tool_name} takes {op.arity} operand(s), got {len(operands)}"
            raise TypeError(msg)
        match op:
            case Operation.ADD:
                return self.add(*operands)
            case Operation.SUBTRACT:
                return self.subtract(*operands)
            case Operation.MULTIPLY:
                return self.multiply(*operands)
            case Operation.DIVIDE:
                return self.divide(*operands)
            case Operation.SQUARE:
                return self.square(*operands)
            case Operation.SQRT:
                return self.sqrt(*operands)
        raise ValueError(f"Unsupported operation: {op!r}")
