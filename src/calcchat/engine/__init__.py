"""Calculator operation engine."""

from calcchat.engine.operations import (
    OPERATIONS,
    OperandSpec,
    Operation,
    OperationEngine,
    format_number,
    validate_operand,
)

__all__ = [
    "OPERATIONS",
    "OperandSpec",
    "Operation",
    "OperationEngine",
    "format_number",
    "validate_operand",
]
