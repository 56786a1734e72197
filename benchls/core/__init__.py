"""
Core infrastructure for benchls.

Shared abstractions used by the expression compiler, the regression
engine, and the benchmark front end.

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    timing: Section timer for backends
    linalg: QR least squares and Gram inversion
"""

from benchls.core.result import Result
from benchls.core.exceptions import (
    BenchlsError,
    ValidationError,
    DimensionError,
    ConfigurationError,
    CompileError,
    CompileErrorKind,
    EvaluationError,
    UnboundVariableError,
    MalformedProgramError,
    NumericalError,
    SingularMatrixError,
    InsufficientDegreesOfFreedomError,
    ConvergenceError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "BenchlsError",
    "ValidationError",
    "DimensionError",
    "ConfigurationError",
    "CompileError",
    "CompileErrorKind",
    "EvaluationError",
    "UnboundVariableError",
    "MalformedProgramError",
    "NumericalError",
    "SingularMatrixError",
    "InsufficientDegreesOfFreedomError",
    "ConvergenceError",
]
