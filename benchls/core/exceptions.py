"""
Exception hierarchy for benchls.

All exceptions inherit from BenchlsError to allow catching any
library-specific error. Errors fall into three lifetimes:

    - configuration time (ConfigurationError, CompileError): fatal to a run
    - per observation (UnboundVariableError): skip the observation
    - per group (NumericalError, ConvergenceError): degrade that group's row

MalformedProgramError is the exception to all of these: it signals that the
compiler and evaluator disagree and must never be caught.
"""

from __future__ import annotations

from enum import Enum


class BenchlsError(Exception):
    """Base exception for all benchls errors."""
    pass


class ValidationError(BenchlsError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a row does not match the width of its sample or when
    arrays have inconsistent shapes.
    """
    pass


class ConfigurationError(ValidationError):
    """
    Run configuration is invalid.

    Raised for an unknown response metric, a pattern that is not a valid
    regular expression, or unusable command-line arguments.
    """
    pass


class CompileErrorKind(Enum):
    """Why a formula was rejected."""
    SYNTAX = "syntax"
    UNKNOWN_IDENTIFIER = "unknown-identifier"
    UNKNOWN_FUNCTION = "unknown-function"
    WRONG_NAMESPACE = "wrong-namespace"
    UNSUPPORTED_CONSTRUCT = "unsupported-construct"
    RESERVED_NAME_COLLISION = "reserved-name-collision"


class CompileError(ValidationError):
    """
    A formula could not be compiled into a Program.

    Attributes:
        kind: CompileErrorKind describing the rejection
        formula: The formula text being compiled
        detail: Offending identifier, function, or construct, if known
    """

    def __init__(
        self,
        message: str,
        kind: CompileErrorKind,
        formula: str | None = None,
        detail: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.formula = formula
        self.detail = detail


class EvaluationError(BenchlsError):
    """Base class for faults raised while executing a Program."""
    pass


class UnboundVariableError(EvaluationError):
    """
    Binding does not supply a variable the Program references.

    This is a caller contract violation. Aggregation recovers from it by
    skipping the observation.

    Attributes:
        name: The missing variable name
    """

    def __init__(self, message: str, name: str):
        super().__init__(message)
        self.name = name


class MalformedProgramError(EvaluationError):
    """
    Program left the evaluation stack in an impossible state.

    Indicates a compiler defect. Never recovered from.

    Attributes:
        program: Source text of the offending Program
        stack_depth: Depth of the stack when the fault was detected
    """

    def __init__(self, message: str, program: str, stack_depth: int):
        super().__init__(message)
        self.program = program
        self.stack_depth = stack_depth


class NumericalError(BenchlsError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when the design matrix is rank-deficient (estimation) or when
    X'X cannot be inverted (fit statistics).

    Attributes:
        matrix_name: Name/description of the problematic matrix
        rank: Numerical rank, if computed
        expected_rank: Expected rank (the number of explanatory terms)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.rank = rank
        self.expected_rank = expected_rank


class InsufficientDegreesOfFreedomError(NumericalError):
    """
    Too few observations to estimate the residual variance.

    Attributes:
        n_observations: Number of rows in the sample
        n_parameters: Number of fitted coefficients
    """

    def __init__(self, message: str, n_observations: int, n_parameters: int):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_parameters = n_parameters


class ConvergenceError(BenchlsError):
    """
    LAPACK factorization failed to converge.

    Attributes:
        reason: Message reported by the linear algebra routine
    """

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.reason = reason
