"""
Regression samples and designs.

A Sample accumulates one group's rows while benchmarks are being read: a
flat row-major explanatory buffer and a response buffer. Once aggregation
is finished the Sample is frozen into a Design, which holds the numpy X
and y the backends solve against.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Sequence
import numpy as np
from numpy.typing import ArrayLike, NDArray

from benchls.core.exceptions import DimensionError
from benchls.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_width,
)
from benchls.expr.program import Program


class Sample:
    """
    Mutable per-group accumulator of (explanatory row, response) pairs.

    Invariants:
        - len(x) == rows * width
        - len(y) == rows
        - a row is appended whole or not at all
    """

    def __init__(self, width: int):
        check_width(width, 'Sample')
        self._width = int(width)
        self._x: list[float] = []
        self._y: list[float] = []

    @property
    def width(self) -> int:
        """Number of explanatory terms per row."""
        return self._width

    @property
    def rows(self) -> int:
        """Number of observations appended so far."""
        return len(self._y)

    @property
    def x(self) -> tuple[float, ...]:
        """Flat row-major explanatory values."""
        return tuple(self._x)

    @property
    def y(self) -> tuple[float, ...]:
        """Response values, one per row."""
        return tuple(self._y)

    def append(self, x_row: Sequence[float], y: float) -> None:
        """
        Append one observation.

        Raises:
            DimensionError: If x_row does not have exactly width values
        """
        if len(x_row) != self._width:
            raise DimensionError(
                f"Sample row has {len(x_row)} explanatory values, expected {self._width}"
            )
        self._x.extend(float(v) for v in x_row)
        self._y.append(float(y))

    def add_observation(
        self,
        x_programs: Sequence[Program],
        y_program: Program,
        binding: Mapping[str, float],
    ) -> None:
        """
        Evaluate every explanatory Program and the response Program against
        binding, then append the resulting row.

        Raises:
            UnboundVariableError: If binding lacks a referenced variable.
                Nothing is appended in that case.
        """
        x_row = [p.evaluate(binding) for p in x_programs]
        y = y_program.evaluate(binding)
        self.append(x_row, y)

    def to_design(self) -> Design:
        """Freeze the accumulated rows into a Design."""
        X = np.array(self._x, dtype=np.float64).reshape(self.rows, self._width)
        y = np.array(self._y, dtype=np.float64)
        return Design._build(X, y)

    def __repr__(self) -> str:
        return f"Sample(rows={self.rows}, width={self.width})"


@dataclass(frozen=True)
class Design:
    """
    Regression design matrix specification.

    Immutable after construction.

    Construction:
        Design.from_sample(sample)   # rows in append order
        Design.from_arrays(X, y)     # direct from arrays
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int

    @classmethod
    def from_sample(cls, sample: Sample) -> Design:
        return sample.to_design()

    @classmethod
    def from_arrays(cls, X: ArrayLike, y: ArrayLike) -> Design:
        """Build Design directly from arrays."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        return cls._build(X_arr, y_arr)

    @classmethod
    def _build(cls, X: NDArray, y: NDArray) -> Design:
        """Internal builder with validation."""
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        if p < 1:
            raise DimensionError("X: design has no explanatory columns")

        return cls(_X=X, _y=y, _n=n, _p=p)

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of explanatory terms."""
        return self._p
