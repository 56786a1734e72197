"""
Regression solution types.

Contains the backend parameter payload, the fit statistics, and the
per-group outcome handed to the report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any
import numpy as np
from numpy.typing import NDArray

# A fitted coefficient vector, in explanatory-term order.
Model = NDArray[np.floating[Any]]


@dataclass(frozen=True)
class LeastSquaresParams:
    """
    Parameter payload for a least squares solve.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    rank: int
    df_residual: int


@dataclass(frozen=True)
class FitStatistics:
    """
    Goodness of fit and coefficient uncertainty for one group.

    Attributes:
        r_squared: 1 - RSS/TSS with uncentered TSS = sum(y**2)
        half_widths: 95% confidence half-width per coefficient
        df_residual: rows - width
        critical_value: Two-tailed 95% Student t quantile at df_residual
        mse: RSS / df_residual
    """
    r_squared: float
    half_widths: NDArray[np.floating[Any]]
    df_residual: int
    critical_value: float
    mse: float

    def conf_int(self, model: Model) -> NDArray[np.floating[Any]]:
        """(p, 2) array of [lower, upper] bounds around model."""
        return np.column_stack([model - self.half_widths, model + self.half_widths])


@dataclass(frozen=True)
class GroupFit:
    """
    Everything the report needs about one group.

    model is None when estimation failed ("no model"); half_widths is None
    when the model exists but its statistics could not be computed. The
    failure text explains which step failed.
    """
    group: str
    rows: int
    model: Model | None
    r_squared: float | None = None
    half_widths: NDArray[np.floating[Any]] | None = None
    estimation_error: str | None = None
    statistics_error: str | None = None
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_model(self) -> bool:
        return self.model is not None

    @property
    def has_intervals(self) -> bool:
        return self.half_widths is not None

    def __repr__(self) -> str:
        if self.model is None:
            return f"GroupFit(group={self.group!r}, rows={self.rows}, model=None)"
        return (
            f"GroupFit(group={self.group!r}, rows={self.rows}, "
            f"model={np.array2string(self.model, precision=4)}, r_squared={self.r_squared})"
        )
