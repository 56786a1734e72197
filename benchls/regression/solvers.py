"""
Least squares estimation and fit statistics.

Public API:
    estimate(sample) -> Model | None
    stats(model, sample) -> (r_squared, half_widths)
    fit_group(group, sample) -> GroupFit
    fit_groups(samples) -> dict[str, GroupFit]

estimate() turns solver failures into the "no model" sentinel (None);
stats() raises, because a missing interval must be distinguishable from a
missing model. fit_group() applies that policy for one group and never
raises for numerical reasons, so one bad group cannot affect the others.
"""

from __future__ import annotations

from typing import Literal, Mapping
import warnings

import numpy as np
from scipy import stats as sp_stats

from benchls.core.exceptions import (
    ConvergenceError,
    InsufficientDegreesOfFreedomError,
    NumericalError,
)
from benchls.core.linalg.inverse import gram_inverse
from benchls.core.result import Result
from benchls.regression.backends.cpu import CPUQRBackend
from benchls.regression.design import Design, Sample
from benchls.regression.solution import FitStatistics, GroupFit, LeastSquaresParams, Model


BackendChoice = Literal['auto', 'cpu', 'cpu_qr']

DEFAULT_CONF_LEVEL = 0.95


def solve(
    data: Sample | Design,
    *,
    backend: BackendChoice = 'auto',
) -> Result[LeastSquaresParams]:
    """
    Solve the least squares problem for one group.

    Args:
        data: The group's Sample, or a Design built from it
        backend: 'auto', 'cpu' or 'cpu_qr' (all the pivoted QR backend)

    Returns:
        Result envelope with LeastSquaresParams

    Raises:
        SingularMatrixError: If the design is rank-deficient
        NumericalError: If the design contains NaN or Inf
        ConvergenceError: If the factorization fails
    """
    design = _as_design(data)
    return _get_backend(backend).solve(design)


def estimate(data: Sample | Design, *, backend: BackendChoice = 'auto') -> Model | None:
    """
    Fit coefficients minimizing ||Xβ - y||².

    Returns:
        Coefficient vector in explanatory-term order, or None if the design
        is rank-deficient, non-finite, or the solver failed. Never a
        partially filled vector.
    """
    result, reason = _try_solve(_as_design(data), backend)
    if result is None:
        warnings.warn(f"no model: {reason}", UserWarning, stacklevel=2)
        return None
    return result.params.coefficients


def r_squared(model: Model, data: Sample | Design) -> float:
    """
    Coefficient of determination with uncentered total sum of squares.

        R² = 1 - Σ(ŷᵢ - yᵢ)² / Σyᵢ²

    Negative when the model does worse than ŷ = 0; NaN when both sums are
    zero; -Inf when only TSS is zero.
    """
    design = _as_design(data)
    residuals = design.X @ np.asarray(model, dtype=np.float64) - design.y
    rss = np.float64(residuals @ residuals)
    tss = np.float64(design.y @ design.y)
    with np.errstate(divide='ignore', invalid='ignore'):
        return float(1.0 - rss / tss)


def critical_value(df: int, conf_level: float = DEFAULT_CONF_LEVEL) -> float:
    """
    Two-tailed Student t critical value.

    critical_value(df) -> 1.959964 as df -> inf; 12.706205 at df = 1.

    Raises:
        InsufficientDegreesOfFreedomError: If df < 1
    """
    if df < 1:
        raise InsufficientDegreesOfFreedomError(
            f"t critical value requires df >= 1, got {df}",
            n_observations=df,
            n_parameters=0,
        )
    return float(sp_stats.t.ppf(1.0 - (1.0 - conf_level) / 2.0, df))


def fit_statistics(
    model: Model,
    data: Sample | Design,
    conf_level: float = DEFAULT_CONF_LEVEL,
) -> FitStatistics:
    """
    R² and per-coefficient confidence half-widths.

    half_width[i] = t(df) * sqrt(mse * (X'X)⁻¹[i, i]) with df = n - p and
    mse = RSS / df.

    Raises:
        InsufficientDegreesOfFreedomError: If n <= p
        SingularMatrixError: If X'X cannot be inverted
    """
    design = _as_design(data)
    n, p = design.n, design.p
    df = n - p
    if df <= 0:
        raise InsufficientDegreesOfFreedomError(
            f"{n} observations cannot give confidence intervals for {p} coefficients "
            f"(degrees of freedom = {df})",
            n_observations=n,
            n_parameters=p,
        )

    model = np.asarray(model, dtype=np.float64)
    residuals = design.X @ model - design.y
    rss = float(residuals @ residuals)
    mse = rss / df

    XtX_inv = gram_inverse(design.X)
    t_crit = critical_value(df, conf_level)
    half_widths = t_crit * np.sqrt(mse * np.diag(XtX_inv))

    return FitStatistics(
        r_squared=r_squared(model, design),
        half_widths=half_widths,
        df_residual=df,
        critical_value=t_crit,
        mse=mse,
    )


def stats(model: Model, data: Sample | Design) -> tuple[float, np.ndarray]:
    """
    (R², 95% half-widths) for a fitted model.

    Raises:
        InsufficientDegreesOfFreedomError: If n <= p
        SingularMatrixError: If X'X cannot be inverted
    """
    fs = fit_statistics(model, data)
    return fs.r_squared, fs.half_widths


def fit_group(
    group: str,
    sample: Sample,
    *,
    backend: BackendChoice = 'auto',
) -> GroupFit:
    """
    Estimate one group and compute its statistics.

    Estimation failure gives a GroupFit with model=None. Statistics failure
    keeps the model and R² but leaves half_widths as None. Both are
    reported with a UserWarning.
    """
    design = sample.to_design()
    result, reason = _try_solve(design, backend)
    if result is None:
        message = f"group {group!r}: no model: {reason}"
        warnings.warn(message, UserWarning, stacklevel=2)
        return GroupFit(
            group=group,
            rows=design.n,
            model=None,
            estimation_error=reason,
            warnings=(message,),
        )

    model = result.params.coefficients
    try:
        fs = fit_statistics(model, design)
    except NumericalError as e:
        message = f"group {group!r}: no confidence intervals: {e}"
        warnings.warn(message, UserWarning, stacklevel=2)
        return GroupFit(
            group=group,
            rows=design.n,
            model=model,
            r_squared=r_squared(model, design),
            statistics_error=str(e),
            warnings=result.warnings + (message,),
        )

    return GroupFit(
        group=group,
        rows=design.n,
        model=model,
        r_squared=fs.r_squared,
        half_widths=fs.half_widths,
        warnings=result.warnings,
    )


def fit_groups(
    samples: Mapping[str, Sample],
    *,
    backend: BackendChoice = 'auto',
) -> dict[str, GroupFit]:
    """Fit every group independently, preserving the order of samples."""
    return {
        group: fit_group(group, sample, backend=backend)
        for group, sample in samples.items()
    }


def _try_solve(
    design: Design,
    backend: BackendChoice,
) -> tuple[Result[LeastSquaresParams] | None, str | None]:
    """Solve, converting numerical failures into (None, reason)."""
    try:
        return _get_backend(backend).solve(design), None
    except (NumericalError, ConvergenceError) as e:
        return None, str(e)


def _as_design(data: Sample | Design) -> Design:
    if isinstance(data, Design):
        return data
    if isinstance(data, Sample):
        return data.to_design()
    raise TypeError(f"expected Sample or Design, got {type(data).__name__}")


def _get_backend(choice: BackendChoice) -> CPUQRBackend:
    """
    Select and instantiate the appropriate backend.

    Raises:
        ValueError: If unknown backend specified
    """
    if choice in ('auto', 'cpu', 'cpu_qr'):
        return CPUQRBackend()
    raise ValueError(f"Unknown backend: {choice!r}")
