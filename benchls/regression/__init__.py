"""
Linear least squares for grouped benchmark samples.

Public API:
    estimate(sample) -> Model | None
    stats(model, sample) -> (r_squared, half_widths)
    fit_groups(samples) -> dict[str, GroupFit]

Example:
    >>> from benchls.regression import Sample, estimate, stats
    >>> s = Sample(width=2)
    >>> for n, t in [(10, 1008.0), (100, 8224.0), (1000, 152945.0)]:
    ...     s.append([n, 1.0], t)
    >>> model = estimate(s)
    >>> r2, half_widths = stats(model, s)
"""

from benchls.regression.design import Design, Sample
from benchls.regression.aggregate import Observation, aggregate
from benchls.regression.solution import FitStatistics, GroupFit, LeastSquaresParams, Model
from benchls.regression.solvers import (
    critical_value,
    estimate,
    fit_group,
    fit_groups,
    fit_statistics,
    r_squared,
    solve,
    stats,
)

__all__ = [
    "Design",
    "Sample",
    "Observation",
    "aggregate",
    "FitStatistics",
    "GroupFit",
    "LeastSquaresParams",
    "Model",
    "critical_value",
    "estimate",
    "fit_group",
    "fit_groups",
    "fit_statistics",
    "r_squared",
    "solve",
    "stats",
]
