"""
benchls: least squares models for Go benchmark results.

Fits each group of `go test -bench` results to user-supplied explanatory
terms and reports coefficients with 95% confidence half-widths.

Submodules:
    expr: Formula compiler and stack-machine Programs
    regression: Aggregation, least squares and fit statistics
    bench: Benchmark output parsing and name-pattern grouping
    report: Text and HTML coefficient tables
"""

__version__ = "0.1.0"

from benchls import expr
from benchls import regression
from benchls import bench
from benchls import report

__all__ = [
    "__version__",
    "expr",
    "regression",
    "bench",
    "report",
]
