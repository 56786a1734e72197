"""
Benchmark front end: parsing `go test -bench` output and grouping runs by
the parameters embedded in benchmark names.
"""

from benchls.bench.parse import Benchmark, Metric, parse_line, parse_set
from benchls.bench.grouping import (
    DEFAULT_PATTERN,
    VariablePattern,
    observations,
    sample_groups,
)

__all__ = [
    "Benchmark",
    "Metric",
    "parse_line",
    "parse_set",
    "DEFAULT_PATTERN",
    "VariablePattern",
    "observations",
    "sample_groups",
]
