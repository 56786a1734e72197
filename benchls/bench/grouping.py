"""
Grouping benchmarks by a named-capture pattern.

The pattern finds the parameters in a benchmark name, e.g.

    /?(?P<N>\\d+)-\\d+$   on   BenchmarkSort1000-4

captures N = 1000, and everything the match did not cover
("BenchmarkSort") becomes the group name.
"""

from __future__ import annotations

import re
from typing import Iterator, Mapping, Sequence
import warnings

from benchls.bench.parse import Benchmark, Metric
from benchls.core.exceptions import ConfigurationError
from benchls.expr.program import Program
from benchls.expr.symbols import SymbolTable
from benchls.regression.aggregate import Observation, aggregate
from benchls.regression.design import Sample

DEFAULT_PATTERN = r"/?(?P<N>\d+)-\d+$"


class VariablePattern:
    """A compiled benchmark-name pattern and the variables it captures."""

    def __init__(self, pattern: str = DEFAULT_PATTERN):
        try:
            self._regex = re.compile(pattern)
        except re.error as e:
            raise ConfigurationError(f"invalid vars pattern {pattern!r}: {e}") from e
        by_index = sorted(self._regex.groupindex.items(), key=lambda kv: kv[1])
        self._names = tuple(name for name, _ in by_index)

    @property
    def pattern(self) -> str:
        return self._regex.pattern

    @property
    def names(self) -> tuple[str, ...]:
        """Named capture groups, in pattern order."""
        return self._names

    def symbols(self) -> SymbolTable:
        """
        Explanatory symbol table for this pattern.

        Raises:
            CompileError: reserved-name-collision if a group is named Y
        """
        return SymbolTable.from_names(self._names)

    def split(self, name: str) -> tuple[str, dict[str, float]] | None:
        """
        Split a benchmark name into (group, numeric captures).

        Captures that are not numbers, or did not take part in the match,
        are left out of the mapping.

        Returns:
            None if the pattern does not match name
        """
        match = self._regex.search(name)
        if match is None:
            return None
        group = name[:match.start()] + name[match.end():]

        values: dict[str, float] = {}
        for var in self._names:
            text = match.group(var)
            if text is None:
                continue
            try:
                values[var] = float(text)
            except ValueError:
                continue
        return group, values

    def __repr__(self) -> str:
        return f"VariablePattern({self.pattern!r})"


def observations(
    bench_set: Mapping[str, Sequence[Benchmark]],
    pattern: VariablePattern,
    metric: Metric,
) -> Iterator[Observation]:
    """
    One Observation per benchmark run whose name matches pattern.

    Runs that did not report metric are skipped with a UserWarning.
    """
    for name, runs in bench_set.items():
        split = pattern.split(name)
        if split is None:
            continue
        group, values = split
        for run in runs:
            response = metric.value_of(run)
            if response is None:
                warnings.warn(
                    f"{name!r} does not report {metric.value}, skipping",
                    UserWarning,
                    stacklevel=2,
                )
                continue
            yield Observation(group=group, variables=values, response=response, label=name)


def sample_groups(
    bench_set: Mapping[str, Sequence[Benchmark]],
    pattern: VariablePattern,
    x_programs: Sequence[Program],
    y_program: Program,
    metric: Metric = Metric.NS_PER_OP,
) -> dict[str, Sample]:
    """Group matching benchmarks and build each group's Sample."""
    return aggregate(observations(bench_set, pattern, metric), x_programs, y_program)
