"""
Reader for `go test -bench` output.

A benchmark line looks like:

    BenchmarkSort1000-4    10000    152945 ns/op    8224 B/op    2 allocs/op

i.e. the name, the iteration count, then value/unit pairs. Lines that are
not benchmark lines (PASS, ok, goos: ...) are ignored, as are unknown
units.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import IO, Iterable

from benchls.core.exceptions import ConfigurationError

_NS_PER_OP = "ns/op"
_MB_PER_S = "MB/s"
_BYTES_PER_OP = "B/op"
_ALLOCS_PER_OP = "allocs/op"


@dataclass(frozen=True)
class Benchmark:
    """
    One run of one benchmark.

    A metric the run did not report is None.
    """
    name: str
    n: int
    ns_per_op: float | None = None
    alloced_bytes_per_op: int | None = None
    allocs_per_op: int | None = None
    mb_per_s: float | None = None


class Metric(Enum):
    """Benchmark fields usable as the response variable."""
    NS_PER_OP = "NsPerOp"
    ALLOCED_BYTES_PER_OP = "AllocedBytesPerOp"
    ALLOCS_PER_OP = "AllocsPerOp"
    MB_PER_S = "MBPerS"

    @classmethod
    def parse(cls, name: str) -> Metric:
        """
        Look up a metric by its flag spelling.

        Raises:
            ConfigurationError: If name is not one of the known metrics
        """
        for metric in cls:
            if metric.value == name:
                return metric
        valid = ", ".join(f'"{m.value}"' for m in cls)
        raise ConfigurationError(f"invalid response: {name!r} (expected one of {valid})")

    def value_of(self, bench: Benchmark) -> float | None:
        """The run's measurement for this metric, or None if not reported."""
        if self is Metric.NS_PER_OP:
            value = bench.ns_per_op
        elif self is Metric.ALLOCED_BYTES_PER_OP:
            value = bench.alloced_bytes_per_op
        elif self is Metric.ALLOCS_PER_OP:
            value = bench.allocs_per_op
        else:
            value = bench.mb_per_s
        return None if value is None else float(value)


def parse_line(line: str) -> Benchmark | None:
    """
    Parse a single benchmark line.

    Returns:
        Benchmark, or None if line is not a benchmark result line
    """
    fields = line.split()
    if len(fields) < 4 or not fields[0].startswith("Benchmark"):
        return None
    try:
        n = int(fields[1])
    except ValueError:
        return None

    measured: dict[str, float | int] = {}
    for value, unit in zip(fields[2::2], fields[3::2]):
        try:
            if unit == _NS_PER_OP:
                measured['ns_per_op'] = float(value)
            elif unit == _MB_PER_S:
                measured['mb_per_s'] = float(value)
            elif unit == _BYTES_PER_OP:
                measured['alloced_bytes_per_op'] = _parse_uint(value)
            elif unit == _ALLOCS_PER_OP:
                measured['allocs_per_op'] = _parse_uint(value)
        except ValueError:
            continue

    return Benchmark(name=fields[0], n=n, **measured)


def parse_set(lines: Iterable[str] | IO[str]) -> dict[str, list[Benchmark]]:
    """
    Parse benchmark output into runs grouped by benchmark name.

    Names keep the order of their first appearance; runs keep input order.
    """
    bench_set: dict[str, list[Benchmark]] = {}
    for line in lines:
        bench = parse_line(line)
        if bench is None:
            continue
        bench_set.setdefault(bench.name, []).append(bench)
    return bench_set


def _parse_uint(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"negative count: {text}")
    return value
