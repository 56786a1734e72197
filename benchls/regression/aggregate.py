"""
Sample aggregation.

Turns a stream of observations into one Sample per group by evaluating the
compiled explanatory and response Programs against each observation's
binding.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence
import warnings

from benchls.expr.program import Program
from benchls.expr.symbols import RESPONSE_NAME
from benchls.regression.design import Sample


@dataclass(frozen=True)
class Observation:
    """
    One measured benchmark run.

    Attributes:
        group: Group the row belongs to
        variables: Numeric values captured from the benchmark name
        response: Raw value of the selected metric, bound as RESPONSE_NAME
        label: Where the observation came from, for warnings
    """
    group: str
    variables: Mapping[str, float]
    response: float
    label: str = field(default="", compare=False)


def required_variables(x_programs: Sequence[Program], y_program: Program) -> frozenset[str]:
    """Every variable name read by any of the Programs."""
    names = set(y_program.variables)
    for p in x_programs:
        names |= p.variables
    return frozenset(names)


def aggregate(
    observations: Iterable[Observation],
    x_programs: Sequence[Program],
    y_program: Program,
) -> dict[str, Sample]:
    """
    Evaluate every observation and collect the rows per group.

    Each observation's binding is checked once against the variables the
    Programs need; an observation that lacks one is skipped with a
    UserWarning and contributes no row.

    Returns:
        Samples keyed by group, in order of each group's first row
    """
    required = required_variables(x_programs, y_program)
    width = len(x_programs)
    samples: dict[str, Sample] = {}

    for obs in observations:
        binding = dict(obs.variables)
        binding[RESPONSE_NAME] = obs.response

        missing = required.difference(binding)
        if missing:
            where = obs.label or obs.group
            warnings.warn(
                f"non numeric or missing value for {', '.join(sorted(missing))} "
                f"in {where!r}, skipping",
                UserWarning,
                stacklevel=2,
            )
            continue

        sample = samples.get(obs.group)
        if sample is None:
            sample = samples[obs.group] = Sample(width)
        sample.add_observation(x_programs, y_program, binding)

    return samples
