"""
Run configuration.

FitConfig holds the user's choices (pattern, transforms, response metric,
output format). compile() turns them into the objects the pipeline runs
on and is where every configuration-time error surfaces.
"""

from __future__ import annotations

from dataclasses import dataclass

from benchls.bench.grouping import DEFAULT_PATTERN, VariablePattern
from benchls.bench.parse import Metric
from benchls.expr.compiler import compile_expr, compile_list
from benchls.expr.program import Program

DEFAULT_X_TRANSFORM = "N, 1.0"
DEFAULT_Y_TRANSFORM = "Y"
DEFAULT_RESPONSE = Metric.NS_PER_OP


@dataclass(frozen=True)
class CompiledFormulas:
    """Pattern and Programs ready for aggregation."""
    pattern: VariablePattern
    x_programs: tuple[Program, ...]
    y_program: Program


@dataclass(frozen=True)
class FitConfig:
    """
    Configuration for one benchls run.

    Attributes:
        pattern: Regex with named groups locating variables in benchmark names
        x_transform: Comma-separated explanatory formulas
        y_transform: Response formula; Y is the raw metric
        response: Which benchmark metric is bound to Y
        html: Render the report as an HTML table
    """
    pattern: str = DEFAULT_PATTERN
    x_transform: str = DEFAULT_X_TRANSFORM
    y_transform: str = DEFAULT_Y_TRANSFORM
    response: Metric = DEFAULT_RESPONSE
    html: bool = False

    @classmethod
    def from_options(
        cls,
        *,
        pattern: str = DEFAULT_PATTERN,
        x_transform: str = DEFAULT_X_TRANSFORM,
        y_transform: str = DEFAULT_Y_TRANSFORM,
        response: str = DEFAULT_RESPONSE.value,
        html: bool = False,
    ) -> FitConfig:
        """
        Build from string options, as given on the command line.

        Raises:
            ConfigurationError: If response is not a known metric
        """
        return cls(
            pattern=pattern,
            x_transform=x_transform,
            y_transform=y_transform,
            response=Metric.parse(response),
            html=html,
        )

    def compile(self) -> CompiledFormulas:
        """
        Compile the pattern and both transforms.

        The explanatory terms see only the pattern's variables; the
        response additionally sees Y.

        Raises:
            ConfigurationError: If the pattern is not a valid regex
            CompileError: If a transform is invalid or the pattern names Y
        """
        pattern = VariablePattern(self.pattern)
        symbols = pattern.symbols()
        x_programs = compile_list(self.x_transform, symbols)
        y_program = compile_expr(self.y_transform, symbols.with_response())
        return CompiledFormulas(pattern=pattern, x_programs=x_programs, y_program=y_program)
