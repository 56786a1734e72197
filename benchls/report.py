"""
Coefficient table rendering.

Layout adapted from benchstat: one heading row naming the response and
each explanatory term, then one row per group with every coefficient and
its 95% half-width, and R² last.

    group \\ Y ~         N                  1.0             R^2
    BenchmarkSort       4.28e+02±1.5e+01   -1e+07±2.6e+07  0.9993...
"""

from __future__ import annotations

import html
import math
from typing import IO, Mapping, Sequence

import numpy as np

from benchls.expr.program import Program
from benchls.regression.solution import GroupFit

PLACEHOLDER = "~"

# Beyond float64 precision there is nothing left to show.
_MAX_DIGITS = 16

# %g switches to exponent form outside [1e-4, 1e6)
_MIN_PLAIN_EXPONENT = -4
_MAX_PLAIN_EXPONENT = 6

_HTML_STYLE = (
    "<style>.benchls tbody td:nth-child(1n+2) "
    "{ text-align: right; padding: 0em 1em; }</style>"
)


def format_general(value: float) -> str:
    """
    Shortest round-tripping digits in %g layout.

    Exponent form below 1e-4 and from 1e6 up, plain decimal otherwise:
    1.0 -> '1', -1234567.0 -> '-1.234567e+06', NaN -> 'NaN'.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    scientific = np.format_float_scientific(value, unique=True, trim='-', exp_digits=2)
    exponent = int(scientific.rsplit("e", 1)[1])
    if exponent < _MIN_PLAIN_EXPONENT or exponent >= _MAX_PLAIN_EXPONENT:
        return scientific
    return np.format_float_positional(value, unique=True, trim='-')


def format_coefficient(coef: float, half_width: float | None) -> str:
    """
    'coef±half_width', with coef printed only to the digits the interval
    supports.

    A coefficient that is not significant keeps one decimal
    ('1.0e+05±3.9e+06'); 22.54 with half-width 0.064 gets three
    ('2.254e+01±6.4e-02').
    """
    if half_width is None:
        return format_general(coef)

    with np.errstate(divide='ignore', invalid='ignore'):
        log_diff = float(np.log10(np.abs(coef)) - np.log10(half_width) + 1)

    # NaN compares false and keeps the default
    digits = 1
    if log_diff > _MAX_DIGITS:
        digits = _MAX_DIGITS
    elif log_diff > 0:
        digits = int(log_diff)
    return f"{coef:.{digits}e}±{half_width:.1e}"


def build_table(
    x_programs: Sequence[Program],
    y_program: Program,
    fits: Mapping[str, GroupFit],
) -> list[list[str]]:
    """
    Table cells, heading row first.

    A group without a model gets PLACEHOLDER in every numeric column.
    """
    heading = [f"group \\ {y_program} ~"]
    heading.extend(str(p) for p in x_programs)
    heading.append("R^2")
    table = [heading]

    for group, fit in fits.items():
        row = [group]
        if fit.model is None:
            row.extend(PLACEHOLDER for _ in range(len(x_programs) + 1))
        else:
            for i, coef in enumerate(fit.model):
                half_width = None if fit.half_widths is None else float(fit.half_widths[i])
                row.append(format_coefficient(float(coef), half_width))
            row.append(PLACEHOLDER if fit.r_squared is None else format_general(fit.r_squared))
        table.append(row)
    return table


def render_text(table: Sequence[Sequence[str]]) -> str:
    """
    Aligned plain text.

    Group names and headings are left-aligned, numbers right-aligned,
    columns separated by two spaces.
    """
    if not table:
        return ""
    n_columns = max(len(row) for row in table)
    widths = [0] * n_columns
    for row in table:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(cell))

    lines = []
    heading = table[0]
    parts = []
    for i, cell in enumerate(heading):
        if i == 0:
            parts.append(cell.ljust(widths[i]))
        elif i == len(heading) - 1:
            parts.append("  " + cell)
        else:
            parts.append("  " + cell.ljust(widths[i]))
    lines.append("".join(parts))

    for row in table[1:]:
        parts = [row[0].ljust(widths[0])]
        parts.extend("  " + cell.rjust(widths[i]) for i, cell in enumerate(row) if i > 0)
        lines.append("".join(parts))
    return "\n".join(lines) + "\n"


def render_html(table: Sequence[Sequence[str]]) -> str:
    """An HTML table with class 'benchls'; every cell is escaped."""
    lines = [_HTML_STYLE, "<table class='benchls'>"]
    for n, row in enumerate(table):
        tag = "th" if n == 0 else "td"
        cells = "".join(f"<{tag}>{html.escape(cell)}</{tag}>" for cell in row)
        lines.append(f"<tr>{cells}</tr>")
    lines.append("</table>")
    return "\n".join(lines) + "\n"


def write_report(
    x_programs: Sequence[Program],
    y_program: Program,
    fits: Mapping[str, GroupFit],
    out: IO[str],
    *,
    html_output: bool = False,
) -> None:
    """Render the fits and write them to out."""
    table = build_table(x_programs, y_program, fits)
    out.write(render_html(table) if html_output else render_text(table))
