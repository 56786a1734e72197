"""benchls command-line interface.

Reads `go test -bench` output from a file or stdin, fits one least squares
model per benchmark group and prints the coefficient table.
"""

import argparse
import sys
from typing import IO

from benchls import __version__
from benchls.bench.grouping import DEFAULT_PATTERN, sample_groups
from benchls.bench.parse import Metric, parse_set
from benchls.config import (
    DEFAULT_RESPONSE,
    DEFAULT_X_TRANSFORM,
    DEFAULT_Y_TRANSFORM,
    FitConfig,
)
from benchls.core.exceptions import CompileError, ConfigurationError
from benchls.regression.solvers import fit_groups
from benchls.report import write_report

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="benchls",
        description="Fit least squares models to Go benchmark results.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--vars",
        default=DEFAULT_PATTERN,
        help="regex with named groups matching variables in benchmark names "
        "(default: %(default)s)",
    )
    parser.add_argument(
        "--xtransform",
        "--xt",
        dest="x_transform",
        default=DEFAULT_X_TRANSFORM,
        help="comma-separated explanatory terms (default: %(default)s)",
    )
    parser.add_argument(
        "--ytransform",
        "--yt",
        dest="y_transform",
        default=DEFAULT_Y_TRANSFORM,
        help="response transform, Y is the raw metric (default: %(default)s)",
    )
    parser.add_argument(
        "--response",
        default=DEFAULT_RESPONSE.value,
        help="benchmark metric bound to Y, one of "
        + ", ".join(m.value for m in Metric)
        + " (default: %(default)s)",
    )
    parser.add_argument("--html", action="store_true", help="print an HTML table")
    parser.add_argument(
        "input",
        nargs="?",
        default="-",
        help="benchmark output file, '-' or omitted for stdin",
    )
    return parser


def read_benchmarks(path: str, stdin: IO[str] | None = None):
    """
    Parse benchmark output from path, or from stdin when path is '-'.

    Undecodable bytes in a file are replaced; only benchmark lines, which
    are ASCII, are used.
    """
    if path == "-":
        return parse_set(stdin if stdin is not None else sys.stdin)
    with open(path, encoding="utf-8", errors="replace") as f:
        return parse_set(f)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Args:
        argv: Command line arguments, sys.argv[1:] if None.

    Returns:
        Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = FitConfig.from_options(
            pattern=args.vars,
            x_transform=args.x_transform,
            y_transform=args.y_transform,
            response=args.response,
            html=args.html,
        )
        formulas = config.compile()
    except (CompileError, ConfigurationError) as e:
        print(f"benchls: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        bench_set = read_benchmarks(args.input)
    except (OSError, UnicodeDecodeError) as e:
        print(f"benchls: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    samples = sample_groups(
        bench_set,
        formulas.pattern,
        formulas.x_programs,
        formulas.y_program,
        metric=config.response,
    )
    if not samples:
        print(f"benchls: no benchmarks match {formulas.pattern.pattern!r}", file=sys.stderr)
        return EXIT_IO_ERROR

    fits = fit_groups(samples)
    write_report(formulas.x_programs, formulas.y_program, fits, sys.stdout, html_output=config.html)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
