"""
Tests for aggregate(): observations to per-group Samples.
"""

import pytest

from benchls.expr import SymbolTable, compile_expr, compile_list
from benchls.regression import Observation, aggregate
from benchls.regression.aggregate import required_variables


@pytest.fixture
def symbols():
    return SymbolTable.from_names(["N", "P"])


@pytest.fixture
def programs(symbols):
    x_programs = compile_list("math.Log2(N), 1.0", symbols)
    y_program = compile_expr("Y / N", symbols.with_response())
    return x_programs, y_program


class TestAggregate:

    def test_rows_per_group(self, programs):
        x_programs, y_program = programs
        observations = [
            Observation("BenchmarkA", {"N": 2.0}, 10.0),
            Observation("BenchmarkB", {"N": 4.0}, 40.0),
            Observation("BenchmarkA", {"N": 8.0}, 80.0),
        ]
        samples = aggregate(observations, x_programs, y_program)
        assert list(samples) == ["BenchmarkA", "BenchmarkB"]
        assert samples["BenchmarkA"].x == (1.0, 1.0, 3.0, 1.0)
        assert samples["BenchmarkA"].y == (5.0, 10.0)
        assert samples["BenchmarkB"].rows == 1

    def test_response_bound_as_y(self, symbols):
        y_program = compile_expr("Y", symbols.with_response())
        samples = aggregate(
            [Observation("g", {"N": 1.0}, 123.0)],
            compile_list("N", symbols),
            y_program,
        )
        assert samples["g"].y == (123.0,)

    def test_missing_variable_skips_observation(self, programs):
        x_programs, y_program = programs
        observations = [
            Observation("g", {"N": 2.0}, 10.0),
            Observation("g", {}, 20.0, label="Benchmarkg/foo-4"),
        ]
        with pytest.warns(UserWarning, match=r"missing value for N in 'Benchmarkg/foo-4'"):
            samples = aggregate(observations, x_programs, y_program)
        assert samples["g"].rows == 1

    def test_unused_variable_not_required(self, programs):
        x_programs, y_program = programs
        samples = aggregate([Observation("g", {"N": 2.0}, 10.0)], x_programs, y_program)
        assert samples["g"].rows == 1

    def test_group_without_rows_is_absent(self, programs):
        x_programs, y_program = programs
        with pytest.warns(UserWarning):
            samples = aggregate([Observation("g", {"P": 1.0}, 1.0)], x_programs, y_program)
        assert samples == {}

    def test_required_variables(self, symbols, programs):
        x_programs, y_program = programs
        assert required_variables(x_programs, y_program) == frozenset({"N", "Y"})
