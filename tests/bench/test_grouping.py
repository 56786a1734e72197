"""
Tests for name-pattern grouping.
"""

import pytest

from benchls.bench import (
    DEFAULT_PATTERN,
    Benchmark,
    Metric,
    VariablePattern,
    observations,
    parse_set,
    sample_groups,
)
from benchls.core.exceptions import CompileError, CompileErrorKind, ConfigurationError
from benchls.expr import compile_expr, compile_list


class TestVariablePattern:

    def test_default_pattern(self):
        pattern = VariablePattern()
        assert pattern.pattern == DEFAULT_PATTERN
        assert pattern.names == ("N",)
        assert pattern.split("BenchmarkSort1000-4") == ("BenchmarkSort", {"N": 1000.0})

    def test_sub_benchmark(self):
        assert VariablePattern().split("BenchmarkSort/1000-4") == ("BenchmarkSort", {"N": 1000.0})

    def test_no_match(self):
        assert VariablePattern().split("BenchmarkSort-4") is None

    def test_group_keeps_trailing_digits_outside_match(self):
        # only the matched span is removed
        pattern = VariablePattern(r"/n=(?P<N>\d+)")
        assert pattern.split("BenchmarkMD5/n=64/x1-8") == ("BenchmarkMD5/x1-8", {"N": 64.0})

    def test_names_in_pattern_order(self):
        pattern = VariablePattern(r"/(?P<M>\d+)x(?P<N>\d+)-\d+$")
        assert pattern.names == ("M", "N")
        assert pattern.split("BenchmarkMul/3x40-4") == ("BenchmarkMul", {"M": 3.0, "N": 40.0})

    def test_non_numeric_capture_left_out(self):
        pattern = VariablePattern(r"/(?P<K>\w+)-\d+$")
        assert pattern.split("BenchmarkMap/small-4") == ("BenchmarkMap", {})

    def test_unmatched_optional_group_left_out(self):
        pattern = VariablePattern(r"(/(?P<M>\d+))?/(?P<N>\d+)-\d+$")
        assert pattern.split("BenchmarkX/7-4") == ("BenchmarkX", {"N": 7.0})

    def test_invalid_regex(self):
        with pytest.raises(ConfigurationError, match="invalid vars pattern"):
            VariablePattern(r"(?P<N>\d+")

    def test_reserved_group_name(self):
        with pytest.raises(CompileError) as exc_info:
            VariablePattern(r"(?P<Y>\d+)-\d+$").symbols()
        assert exc_info.value.kind is CompileErrorKind.RESERVED_NAME_COLLISION


class TestObservations:

    def test_metric_selected(self):
        bench_set = {
            "BenchmarkA10-4": [Benchmark("BenchmarkA10-4", 100, ns_per_op=50.0, allocs_per_op=3)],
        }
        (obs,) = observations(bench_set, VariablePattern(), Metric.ALLOCS_PER_OP)
        assert obs.group == "BenchmarkA"
        assert obs.variables == {"N": 10.0}
        assert obs.response == 3.0
        assert obs.label == "BenchmarkA10-4"

    def test_missing_metric_skipped(self):
        bench_set = {"BenchmarkA10-4": [Benchmark("BenchmarkA10-4", 100, ns_per_op=50.0)]}
        with pytest.warns(UserWarning, match="does not report MBPerS"):
            assert list(observations(bench_set, VariablePattern(), Metric.MB_PER_S)) == []

    def test_unmatched_names_dropped(self):
        bench_set = {"BenchmarkA-4": [Benchmark("BenchmarkA-4", 100, ns_per_op=50.0)]}
        assert list(observations(bench_set, VariablePattern(), Metric.NS_PER_OP)) == []


class TestSampleGroups:

    def test_groups_in_first_seen_order(self):
        lines = [
            "BenchmarkStableSort10-4  100  20 ns/op",
            "BenchmarkSort10-4  100  10 ns/op",
            "BenchmarkStableSort100-4  100  200 ns/op",
            "BenchmarkSort100-4  100  100 ns/op",
            "BenchmarkSort100-4  100  110 ns/op",
        ]
        pattern = VariablePattern()
        symbols = pattern.symbols()
        samples = sample_groups(
            parse_set(lines),
            pattern,
            compile_list("N, 1.0", symbols),
            compile_expr("Y", symbols.with_response()),
        )
        assert list(samples) == ["BenchmarkStableSort", "BenchmarkSort"]
        assert samples["BenchmarkSort"].rows == 3
        assert samples["BenchmarkSort"].y == (10.0, 100.0, 110.0)
        assert samples["BenchmarkStableSort"].x == (10.0, 1.0, 100.0, 1.0)
