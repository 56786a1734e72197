"""
Tests for the whitelisted math functions.
"""

import math

import numpy as np
import pytest

from benchls.expr import BINARY_FUNCTIONS, UNARY_FUNCTIONS, SymbolTable, compile_expr
from benchls.expr.functions import qualified_name


@pytest.fixture
def symbols():
    return SymbolTable.from_names(["x", "y"])


def call1(name, x):
    return float(UNARY_FUNCTIONS[name](np.float64(x)))


def call2(name, x, y):
    return float(BINARY_FUNCTIONS[name](np.float64(x), np.float64(y)))


class TestTables:

    def test_read_only(self):
        with pytest.raises(TypeError):
            UNARY_FUNCTIONS["Evil"] = print

    def test_disjoint(self):
        assert not set(UNARY_FUNCTIONS) & set(BINARY_FUNCTIONS)

    def test_qualified_name(self):
        assert qualified_name("Log") == "math.Log"

    @pytest.mark.parametrize("name", sorted(UNARY_FUNCTIONS))
    def test_every_unary_compiles(self, symbols, name):
        program = compile_expr(f"math.{name}(x)", symbols)
        assert isinstance(program.evaluate({"x": 0.5}), float)

    @pytest.mark.parametrize("name", sorted(BINARY_FUNCTIONS))
    def test_every_binary_compiles(self, symbols, name):
        program = compile_expr(f"math.{name}(x, y)", symbols)
        assert isinstance(program.evaluate({"x": 0.5, "y": 2.0}), float)


class TestValues:

    @pytest.mark.parametrize("name, x, expected", [
        ("Abs", -2.5, 2.5),
        ("Sqrt", 16.0, 4.0),
        ("Cbrt", 27.0, 3.0),
        ("Exp2", 10.0, 1024.0),
        ("Log2", 1024.0, 10.0),
        ("Log10", 1000.0, 3.0),
        ("Floor", -1.5, -2.0),
        ("Ceil", -1.5, -1.0),
        ("Trunc", -1.5, -1.0),
        ("Gamma", 5.0, 24.0),
        ("Logb", 8.0, 3.0),
        ("Logb", 0.75, -1.0),
    ])
    def test_unary(self, name, x, expected):
        np.testing.assert_allclose(call1(name, x), expected, rtol=1e-14)

    @pytest.mark.parametrize("name, x, y, expected", [
        ("Pow", 2.0, 10.0, 1024.0),
        ("Hypot", 3.0, 4.0, 5.0),
        ("Max", 1.0, 2.0, 2.0),
        ("Min", 1.0, 2.0, 1.0),
        ("Mod", -7.0, 3.0, -1.0),
        ("Remainder", 7.0, 4.0, -1.0),
        ("Dim", 5.0, 3.0, 2.0),
        ("Dim", 3.0, 5.0, 0.0),
        ("Copysign", 3.0, -1.0, -3.0),
    ])
    def test_binary(self, name, x, y, expected):
        np.testing.assert_allclose(call2(name, x, y), expected, rtol=1e-14)


class TestSpecialValues:

    def test_logb_zero(self):
        assert call1("Logb", 0.0) == -math.inf

    def test_logb_inf(self):
        assert call1("Logb", -math.inf) == math.inf

    def test_sqrt_negative(self):
        assert math.isnan(call1("Sqrt", -1.0))

    def test_acos_out_of_domain(self):
        assert math.isnan(call1("Acos", 2.0))

    def test_remainder_by_zero(self):
        assert math.isnan(call2("Remainder", 1.0, 0.0))

    def test_remainder_of_inf(self):
        assert math.isnan(call2("Remainder", math.inf, 2.0))

    def test_dim_nan(self):
        assert math.isnan(call2("Dim", math.nan, 1.0))

    def test_max_nan(self):
        assert math.isnan(call2("Max", math.nan, 1.0))

    @pytest.mark.parametrize("x, y", [(math.inf, math.nan), (math.nan, math.inf)])
    def test_max_inf_beats_nan(self, x, y):
        assert call2("Max", x, y) == math.inf

    @pytest.mark.parametrize("x, y", [(-math.inf, math.nan), (math.nan, -math.inf)])
    def test_min_inf_beats_nan(self, x, y):
        assert call2("Min", x, y) == -math.inf

    @pytest.mark.parametrize("x, y", [(-0.0, 0.0), (0.0, -0.0)])
    def test_signed_zeros(self, x, y):
        assert math.copysign(1.0, call2("Max", x, y)) == 1.0
        assert math.copysign(1.0, call2("Min", x, y)) == -1.0
