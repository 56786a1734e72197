"""
Whitelisted functions callable from formulas.

Formulas call functions as ``math.Name(arg)`` or ``math.Name(a, b)``. The
tables below are the complete set; anything else is rejected at compile time.

Every implementation is total over float64: poles, domain errors and
overflow produce ±Inf or NaN following IEEE-754, never an exception.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Callable, Mapping

import numpy as np
from scipy import special as sp_special

# The only namespace a call may be qualified with.
NAMESPACE = "math"

UnaryFunc = Callable[[float], float]
BinaryFunc = Callable[[float, float], float]


def _logb(x: float) -> float:
    """Binary exponent of x: Logb(±0) = -Inf, Logb(±Inf) = +Inf."""
    if np.isnan(x):
        return x
    if x == 0:
        return -np.inf
    if np.isinf(x):
        return np.inf
    return float(np.frexp(x)[1] - 1)


def _dim(x: float, y: float) -> float:
    """Positive difference max(x - y, 0); NaN propagates."""
    v = x - y
    if v <= 0:
        return 0.0
    return v


def _max(x: float, y: float) -> float:
    """Larger of x and y: +Inf wins over NaN, +0 over -0."""
    if np.isposinf(x) or np.isposinf(y):
        return np.inf
    if x == 0 and y == 0:
        return y if np.signbit(x) else x
    return np.maximum(x, y)


def _min(x: float, y: float) -> float:
    """Smaller of x and y: -Inf wins over NaN, -0 over +0."""
    if np.isneginf(x) or np.isneginf(y):
        return -np.inf
    if x == 0 and y == 0:
        return x if np.signbit(x) else y
    return np.minimum(x, y)


def _remainder(x: float, y: float) -> float:
    """IEEE 754 remainder, NaN for infinite x or zero y."""
    if np.isnan(x) or np.isnan(y) or np.isinf(x) or y == 0:
        return np.nan
    return math.remainder(x, y)


UNARY_FUNCTIONS: Mapping[str, UnaryFunc] = MappingProxyType({
    "Abs": np.fabs,
    "Acos": np.arccos,
    "Acosh": np.arccosh,
    "Asin": np.arcsin,
    "Asinh": np.arcsinh,
    "Atan": np.arctan,
    "Atanh": np.arctanh,
    "Cbrt": np.cbrt,
    "Ceil": np.ceil,
    "Cos": np.cos,
    "Cosh": np.cosh,
    "Erf": sp_special.erf,
    "Erfc": sp_special.erfc,
    "Exp": np.exp,
    "Exp2": np.exp2,
    "Expm1": np.expm1,
    "Floor": np.floor,
    "Gamma": sp_special.gamma,
    "J0": sp_special.j0,
    "J1": sp_special.j1,
    "Log": np.log,
    "Log10": np.log10,
    "Log1p": np.log1p,
    "Log2": np.log2,
    "Logb": _logb,
    "Sin": np.sin,
    "Sinh": np.sinh,
    "Sqrt": np.sqrt,
    "Tan": np.tan,
    "Tanh": np.tanh,
    "Trunc": np.trunc,
    "Y0": sp_special.y0,
    "Y1": sp_special.y1,
})

BINARY_FUNCTIONS: Mapping[str, BinaryFunc] = MappingProxyType({
    "Atan2": np.arctan2,
    "Copysign": np.copysign,
    "Dim": _dim,
    "Hypot": np.hypot,
    "Max": _max,
    "Min": _min,
    "Mod": np.fmod,
    "Nextafter": np.nextafter,
    "Pow": np.power,
    "Remainder": _remainder,
})


def qualified_name(name: str) -> str:
    """'Log' -> 'math.Log'."""
    return f"{NAMESPACE}.{name}"
