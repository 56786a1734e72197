"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


SORT_OUTPUT = """\
PASS
BenchmarkSort10-4      	 2000000	       981 ns/op
BenchmarkSort100-4     	  200000	      9967 ns/op
BenchmarkSort1000-4    	   10000	    180906 ns/op
BenchmarkSort10000-4   	    1000	   2269930 ns/op
BenchmarkSort100000-4  	      50	  29891719 ns/op
BenchmarkSort1000000-4 	       3	 351179975 ns/op
BenchmarkSort10000000-4	       1	4274436193 ns/op
ok  	github.com/jonlawlor/benchlm	149.108s
"""


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def sort_output():
    """`go test -bench=Sort` output with one run per size."""
    return SORT_OUTPUT


@pytest.fixture
def sort_lines(sort_output):
    return sort_output.splitlines(keepends=True)


@pytest.fixture
def linear_data(rng):
    """y = 2x + 3 with small noise, as (x, y)."""
    x = np.linspace(1.0, 50.0, 40)
    y = 2.0 * x + 3.0 + rng.standard_normal(x.size) * 0.1
    return x, y


@pytest.fixture
def collinear_data(rng):
    """Second column is exactly twice the first (should give no model)."""
    x = rng.standard_normal(20)
    X = np.column_stack([x, 2.0 * x])
    y = rng.standard_normal(20)
    return X, y
