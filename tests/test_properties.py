"""Property-based hashing and threshold tests (Hypothesis)."""
from __future__ import annotations

import pytest

hyp = pytest.importorskip("hypothesis")

import hypothesis.strategies as st  # type: ignore
from hypothesis import given  # type: ignore

from copycatcher.detector.hashing import PRIME, HashFunction, apply
from copycatcher.detector.stats import threshold


@given(
    scalar=st.integers(-(2**31), 2**31 - 1),
    constant=st.integers(-(2**31), 2**31 - 1),
    x=st.integers(-(2**40), 2**40),
)
def test_apply_always_in_range(scalar: int, constant: int, x: int) -> None:
    assert 0 <= apply(HashFunction(scalar, constant), x) < PRIME


@given(v=st.floats(min_value=0.0, max_value=1.0), k=st.floats(min_value=0.0, max_value=10.0))
def test_threshold_of_constant_sample_is_exact(v: float, k: float) -> None:
    assert threshold([v, v, v], k) == v

