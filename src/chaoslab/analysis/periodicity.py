# src/chaoslab/analysis/periodicity.py
"""
Period detection kernels.

Two deliberately separate detectors:

- ``power_of_two_period`` (bifurcation sweeps): compares the final state of a
  fixed-length trajectory against the states 1, 2, 4, ... 2**depth steps
  earlier and reports the smallest matching power of two.
- ``general_period`` (live iteration): looks for the smallest p in
  1..max_period such that the trailing window of post-transient history
  repeats exactly at lag p.

They use different tolerances and candidate sets and are tuned independently.
Both are written as plain loops over float64 arrays so they can be compiled
with numba (see ``get_kernels``).
"""
from __future__ import annotations

from typing import Callable, Tuple

import numpy as np

from chaoslab.jit import jit_compile

__all__ = [
    "power_of_two_period",
    "general_period",
    "extract_cycle",
    "get_kernels",
]


def _power_of_two_period_impl(xs: np.ndarray, ys: np.ndarray, N: int, depth: int, tol: float) -> int:
    # First (smallest) matching power of two wins; 0 means none matched.
    for j in range(depth + 1):
        period = 1 << j
        if period > N:
            break
        if abs(xs[N] - xs[N - period]) < tol and abs(ys[N] - ys[N - period]) < tol:
            return period
    return 0


def _general_period_impl(hx: np.ndarray, hy: np.ndarray, n: int, max_period: int, tol: float) -> int:
    # Smallest p whose trailing window repeats at lag p; 0 means undetermined.
    p_hi = min(max_period, n // 2)
    for p in range(1, p_hi + 1):
        checks = min(2 * p, n - p)
        match = True
        for i in range(checks):
            idx = n - 1 - i
            prev = idx - p
            if prev < 0:
                match = False
                break
            if abs(hx[idx] - hx[prev]) > tol or abs(hy[idx] - hy[prev]) > tol:
                match = False
                break
        if match:
            return p
    return 0


power_of_two_period = _power_of_two_period_impl
general_period = _general_period_impl


def get_kernels(jit: bool = False) -> Tuple[Callable, Callable]:
    """Return (power_of_two_period, general_period), numba-compiled when jit=True."""
    return (
        jit_compile(_power_of_two_period_impl, jit=jit),
        jit_compile(_general_period_impl, jit=jit),
    )


def extract_cycle(hx: np.ndarray, hy: np.ndarray, n: int, period: int) -> tuple[tuple[float, float], ...]:
    """The last ``period`` states of the first ``n`` history entries, in order."""
    if period <= 0 or period > n:
        return ()
    start = n - period
    return tuple((float(hx[i]), float(hy[i])) for i in range(start, n))
