# tests/unit/test_periodicity.py
from __future__ import annotations

import numpy as np
import pytest

from chaoslab.analysis.periodicity import (
    extract_cycle,
    general_period,
    get_kernels,
    power_of_two_period,
)


def _cycle(values, length):
    """Repeat ``values`` to ``length`` samples (x) with y lagging by one."""
    xs = np.resize(np.asarray(values, dtype=float), length)
    ys = np.roll(xs, 1)
    return xs, ys


# ---------------------------------------------------------------------------
# power-of-two detector (bifurcation sweeps)
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("values, expected", [
    ([0.3], 1),
    ([0.2, 0.7], 2),
    ([0.1, 0.4, 0.8, 0.6], 4),
    ([0.1, 0.5, 0.9], 0),   # period 3 is not a power of two
])
def test_power_of_two_period(values, expected):
    N = 100
    xs, ys = _cycle(values, N + 1)
    assert power_of_two_period(xs, ys, N, 12, 1e-5) == expected


def test_power_of_two_smallest_match_wins():
    # a fixed point also "repeats" at lags 2, 4, 8, ...
    xs = np.full(65, 0.25)
    ys = np.full(65, 0.25)
    assert power_of_two_period(xs, ys, 64, 12, 1e-5) == 1


def test_power_of_two_respects_trajectory_length():
    xs, ys = _cycle([0.1, 0.4, 0.8, 0.6], 4)
    # N = 3 leaves no room for a lag of 4
    assert power_of_two_period(xs, ys, 3, 12, 1e-5) == 0


def test_power_of_two_uses_both_coordinates():
    N = 32
    xs = np.full(N + 1, 0.5)
    ys = np.arange(N + 1, dtype=float)
    assert power_of_two_period(xs, ys, N, 12, 1e-5) == 0


# ---------------------------------------------------------------------------
# general detector (live iteration)
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("values, expected", [
    ([0.3], 1),
    ([0.2, 0.7], 2),
    ([0.1, 0.5, 0.9], 3),
    ([0.1, 0.2, 0.3, 0.4, 0.5], 5),
])
def test_general_period(values, expected):
    n = 60
    hx, hy = _cycle(values, n)
    assert general_period(hx, hy, n, 128, 1e-8) == expected


def test_general_period_none_for_aperiodic_history():
    rng = np.random.default_rng(0)
    hx = rng.random(400)
    hy = rng.random(400)
    assert general_period(hx, hy, 400, 128, 1e-8) == 0


def test_general_period_capped_by_max_period_and_history():
    hx, hy = _cycle([0.1, 0.2, 0.3, 0.4, 0.5], 60)
    assert general_period(hx, hy, 60, 4, 1e-8) == 0
    # n // 2 bounds the candidates
    assert general_period(hx, hy, 8, 128, 1e-8) == 0


def test_general_period_tolerance():
    hx, hy = _cycle([0.2, 0.7], 40)
    hx = hx.copy()
    hx[-1] += 1e-6
    assert general_period(hx, hy, 40, 128, 1e-8) == 0
    assert general_period(hx, hy, 40, 128, 1e-5) == 2


# ---------------------------------------------------------------------------
# helpers and kernels
# ---------------------------------------------------------------------------

def test_extract_cycle():
    hx, hy = _cycle([0.1, 0.5, 0.9], 30)
    cyc = extract_cycle(hx, hy, 30, 3)
    assert len(cyc) == 3
    assert [round(x, 12) for x, _ in cyc] == [0.1, 0.5, 0.9]
    assert extract_cycle(hx, hy, 30, 0) == ()


def test_get_kernels_python():
    p2, gen = get_kernels(jit=False)
    assert p2 is power_of_two_period
    assert gen is general_period


def test_get_kernels_numba_matches_python():
    pytest.importorskip("numba")
    p2, gen = get_kernels(jit=True)
    xs, ys = _cycle([0.1, 0.4, 0.8, 0.6], 101)
    assert p2(xs, ys, 100, 12, 1e-5) == 4
    hx, hy = _cycle([0.1, 0.5, 0.9], 60)
    assert gen(hx, hy, 60, 128, 1e-8) == 3
