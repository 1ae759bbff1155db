# src/chaoslab/cobweb.py
"""
Pure-math helpers for cobweb diagrams and conjugacy views of 1D maps.

Every routine returns flat float arrays ``[x0, y0, x1, y1, ...]`` ready for a
renderer. User functions are called through ``safe_call`` so a callable that
raises or returns nan/inf simply ends the path; nothing here raises on bad
numerics. A ``None`` callable is accepted everywhere and yields an empty path
(or ``None`` for inversion).
"""
from __future__ import annotations

import math
from typing import Callable, Optional

import numpy as np

from chaoslab.config import DEFAULT_CONFIG
from chaoslab.runtime.guards import safe_call

__all__ = [
    "ScalarFn",
    "orbit",
    "cobweb_path",
    "sample_curve",
    "invert_numerically",
    "identity_line",
    "logistic_fn",
    "quadratic_fn",
    "logistic_parabola",
    "logistic_cobweb",
]

ScalarFn = Callable[[float], float]

_EMPTY = np.empty((0,), dtype=float)


def orbit(f: Optional[ScalarFn], x0: float, steps: int) -> np.ndarray:
    """
    Forward orbit ``x0, f(x0), f(f(x0)), ...`` with at most ``steps + 1`` values.

    Stops before the first non-finite value, so a shorter result means the
    orbit escaped.
    """
    x = float(x0)
    if f is None or not math.isfinite(x):
        return _EMPTY.copy()
    out = [x]
    for _ in range(max(0, int(steps))):
        x = safe_call(f, x)
        if not math.isfinite(x):
            break
        out.append(x)
    return np.asarray(out, dtype=float)


def cobweb_path(f: Optional[ScalarFn], x0: float, n: int) -> np.ndarray:
    """
    Cobweb path as a flat ``[x0, 0, x0, x1, x1, x1, x1, x2, ...]`` array.

    Starting at (x0, 0), then for each step:
      vertical:   (x, prev_y) -> (x, f(x))
      horizontal: (x, f(x))  -> (f(x), f(x))
    Truncated at the first non-finite value.
    """
    if f is None or not math.isfinite(float(x0)):
        return _EMPTY.copy()
    x = float(x0)
    pts = [x, 0.0]
    for _ in range(max(0, int(n))):
        y = safe_call(f, x)
        if not math.isfinite(y):
            break  # orbit escaped
        pts.extend((x, y, y, y))
        x = y
    return np.asarray(pts, dtype=float)


def sample_curve(
    f: Optional[ScalarFn],
    x_min: float,
    x_max: float,
    n: int = DEFAULT_CONFIG.curve_samples,
) -> np.ndarray:
    """
    Sample f uniformly over [x_min, x_max] at ``n + 1`` points.

    Non-finite samples are kept as-is; renderers break the polyline there.
    """
    if f is None:
        return _EMPTY.copy()
    n = max(1, int(n))
    xs = x_min + (np.arange(n + 1, dtype=float) / n) * (x_max - x_min)
    pts = np.empty((2 * (n + 1),), dtype=float)
    pts[0::2] = xs
    pts[1::2] = [safe_call(f, float(x)) for x in xs]
    return pts


def invert_numerically(
    f: Optional[ScalarFn],
    y: float,
    x_min: float,
    x_max: float,
    tol: float = DEFAULT_CONFIG.invert_tol,
    max_iter: int = DEFAULT_CONFIG.invert_max_iter,
) -> Optional[float]:
    """
    Solve f(x) = y on [x_min, x_max] by bisection, assuming f is monotone there.

    ``tol`` bounds the bracket width in x, not the residual: bisection stops
    once the bracket is narrower than ``tol`` (or after ``max_iter`` halvings)
    and returns its midpoint, so the result lies within ``tol`` of a root.
    For a steep f, |f(v) - y| can be much larger than ``tol``.

    Returns None when f(x_min) - y and f(x_max) - y share a sign, which covers
    both "y outside the range" and "f not monotone" without telling them apart.
    """
    if f is None:
        return None
    flo = safe_call(f, x_min) - y
    fhi = safe_call(f, x_max) - y
    if not (math.isfinite(flo) and math.isfinite(fhi)):
        return None
    if flo * fhi > 0:
        return None
    if flo == 0.0:
        return float(x_min)
    if fhi == 0.0:
        return float(x_max)
    lo, hi = float(x_min), float(x_max)
    lo_negative = flo < 0
    for _ in range(int(max_iter)):
        if abs(hi - lo) < tol:
            break
        mid = 0.5 * (lo + hi)
        fmid = safe_call(f, mid) - y
        if fmid == 0.0:
            return mid
        if (fmid < 0) == lo_negative:
            lo = mid
        else:
            hi = mid
    return 0.5 * (lo + hi)


# ---- built-in scalar maps ----------------------------------------------------

def logistic_fn(r: float) -> ScalarFn:
    """x -> r*x*(1-x)"""
    r = float(r)

    def f(x: float) -> float:
        return r * x * (1.0 - x)

    return f


def quadratic_fn(c: float) -> ScalarFn:
    """x -> c - x**2"""
    c = float(c)

    def f(x: float) -> float:
        return c - x * x

    return f


def identity_line(lo: float, hi: float, n: int = 2) -> np.ndarray:
    """Flat samples of y = x over [lo, hi] (diagonal for cobweb plots)."""
    xs = np.linspace(float(lo), float(hi), max(2, int(n)))
    pts = np.empty((2 * xs.size,), dtype=float)
    pts[0::2] = xs
    pts[1::2] = xs
    return pts


def logistic_parabola(r: float, num_points: int = 100) -> np.ndarray:
    return sample_curve(logistic_fn(r), 0.0, 1.0, num_points)


def logistic_cobweb(r: float, x0: float, iterations: int = DEFAULT_CONFIG.cobweb_iterations) -> np.ndarray:
    return cobweb_path(logistic_fn(r), x0, iterations)
