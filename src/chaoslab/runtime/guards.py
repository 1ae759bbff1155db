# src/chaoslab/runtime/guards.py
from __future__ import annotations

import logging
import math
from typing import Callable, Optional

__all__ = ["safe_call", "safe_step", "is_diverged", "DIVERGENCE_THRESHOLD"]

logger = logging.getLogger(__name__)

DIVERGENCE_THRESHOLD = 1e10


def safe_call(fn: Optional[Callable[[float], float]], x: float) -> float:
    """
    Evaluate a user-supplied scalar function at the engine boundary.

    Exceptions raised by the callable, and results that are not real numbers,
    become ``nan`` so callers can treat them as "path ends here".
    """
    if fn is None:
        return math.nan
    try:
        value = fn(x)
    except Exception as e:  # user code may raise anything
        logger.debug("user function raised %s at x=%r; treating as nan", type(e).__name__, x)
        return math.nan
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def is_diverged(x: float, y: float, threshold: float = DIVERGENCE_THRESHOLD) -> bool:
    """True once either coordinate escapes the magnitude threshold or stops being finite."""
    if not (math.isfinite(x) and math.isfinite(y)):
        return True
    return abs(x) > threshold or abs(y) > threshold


def safe_step(step: Callable, x: float, y: float, params) -> tuple[float, float]:
    """Apply a map step; arithmetic blow-ups (OverflowError, ZeroDivisionError) become (nan, nan)."""
    try:
        nx, ny = step(x, y, params)
    except ArithmeticError:
        return math.nan, math.nan
    return float(nx), float(ny)
