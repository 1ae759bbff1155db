# src/chaoslab/analysis/bifurcation.py
"""
Bifurcation sweep engine.

For every value ``a`` of the swept parameter the map is iterated ``N`` times
from a fixed initial condition. Diverged values are dropped entirely; for the
rest the shortest power-of-two cycle is searched at the end of the trajectory
and the tail of the orbit (one full cycle, or up to ``tail_cap`` states when no
cycle is found) becomes scatter points. The first parameter value at which each
period shows up is recorded as a period-doubling onset.

The sweep is synchronous and recomputed from scratch on every change; keep the
grid size bounded through ``EngineConfig.max_sweep_values``.
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
import logging
import math
from typing import Any, Mapping, Optional

import numpy as np

from chaoslab.config import DEFAULT_CONFIG, EngineConfig
from chaoslab.errors import SweepConfigError
from chaoslab.maps.base import MapDefinition, State
from chaoslab.runtime.guards import is_diverged, safe_step
from .periodicity import get_kernels

__all__ = [
    "BifurcationParams",
    "BifurcationResult",
    "BifurcationSweep",
    "run_bifurcation_sweep",
    "sweep_values",
]

logger = logging.getLogger(__name__)

# Rounding slack when deciding whether param_max itself is on the grid.
_GRID_EPS = 1e-9


@dataclass(frozen=True)
class BifurcationParams:
    """
    Settings for one sweep.

    ``map_params`` holds the values of the non-swept parameters (the swept one,
    if present, is overwritten per grid value). ``plot_y_min``/``plot_y_max``
    are carried for renderers and do not affect the computation.
    """
    param_min: float
    param_max: float
    d_param: float
    N: int
    ic: State
    plot_y_min: float
    plot_y_max: float
    map_params: Mapping[str, float] = field(default_factory=dict)

    @classmethod
    def from_map(cls, map_def: MapDefinition) -> "BifurcationParams":
        d = map_def.bifurcation_defaults
        return cls(
            param_min=d.param_min,
            param_max=d.param_max,
            d_param=d.d_param,
            N=d.N,
            ic=(float(d.ic[0]), float(d.ic[1])),
            plot_y_min=d.plot_y_min,
            plot_y_max=d.plot_y_max,
            map_params=dict(map_def.default_params),
        )

    def replace(self, **overrides: Any) -> "BifurcationParams":
        if "ic" in overrides and overrides["ic"] is not None:
            ic = overrides["ic"]
            overrides["ic"] = (float(ic[0]), float(ic[1]))
        if "map_params" in overrides and overrides["map_params"] is not None:
            overrides["map_params"] = dict(overrides["map_params"])
        overrides = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **overrides)

    def validate(self, map_def: MapDefinition, config: EngineConfig = DEFAULT_CONFIG) -> None:
        """Reject settings that would make the sweep loop degenerate. Raises SweepConfigError."""
        for name in ("param_min", "param_max", "d_param"):
            if not math.isfinite(getattr(self, name)):
                raise SweepConfigError(f"{name} must be finite", field=name)
        if self.d_param <= 0:
            raise SweepConfigError(f"d_param must be positive, got {self.d_param}", field="d_param")
        if self.param_min > self.param_max:
            raise SweepConfigError(
                f"param_min ({self.param_min}) must not exceed param_max ({self.param_max})",
                field="param_min",
            )
        if isinstance(self.N, bool) or int(self.N) != self.N or self.N < 1:
            raise SweepConfigError(f"N must be an integer >= 1, got {self.N}", field="N")
        if len(self.ic) != 2 or not all(math.isfinite(v) for v in self.ic):
            raise SweepConfigError(f"ic must be two finite numbers, got {self.ic}", field="ic")
        unknown = sorted(set(self.map_params) - set(map_def.default_params))
        if unknown:
            raise SweepConfigError(
                f"Unknown parameter(s) {unknown} for map {map_def.key!r}; available: {list(map_def.param_names)}",
                field="map_params",
            )
        count = _grid_count(self.param_min, self.param_max, self.d_param)
        if count > config.max_sweep_values:
            raise SweepConfigError(
                f"Sweep would evaluate {count} parameter values (limit {config.max_sweep_values}); "
                "narrow the range or increase d_param",
                field="d_param",
            )


@dataclass
class BifurcationResult:
    param_name: str
    values: np.ndarray           # sweep grid (M,)
    periods: np.ndarray          # detected period per grid value (M,): k>0, 0 = none, -1 = diverged
    a: np.ndarray                # scatter x-axis (P,)
    x: np.ndarray                # state x per point (P,)
    y: np.ndarray                # state y per point (P,)
    period_doublings: dict[int, float]
    meta: dict

    def __len__(self) -> int:
        return int(self.a.size)

    @property
    def points(self) -> np.ndarray:
        """(P, 3) array of (a, x, y) rows."""
        return np.column_stack((self.a, self.x, self.y)) if self.a.size else np.empty((0, 3), dtype=float)

    @property
    def diverged(self) -> np.ndarray:
        """Grid values whose orbit escaped (no points emitted for them)."""
        return self.values[self.periods < 0]

    def sorted_doublings(self) -> list[tuple[int, float]]:
        return sorted(self.period_doublings.items())

    def series(self, var: str) -> tuple[np.ndarray, np.ndarray]:
        """(a, values) for var in {'x', 'y'}."""
        if var == "x":
            return self.a, self.x
        if var == "y":
            return self.a, self.y
        raise KeyError(f"Unknown variable {var!r}; available: ['x', 'y']")


def _grid_count(param_min: float, param_max: float, d_param: float) -> int:
    span = (param_max - param_min) / d_param
    return int(math.floor(span + _GRID_EPS)) + 1


def sweep_values(param_min: float, param_max: float, d_param: float) -> np.ndarray:
    """Inclusive grid param_min, param_min + d, ... <= param_max (index-based, no drift)."""
    count = _grid_count(param_min, param_max, d_param)
    return param_min + d_param * np.arange(count, dtype=float)


def run_bifurcation_sweep(
    map_def: MapDefinition,
    params: Optional[BifurcationParams] = None,
    *,
    config: EngineConfig = DEFAULT_CONFIG,
    **overrides: Any,
) -> BifurcationResult:
    """
    Sweep ``map_def.bifurcation_param`` and collect attractor samples.

    ``params`` defaults to the map's bifurcation defaults; keyword overrides
    (``param_min``, ``param_max``, ``d_param``, ``N``, ``ic``, ``map_params``,
    ...) are applied on top. Invalid settings raise SweepConfigError before any
    iteration happens.

    Example:
        >>> from chaoslab.maps import logistic
        >>> res = run_bifurcation_sweep(logistic, param_min=2.9, param_max=3.5, d_param=0.01)
        >>> sorted(res.period_doublings)
        [1, 2, 4]
    """
    base = params if params is not None else BifurcationParams.from_map(map_def)
    if overrides:
        base = base.replace(**overrides)
    base.validate(map_def, config)

    detect, _ = get_kernels(config.jit)
    sweep_name = map_def.bifurcation_param
    N = int(base.N)
    depth = int(config.sweep_search_depth)
    tol = float(config.sweep_period_tol)
    threshold = float(config.divergence_threshold)
    tail_cap = int(config.sweep_tail_cap)
    step = map_def.step

    values = sweep_values(base.param_min, base.param_max, base.d_param)
    periods = np.zeros(values.shape, dtype=np.int64)
    fixed = map_def.resolve_params(base.map_params)

    xs = np.empty((N + 1,), dtype=np.float64)
    ys = np.empty((N + 1,), dtype=np.float64)
    a_parts: list[np.ndarray] = []
    x_parts: list[np.ndarray] = []
    y_parts: list[np.ndarray] = []
    doublings: dict[int, float] = {}

    for m, a in enumerate(values):
        a = float(a)
        p = dict(fixed)
        p[sweep_name] = a

        xs[0], ys[0] = base.ic
        diverged = False
        for i in range(N):
            nx, ny = safe_step(step, xs[i], ys[i], p)
            if is_diverged(nx, ny, threshold):
                diverged = True
                break
            xs[i + 1] = nx
            ys[i + 1] = ny
        if diverged:
            periods[m] = -1
            continue

        period = int(detect(xs, ys, N, depth, tol))
        periods[m] = period
        if period > 0 and period not in doublings:
            doublings[period] = a

        tail = period if period > 0 else min(tail_cap, N)
        start = N + 1 - tail
        a_parts.append(np.full((tail,), a, dtype=float))
        x_parts.append(xs[start:].copy())
        y_parts.append(ys[start:].copy())

    a_out = np.concatenate(a_parts) if a_parts else np.empty((0,), dtype=float)
    x_out = np.concatenate(x_parts) if x_parts else np.empty((0,), dtype=float)
    y_out = np.concatenate(y_parts) if y_parts else np.empty((0,), dtype=float)

    n_div = int(np.count_nonzero(periods < 0))
    logger.debug(
        "bifurcation sweep %s: %d values, %d diverged, %d points, doublings=%s",
        map_def.key, values.size, n_div, a_out.size, doublings,
    )
    meta = {
        "map": map_def.key,
        "N": N,
        "ic": tuple(base.ic),
        "d_param": float(base.d_param),
        "fixed_params": {k: v for k, v in fixed.items() if k != sweep_name},
        "plot_ylim": (float(base.plot_y_min), float(base.plot_y_max)),
        "search_depth": depth,
        "tol": tol,
    }
    return BifurcationResult(
        param_name=sweep_name,
        values=values,
        periods=periods,
        a=a_out,
        x=x_out,
        y=y_out,
        period_doublings=doublings,
        meta=meta,
    )


class BifurcationSweep:
    """
    Mutable sweep handle owned by a single view.

    Holds the current settings and the last result; ``update`` applies partial
    overrides and recomputes in place. An invalid update raises
    SweepConfigError and leaves the previous settings and result untouched.

    Example:
        >>> from chaoslab.maps import henon
        >>> sweep = BifurcationSweep(henon, d_param=1e-4)
        >>> sweep.update(map_params={"b": -0.3})   # doctest: +SKIP
        >>> sweep.period_doublings                  # doctest: +SKIP
    """

    def __init__(
        self,
        map_def: MapDefinition,
        params: Optional[BifurcationParams] = None,
        *,
        config: EngineConfig = DEFAULT_CONFIG,
        **overrides: Any,
    ):
        self.map = map_def
        self.config = config
        base = params if params is not None else BifurcationParams.from_map(map_def)
        self._params = base.replace(**overrides) if overrides else base
        self._result = run_bifurcation_sweep(map_def, self._params, config=config)

    @property
    def params(self) -> BifurcationParams:
        return self._params

    @property
    def result(self) -> BifurcationResult:
        return self._result

    @property
    def period_doublings(self) -> dict[int, float]:
        return dict(self._result.period_doublings)

    def update(self, **overrides: Any) -> BifurcationResult:
        new_params = self._params.replace(**overrides)
        result = run_bifurcation_sweep(self.map, new_params, config=self.config)
        self._params = new_params
        self._result = result
        return result

    def __repr__(self) -> str:
        p = self._params
        return (
            f"BifurcationSweep(map={self.map.key!r}, {self.map.bifurcation_param}=[{p.param_min}, {p.param_max}] "
            f"step {p.d_param}, N={p.N}, points={len(self._result)})"
        )
