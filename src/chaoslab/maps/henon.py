# src/chaoslab/maps/henon.py
"""
Hénon map in delayed-coordinate form:

    x' = a - x**2 + b*y
    y' = x

With a=1.4, b=0.3 this is the classic Hénon attractor (rescaled by a).
The default b=-0.4 shows a clean period-doubling cascade around a ~ 2.18.
"""
from __future__ import annotations
from typing import Mapping

from .base import Bounds, BifurcationDefaults, IterationDefaults, MapDefinition

__all__ = ["henon", "henon_step"]


def henon_step(x: float, y: float, p: Mapping[str, float]) -> tuple[float, float]:
    return p["a"] - x * x + p["b"] * y, x


henon = MapDefinition(
    key="henon",
    name="Hénon",
    step=henon_step,
    default_params={"a": 1.4, "b": -0.4},
    bifurcation_param="a",
    bounds=Bounds(x_min=-2.5, x_max=2.5, y_min=-2.5, y_max=2.5),
    bifurcation_defaults=BifurcationDefaults(
        param_min=2.177,
        param_max=2.1815,
        d_param=1e-5,
        N=1000,
        ic=(0.0, 2.0),
        plot_y_min=-0.5,
        plot_y_max=2.0,
    ),
    iteration_defaults=IterationDefaults(iterates=1000, lag=50, speed=1),
    description="Two-dimensional quadratic map with area contraction |b|.",
    formula="(a - x^2 + b*y, x)",
)


# Auto-register on module import
def _auto_register():
    from .registry import register
    register(henon)

_auto_register()
