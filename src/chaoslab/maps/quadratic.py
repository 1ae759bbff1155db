# src/chaoslab/maps/quadratic.py
from __future__ import annotations
from typing import Mapping

from .base import Bounds, BifurcationDefaults, IterationDefaults, MapDefinition

__all__ = ["quadratic", "quadratic_step"]


def quadratic_step(x: float, y: float, p: Mapping[str, float]) -> tuple[float, float]:
    return p["c"] - x * x, x


# Hénon with b=0; orbits escape for c > 2.
quadratic = MapDefinition(
    key="quadratic",
    name="Quadratic",
    step=quadratic_step,
    default_params={"c": 1.0},
    bifurcation_param="c",
    bounds=Bounds(x_min=-2.2, x_max=2.2, y_min=-2.2, y_max=2.2),
    bifurcation_defaults=BifurcationDefaults(
        param_min=0.0,
        param_max=2.0,
        d_param=0.002,
        N=1000,
        ic=(0.0, 0.0),
        plot_y_min=-2.0,
        plot_y_max=2.0,
    ),
    iteration_defaults=IterationDefaults(iterates=1000, lag=50, speed=1),
    description="Real quadratic family c - x^2.",
    formula="(c - x^2, x)",
)


def _auto_register():
    from .registry import register
    register(quadratic)

_auto_register()
