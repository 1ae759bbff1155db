# src/chaoslab/maps/logistic.py
"""
Logistic map r*x*(1-x) lifted to 2D by carrying the previous iterate in y.

The second coordinate makes the map usable by the 2D engines while the
x-coordinate follows the classic 1D orbit exactly.
"""
from __future__ import annotations
from typing import Mapping

from .base import Bounds, BifurcationDefaults, IterationDefaults, MapDefinition

__all__ = ["logistic", "logistic_step"]


def logistic_step(x: float, y: float, p: Mapping[str, float]) -> tuple[float, float]:
    return p["r"] * x * (1.0 - x), x


logistic = MapDefinition(
    key="logistic",
    name="Logistic",
    step=logistic_step,
    default_params={"r": 3.2},
    bifurcation_param="r",
    bounds=Bounds(x_min=-0.1, x_max=1.1, y_min=-0.1, y_max=1.1),
    bifurcation_defaults=BifurcationDefaults(
        param_min=2.8,
        param_max=4.0,
        d_param=0.005,
        N=1000,
        ic=(0.5, 0.5),
        plot_y_min=0.0,
        plot_y_max=1.0,
    ),
    iteration_defaults=IterationDefaults(iterates=1000, lag=50, speed=1),
    description="Population growth with crowding; period-doubling route to chaos at r ~ 3.5699.",
    formula="(r*x*(1 - x), x)",
)


def _auto_register():
    from .registry import register
    register(logistic)

_auto_register()
