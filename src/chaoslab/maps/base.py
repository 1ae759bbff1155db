# src/chaoslab/maps/base.py
from __future__ import annotations

from dataclasses import dataclass, field
import re
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Tuple
import unicodedata

__all__ = [
    "StepFn",
    "State",
    "Bounds",
    "BifurcationDefaults",
    "IterationDefaults",
    "MapDefinition",
]

State = Tuple[float, float]

# step(x, y, params) -> (x', y'). Pure; may return non-finite values which
# callers are responsible for detecting.
StepFn = Callable[[float, float, Mapping[str, float]], Tuple[float, float]]


@dataclass(frozen=True)
class Bounds:
    """Suggested plot rectangle for the iteration view."""
    x_min: float
    x_max: float
    y_min: float
    y_max: float

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


@dataclass(frozen=True)
class BifurcationDefaults:
    param_min: float
    param_max: float
    d_param: float
    N: int
    ic: State
    plot_y_min: float  # y-axis bounds for the diagram (state variable range)
    plot_y_max: float


@dataclass(frozen=True)
class IterationDefaults:
    iterates: int
    lag: int
    speed: int


@dataclass(frozen=True)
class MapDefinition:
    """
    Static description of a 2D map.

    Fields:
      - key: registry key (e.g. "henon")
      - name: display name (e.g. "Hénon")
      - step: the map itself, step(x, y, params) -> (x', y')
      - default_params: parameter name -> default value (read-only mapping)
      - bifurcation_param: which parameter a bifurcation sweep varies
      - bounds / bifurcation_defaults / iteration_defaults: view defaults

    Instances are immutable and shared freely between views; engines copy the
    parameters they need.
    """
    key: str
    name: str
    step: StepFn
    default_params: Mapping[str, float]
    bifurcation_param: str
    bounds: Bounds
    bifurcation_defaults: BifurcationDefaults
    iteration_defaults: IterationDefaults
    description: str = ""
    formula: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if self.bifurcation_param not in self.default_params:
            raise ValueError(
                f"bifurcation_param {self.bifurcation_param!r} is not one of the map parameters "
                f"{sorted(self.default_params)}"
            )
        frozen = MappingProxyType({str(k): float(v) for k, v in self.default_params.items()})
        object.__setattr__(self, "default_params", frozen)

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(self.default_params)

    @property
    def slug(self) -> str:
        """Filesystem-safe name: 'Hénon' -> 'henon'."""
        folded = unicodedata.normalize("NFD", self.name.lower())
        folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
        slug = re.sub(r"[^a-z0-9]+", "-", folded).strip("-")
        return slug or "map"

    def resolve_params(self, overrides: Optional[Mapping[str, float]] = None) -> dict[str, float]:
        """Defaults merged with overrides; unknown names raise KeyError."""
        params = dict(self.default_params)
        if overrides:
            unknown = sorted(set(overrides) - set(params))
            if unknown:
                raise KeyError(f"Unknown parameter(s) {unknown} for map {self.key!r}; available: {list(params)}")
            params.update({k: float(v) for k, v in overrides.items()})
        return params

    def next_state(self, state: State, params: Optional[Mapping[str, float]] = None) -> State:
        """Apply one step to ``state`` (defaults used for missing params)."""
        p = self.default_params if params is None else params
        x_next, y_next = self.step(float(state[0]), float(state[1]), p)
        return float(x_next), float(y_next)
