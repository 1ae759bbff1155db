"""Map definitions and the process-wide map registry."""

from .base import (
    StepFn, State, Bounds, BifurcationDefaults, IterationDefaults, MapDefinition,
)
from .registry import register, get_map, registry

# Importing registers the built-in maps.
from .henon import henon
from .logistic import logistic
from .quadratic import quadratic

__all__ = [
    "StepFn", "State", "Bounds", "BifurcationDefaults", "IterationDefaults", "MapDefinition",
    "register", "get_map", "registry",
    "henon", "logistic", "quadratic",
]
