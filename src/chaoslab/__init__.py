# src/chaoslab/__init__.py
from __future__ import annotations

from .errors import (
    ChaoslabError, ConfigError, SweepConfigError, MapNotFoundError, KernelNotInitializedError,
)
from .config import EngineConfig, DEFAULT_CONFIG, load_config

from .maps import MapDefinition, register, get_map, registry
from .cobweb import orbit, cobweb_path, sample_curve, invert_numerically
from .analysis import BifurcationParams, BifurcationResult, BifurcationSweep, run_bifurcation_sweep
from .runtime import IterationEngine, IterationState, Phase
from .conjugacy import Conjugacy

__version__ = "0.1.0"

__all__ = [
    # Maps
    "MapDefinition", "register", "get_map", "registry",
    # Cobweb / orbit paths
    "orbit", "cobweb_path", "sample_curve", "invert_numerically", "Conjugacy",
    # Engines
    "BifurcationParams", "BifurcationResult", "BifurcationSweep", "run_bifurcation_sweep",
    "IterationEngine", "IterationState", "Phase",
    # Configuration and errors
    "EngineConfig", "DEFAULT_CONFIG", "load_config",
    "ChaoslabError", "ConfigError", "SweepConfigError", "MapNotFoundError", "KernelNotInitializedError",
]
