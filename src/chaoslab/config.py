# src/chaoslab/config.py
"""
Engine configuration.

All numeric constants used by the engines live in one frozen dataclass so a
view (or the CLI) can tune them without touching the algorithms. A TOML file
can override any field; its layout mirrors the engine that consumes it::

    [runtime]
    divergence_threshold = 1e10
    jit = false

    [iteration]
    transient = 500
    period_tol = 1e-8
    max_period = 128

    [bifurcation]
    period_tol = 1e-5
    search_depth = 12
    tail_cap = 256
    max_values = 200000

    [cobweb]
    iterations = 50
    curve_samples = 200
    invert_tol = 1e-10
    invert_max_iter = 64
"""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
import logging
import os
from pathlib import Path
import tomllib
from typing import Any, Mapping

from chaoslab.errors import ConfigError

__all__ = ["EngineConfig", "load_config", "config_from_mapping", "DEFAULT_CONFIG", "CONFIG_ENV_VAR"]

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CHAOSLAB_CONFIG"
_USER_CONFIG = Path("~/.config/chaoslab/config.toml")


@dataclass(frozen=True)
class EngineConfig:
    # runtime
    divergence_threshold: float = 1e10
    jit: bool = False
    # live iteration engine
    transient: int = 500
    live_period_tol: float = 1e-8
    live_max_period: int = 128
    # bifurcation sweep engine
    sweep_period_tol: float = 1e-5
    sweep_search_depth: int = 12
    sweep_tail_cap: int = 256
    max_sweep_values: int = 200_000
    # cobweb / inversion
    cobweb_iterations: int = 50
    curve_samples: int = 200
    invert_tol: float = 1e-10
    invert_max_iter: int = 64

    def __post_init__(self) -> None:
        if not self.divergence_threshold > 0:
            raise ConfigError("runtime.divergence_threshold must be positive")
        if self.transient < 0:
            raise ConfigError("iteration.transient must be non-negative")
        if self.live_max_period < 1:
            raise ConfigError("iteration.max_period must be >= 1")
        if self.sweep_search_depth < 0:
            raise ConfigError("bifurcation.search_depth must be non-negative")
        if self.sweep_tail_cap < 1:
            raise ConfigError("bifurcation.tail_cap must be >= 1")
        if self.max_sweep_values < 1:
            raise ConfigError("bifurcation.max_values must be >= 1")
        if self.curve_samples < 1:
            raise ConfigError("cobweb.curve_samples must be >= 1")
        if self.invert_max_iter < 1:
            raise ConfigError("cobweb.invert_max_iter must be >= 1")
        for name in ("live_period_tol", "sweep_period_tol", "invert_tol"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be non-negative")


DEFAULT_CONFIG = EngineConfig()

# TOML (section, key) -> EngineConfig field
_TOML_KEYS: dict[tuple[str, str], str] = {
    ("runtime", "divergence_threshold"): "divergence_threshold",
    ("runtime", "jit"): "jit",
    ("iteration", "transient"): "transient",
    ("iteration", "period_tol"): "live_period_tol",
    ("iteration", "max_period"): "live_max_period",
    ("bifurcation", "period_tol"): "sweep_period_tol",
    ("bifurcation", "search_depth"): "sweep_search_depth",
    ("bifurcation", "tail_cap"): "sweep_tail_cap",
    ("bifurcation", "max_values"): "max_sweep_values",
    ("cobweb", "iterations"): "cobweb_iterations",
    ("cobweb", "curve_samples"): "curve_samples",
    ("cobweb", "invert_tol"): "invert_tol",
    ("cobweb", "invert_max_iter"): "invert_max_iter",
}
_SECTIONS = frozenset(section for section, _ in _TOML_KEYS)


def _coerce(field_name: str, value: Any, where: str) -> Any:
    default = getattr(DEFAULT_CONFIG, field_name)
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise ConfigError(f"{where} must be a boolean, got {type(value).__name__}")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{where} must be an integer, got {type(value).__name__}")
        return value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where} must be a number, got {type(value).__name__}")
    return float(value)


def config_from_mapping(data: Mapping[str, Any], *, base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    """Build an EngineConfig from a parsed TOML document (section -> key -> value)."""
    updates: dict[str, Any] = {}
    for section, table in data.items():
        if section not in _SECTIONS:
            raise ConfigError(
                f"Unknown config section [{section}]; expected one of: {', '.join(sorted(_SECTIONS))}"
            )
        if not isinstance(table, Mapping):
            raise ConfigError(f"[{section}] must be a table")
        for key, value in table.items():
            field_name = _TOML_KEYS.get((section, key))
            if field_name is None:
                valid = sorted(k for s, k in _TOML_KEYS if s == section)
                raise ConfigError(f"Unknown key '{key}' in [{section}]; valid keys: {', '.join(valid)}")
            updates[field_name] = _coerce(field_name, value, f"{section}.{key}")
    return dataclasses.replace(base, **updates) if updates else base


def load_config(path: str | Path | None = None) -> EngineConfig:
    """
    Load an EngineConfig from TOML.

    Resolution order: explicit ``path``, then ``$CHAOSLAB_CONFIG``, then
    ``~/.config/chaoslab/config.toml``. An explicit path (argument or env var)
    must exist; a missing user config silently yields the defaults.
    """
    explicit = path if path is not None else os.environ.get(CONFIG_ENV_VAR) or None
    if explicit is not None:
        candidate = Path(explicit).expanduser()
        if not candidate.is_file():
            raise ConfigError(f"Config file not found: {candidate}")
    else:
        candidate = _USER_CONFIG.expanduser()
        if not candidate.is_file():
            return DEFAULT_CONFIG

    try:
        with open(candidate, "rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Malformed config {candidate}: {e}") from e
    logger.debug("loaded engine config from %s", candidate)
    return config_from_mapping(data)
