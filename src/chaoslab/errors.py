# src/chaoslab/errors.py
from __future__ import annotations
from typing import Iterable

__all__ = [
    "ChaoslabError",
    "ConfigError",
    "SweepConfigError",
    "MapNotFoundError",
    "KernelNotInitializedError",
]

class ChaoslabError(Exception):
    """Base error for the chaoslab package."""


class ConfigError(ChaoslabError):
    """Raised when a configuration file or value is malformed or invalid."""
    def __init__(self, message: str):
        super().__init__(message)


class SweepConfigError(ConfigError):
    """Raised when bifurcation sweep settings violate a precondition (checked before sweeping)."""
    def __init__(self, message: str, *, field: str | None = None):
        self.field = field
        super().__init__(message)


class MapNotFoundError(ChaoslabError, KeyError):
    """Raised when a map key is not present in the registry."""
    def __init__(self, key: str, available: Iterable[str]):
        self.key = key
        self.available = sorted(available)
        msg = f"Map not found: {key!r}"
        if self.available:
            msg += f" (available: {', '.join(self.available)})"
        super().__init__(msg)

    def __str__(self) -> str:
        # KeyError would repr() the message otherwise
        return str(self.args[0])


class KernelNotInitializedError(ChaoslabError):
    """Raised when kernel.run() is called before kernel.init()."""
    def __init__(self):
        super().__init__("No math kernel initialized; call chaoslab.kernel.init(kernel) first.")
