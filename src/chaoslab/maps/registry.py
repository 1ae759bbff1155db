# src/chaoslab/maps/registry.py
from __future__ import annotations
from typing import Dict

from chaoslab.errors import MapNotFoundError
from .base import MapDefinition

__all__ = ["register", "get_map", "registry"]

# key -> definition
_registry: Dict[str, MapDefinition] = {}

def register(map_def: MapDefinition) -> None:
    """
    Register a map definition by its key.
    Re-registering the same instance is a no-op; a different definition
    under an existing key is rejected.
    """
    key = map_def.key
    if key in _registry and _registry[key] is not map_def:
        raise ValueError(f"Map '{key}' already registered with a different definition.")
    _registry[key] = map_def

def get_map(key: str) -> MapDefinition:
    """
    Return the registered definition for 'key' or raise MapNotFoundError.
    """
    try:
        return _registry[key]
    except KeyError:
        raise MapNotFoundError(key, _registry) from None

def registry() -> Dict[str, MapDefinition]:
    """
    Read-only-ish view (do not mutate externally).
    """
    return dict(_registry)
