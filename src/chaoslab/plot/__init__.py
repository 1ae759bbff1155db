# src/chaoslab/plot/__init__.py
from __future__ import annotations

from ._primitives import bifurcation_diagram, cobweb, iteration
from . import _export as export

__all__ = ["cobweb", "bifurcation_diagram", "iteration", "export"]
