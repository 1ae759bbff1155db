# src/chaoslab/runtime/__init__.py
from chaoslab.runtime.guards import DIVERGENCE_THRESHOLD, is_diverged, safe_call, safe_step
from chaoslab.runtime.history import StateHistory, TrailBuffer
from chaoslab.runtime.iteration import IterationEngine, IterationState, Phase

__all__ = [
    "IterationEngine", "IterationState", "Phase",
    "StateHistory", "TrailBuffer",
    "safe_call", "safe_step", "is_diverged", "DIVERGENCE_THRESHOLD",
]
