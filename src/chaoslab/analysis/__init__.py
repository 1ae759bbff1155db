"""Bifurcation sweeps and period detection."""

from chaoslab.analysis.bifurcation import (
    BifurcationParams,
    BifurcationResult,
    BifurcationSweep,
    run_bifurcation_sweep,
    sweep_values,
)
from chaoslab.analysis.periodicity import (
    extract_cycle,
    general_period,
    get_kernels,
    power_of_two_period,
)

__all__ = [
    # Sweep
    "BifurcationParams",
    "BifurcationResult",
    "BifurcationSweep",
    "run_bifurcation_sweep",
    "sweep_values",
    # Period detection
    "power_of_two_period",
    "general_period",
    "extract_cycle",
    "get_kernels",
]
