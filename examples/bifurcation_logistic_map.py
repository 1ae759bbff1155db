"""
Bifurcation diagram demonstration for the logistic map.

"""

from __future__ import annotations
from chaoslab import EngineConfig, get_map, run_bifurcation_sweep
from chaoslab.plot import export, bifurcation_diagram

r0 = 2.8
rend = 4.0

logistic = get_map("logistic")
config = EngineConfig(jit=True)

print("Computing bifurcation diagram...")
print(f"  Parameter: r ∈ [{r0}, {rend}]")

result = run_bifurcation_sweep(
    logistic,
    config=config,
    param_min=r0,
    param_max=rend,
    d_param=0.001,
    N=1000,
    ic=(0.5, 0.5),
)

print(f"  Grid points: {result.values.size}")
print(f"  Total points plotted: {len(result)}")
print("  Period-doubling onsets:")
for period, r in result.sorted_doublings():
    print(f"    period {period:>4} at r = {r:.4f}")
print("Done!")

bifurcation_diagram(
    result,
    color="black",
    xlim=(r0, rend),
    ylim=(0, 1),
    xlabel="r",
    ylabel="x*",
    title="Bifurcation Diagram: Logistic Map",
    mark_doublings=True,
)

export.show()
