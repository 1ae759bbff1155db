"""
Hénon map bifurcation sweep around the a ≈ 2.18 window, then a zoom-in
via BifurcationSweep.update().
"""

from __future__ import annotations
from chaoslab import BifurcationSweep, get_map
from chaoslab.plot import export, bifurcation_diagram

henon = get_map("henon")

sweep = BifurcationSweep(henon)
print(sweep)
print(f"  diverged values: {sweep.result.diverged.size}")

ax = bifurcation_diagram(sweep.result, var="both", title="Hénon map (defaults)")
export.savefig(ax, "henon_default", fmts=("png",))

# Classic parameters: a period-doubling cascade below a = 1.06
sweep.update(param_min=0.0, param_max=1.4, d_param=0.001, ic=(0.0, 0.0), map_params={"b": 0.3},
             plot_y_min=-1.5, plot_y_max=1.5)
for period, a in sweep.result.sorted_doublings():
    print(f"  period {period:>4} at a = {a:.4f}")

ax = bifurcation_diagram(sweep.result, mark_doublings=True, title="Hénon map (b = 0.3)")
export.show()
