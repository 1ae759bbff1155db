# tests/integration/test_henon_sweep.py
from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from chaoslab import plot
from chaoslab.analysis import BifurcationSweep
from chaoslab.maps import get_map


def test_default_henon_sweep_and_export(tmp_path: Path):
    henon = get_map("henon")
    sweep = BifurcationSweep(henon)
    res = sweep.result

    assert res.values.size == 451
    assert res.values[0] == 2.177
    assert res.values[-1] == pytest.approx(2.1815)
    assert res.meta["map"] == "henon"
    assert res.meta["fixed_params"] == {"b": -0.4}
    assert res.meta["plot_ylim"] == (-0.5, 2.0)

    # every emitted point belongs to a non-diverged parameter value
    assert set(np.unique(res.a)) <= set(res.values[res.periods >= 0])
    assert np.all(np.isfinite(res.x))
    for period, value in res.period_doublings.items():
        assert period in (1, 2, 4, 8, 16, 32, 64, 128, 256, 512, 1024, 2048)
        assert res.periods[res.values == value][0] == period

    ax = plot.bifurcation_diagram(res, var="both", mark_doublings=True)
    written = plot.export.savefig(ax, tmp_path / "henon", fmts=("png",))
    assert written[0].stat().st_size > 0


def test_sweep_recomputes_with_new_fixed_parameter():
    sweep = BifurcationSweep(get_map("henon"), param_min=1.0, param_max=1.2, d_param=0.1, N=400, ic=(0.0, 0.0))
    sweep.update(map_params={"b": 0.0})
    # b = 0 reduces to x -> a - x**2, which has a stable 2-cycle on 0.75 < a < 1.25
    assert sweep.result.periods.tolist() == [2, 2, 2]
    assert sweep.period_doublings == {2: 1.0}
