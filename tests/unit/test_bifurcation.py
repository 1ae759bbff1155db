# tests/unit/test_bifurcation.py
from __future__ import annotations

import numpy as np
import pytest

from chaoslab.analysis import (
    BifurcationParams,
    BifurcationSweep,
    run_bifurcation_sweep,
    sweep_values,
)
from chaoslab.config import EngineConfig
from chaoslab.errors import ConfigError, SweepConfigError
from chaoslab.maps import henon, logistic


def test_sweep_values_inclusive_and_drift_free():
    vals = sweep_values(2.9, 3.5, 0.01)
    assert vals.size == 61
    assert vals[0] == 2.9
    assert vals[-1] == pytest.approx(3.5)
    assert sweep_values(1.0, 1.0, 0.5).tolist() == [1.0]
    assert sweep_values(0.0, 0.95, 0.1).size == 10


def test_logistic_period_doubling_table():
    res = run_bifurcation_sweep(
        logistic, param_min=2.9, param_max=3.5, d_param=0.01, N=1000, ic=(0.5, 0.5),
    )
    pd = res.period_doublings
    assert list(pd) == [1, 2, 4]
    assert pd[1] == pytest.approx(2.9)
    assert 2.95 < pd[2] < 3.1
    assert 3.445 < pd[4] < 3.501
    assert res.sorted_doublings() == sorted(pd.items())
    assert res.param_name == "r"


def test_emits_one_cycle_when_period_found():
    res = run_bifurcation_sweep(logistic, param_min=3.2, param_max=3.2, d_param=0.1, N=500)
    assert res.values.tolist() == [3.2]
    assert res.periods.tolist() == [2]
    assert len(res) == 2
    assert res.points.shape == (2, 3)
    np.testing.assert_allclose(sorted(res.x), [0.5130445, 0.7994555], atol=1e-6)
    # y is the delayed x, so the cycle's y values are the same two points
    np.testing.assert_allclose(sorted(res.y), sorted(res.x))
    assert np.all(res.a == 3.2)


def test_emits_capped_tail_without_period():
    res = run_bifurcation_sweep(logistic, param_min=3.9, param_max=3.9, d_param=0.1, N=1000)
    assert res.periods.tolist() == [0]
    assert len(res) == 256
    assert res.period_doublings == {}

    short = run_bifurcation_sweep(logistic, param_min=3.9, param_max=3.9, d_param=0.1, N=100)
    assert len(short) == 100


def test_tail_cap_is_configurable():
    cfg = EngineConfig(sweep_tail_cap=16)
    res = run_bifurcation_sweep(logistic, config=cfg, param_min=3.9, param_max=3.9, d_param=0.1)
    assert len(res) == 16


def test_diverged_values_are_omitted():
    res = run_bifurcation_sweep(logistic, param_min=3.85, param_max=4.45, d_param=0.1, N=500)
    assert res.values.size == 7
    escaped = res.values > 4.0
    assert np.all(res.periods[escaped] == -1)
    assert np.all(res.periods[~escaped] >= 0)
    np.testing.assert_array_equal(res.diverged, res.values[escaped])
    assert np.all(res.a < 4.0)
    assert np.all(np.isfinite(res.x)) and np.all(np.isfinite(res.y))


def test_everything_diverged_gives_empty_result():
    res = run_bifurcation_sweep(logistic, param_min=4.5, param_max=5.0, d_param=0.1, N=200)
    assert len(res) == 0
    assert res.points.shape == (0, 3)
    assert res.period_doublings == {}


def test_fixed_parameters_flow_into_step():
    a = run_bifurcation_sweep(henon, param_min=1.0, param_max=1.0, d_param=0.1, N=300,
                              ic=(0.0, 0.0), map_params={"b": 0.0})
    b = run_bifurcation_sweep(henon, param_min=1.0, param_max=1.0, d_param=0.1, N=300,
                              ic=(0.0, 0.0), map_params={"b": -10.0})
    assert a.meta["fixed_params"] == {"b": 0.0}
    assert b.meta["fixed_params"] == {"b": -10.0}
    # b = 0 reduces to x -> 1 - x**2, a superstable 2-cycle through 0 and 1
    assert a.periods.tolist() == [2]
    np.testing.assert_array_equal(sorted(a.x), [0.0, 1.0])
    assert b.periods.tolist() == [-1]


@pytest.mark.parametrize("overrides, field", [
    ({"d_param": 0.0}, "d_param"),
    ({"d_param": -0.1}, "d_param"),
    ({"param_min": 3.5, "param_max": 3.0}, "param_min"),
    ({"N": 0}, "N"),
    ({"N": 2.5}, "N"),
    ({"ic": (float("nan"), 0.0)}, "ic"),
    ({"param_max": float("inf")}, "param_max"),
    ({"map_params": {"q": 1.0}}, "map_params"),
])
def test_invalid_settings_rejected_before_sweeping(overrides, field):
    with pytest.raises(SweepConfigError) as exc:
        run_bifurcation_sweep(logistic, **overrides)
    assert exc.value.field == field
    assert isinstance(exc.value, ConfigError)


def test_sweep_size_limit():
    cfg = EngineConfig(max_sweep_values=10)
    with pytest.raises(SweepConfigError, match="limit 10"):
        run_bifurcation_sweep(logistic, config=cfg, param_min=0.0, param_max=1.0, d_param=0.01)


def test_params_from_map_defaults():
    p = BifurcationParams.from_map(henon)
    assert (p.param_min, p.param_max, p.d_param, p.N) == (2.177, 2.1815, 1e-5, 1000)
    assert p.ic == (0.0, 2.0)
    assert (p.plot_y_min, p.plot_y_max) == (-0.5, 2.0)
    assert p.map_params == {"a": 1.4, "b": -0.4}
    q = p.replace(N=50, ic=[1, 2], param_min=None)
    assert q.N == 50 and q.ic == (1.0, 2.0)
    assert q.param_min == p.param_min


def test_sweep_handle_update_recomputes():
    sweep = BifurcationSweep(logistic, param_min=3.2, param_max=3.2, d_param=0.1, N=500)
    assert sweep.period_doublings == {2: 3.2}
    res = sweep.update(param_min=3.5, param_max=3.5)
    assert res is sweep.result
    assert sweep.period_doublings == {4: 3.5}
    assert sweep.params.param_min == 3.5
    assert "logistic" in repr(sweep)


def test_sweep_handle_invalid_update_keeps_previous_state():
    sweep = BifurcationSweep(logistic, param_min=3.2, param_max=3.2, d_param=0.1, N=500)
    before = sweep.result
    with pytest.raises(SweepConfigError):
        sweep.update(d_param=-1.0)
    assert sweep.result is before
    assert sweep.params.d_param == 0.1


def test_numba_kernel_gives_same_table():
    pytest.importorskip("numba")
    kw = dict(param_min=3.0, param_max=3.5, d_param=0.05, N=600)
    py = run_bifurcation_sweep(logistic, **kw)
    jt = run_bifurcation_sweep(logistic, config=EngineConfig(jit=True), **kw)
    assert py.period_doublings == jt.period_doublings
    np.testing.assert_array_equal(py.periods, jt.periods)
