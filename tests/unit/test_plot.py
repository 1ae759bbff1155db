# tests/unit/test_plot.py
from __future__ import annotations

import math
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pytest

from chaoslab import plot
from chaoslab.analysis import run_bifurcation_sweep
from chaoslab.cobweb import logistic_fn
from chaoslab.maps import logistic as logistic_map
from chaoslab.runtime import IterationEngine


def _small_sweep():
    return run_bifurcation_sweep(logistic_map, param_min=2.9, param_max=3.5, d_param=0.05, N=400)


def test_cobweb_draws_curve_identity_and_staircase():
    ax = plot.cobweb(logistic_fn(3.2), 0.5, steps=20, xlim=(0.0, 1.0))
    labels = [line.get_label() for line in ax.lines]
    assert "y = x" in labels and "f(x)" in labels
    assert len(ax.lines) == 4  # identity, curve, staircase, seed marker
    assert ax.get_xlim() == (0.0, 1.0)
    assert ax.get_ylim() == (0.0, 1.0)


def test_cobweb_breaks_curve_at_singularities():
    fig, ax = plt.subplots()
    plot.cobweb(lambda x: 1.0 / x, 0.5, steps=3, xlim=(-1.0, 1.0), samples=4, ax=ax, legend=False)
    curve = [line for line in ax.lines if line.get_color() == "tab:green"]
    assert len(curve) == 1
    ys = np.asarray(curve[0].get_ydata(), dtype=float)
    # the failed sample at x = 0 leaves a gap
    assert np.isnan(ys[2]) and np.all(np.isfinite(np.delete(ys, 2)))


def test_cobweb_masks_infinite_samples():
    fig, ax = plt.subplots()
    plot.cobweb(lambda x: math.inf if x == 0 else x, 0.5, steps=2, xlim=(-1.0, 1.0), samples=4, ax=ax)
    (curve,) = [line for line in ax.lines if line.get_label() == "f(x)"]
    ys = np.asarray(curve.get_ydata(), dtype=float)
    assert np.isnan(ys[2])
    assert not np.any(np.isinf(ys))


def test_cobweb_without_function_only_draws_identity():
    ax = plot.cobweb(None, 0.5)
    assert len(ax.lines) == 1


def test_bifurcation_diagram_variables():
    res = _small_sweep()
    ax = plot.bifurcation_diagram(res)
    assert len(ax.lines) == 1
    assert ax.get_xlabel() == "parameter r"
    assert ax.get_ylim() == (0.0, 1.0)

    ax2 = plot.bifurcation_diagram(res, var="both", mark_doublings=True)
    assert len(ax2.lines) == 2 + len(res.period_doublings)
    assert ax2.get_ylabel() == "x, y"

    with pytest.raises(ValueError):
        plot.bifurcation_diagram(res, var="z")


def test_iteration_snapshot_title():
    eng = IterationEngine(logistic_map, iterates=1000, speed=100)
    ax = plot.iteration(eng.get_state())
    assert "initial condition" in ax.get_title()

    eng.seed(0.3, 0.3)
    state = eng.run_until_done()
    ax = plot.iteration(state, logistic_map.bounds)
    assert "period: 2" in ax.get_title()
    assert ax.get_xlim() == (logistic_map.bounds.x_min, logistic_map.bounds.x_max)


def test_savefig_formats(tmp_path: Path):
    ax = plot.cobweb(logistic_fn(3.2), 0.5)
    written = plot.export.savefig(ax, tmp_path / "out" / "web.png")
    assert written == [tmp_path / "out" / "web.png"]
    assert written[0].is_file()

    both = plot.export.savefig(ax.figure, tmp_path / "web", fmts=("png", ".SVG", "png"))
    assert [p.suffix for p in both] == [".png", ".svg"]
    assert all(p.is_file() for p in both)

    with pytest.raises(ValueError):
        plot.export.savefig(ax, tmp_path / "none", fmts=("",))


def test_default_filename_uses_map_slug():
    assert plot.export.default_filename(logistic_map, "bifurcation") == "logistic-bifurcation.png"
    assert plot.export.default_filename(logistic_map, "iteration", ".svg") == "logistic-iteration.svg"
