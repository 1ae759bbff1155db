# src/chaoslab/plot/_primitives.py
from __future__ import annotations

from typing import Any, Optional

import numpy as np
import matplotlib.pyplot as plt

from chaoslab.analysis.bifurcation import BifurcationResult
from chaoslab.cobweb import ScalarFn, cobweb_path, identity_line, orbit, sample_curve
from chaoslab.config import DEFAULT_CONFIG
from chaoslab.maps.base import Bounds
from chaoslab.runtime.iteration import IterationState

__all__ = ["cobweb", "bifurcation_diagram", "iteration"]


# ----------------------------------------------------------------------------
# Figure/Axes helpers
# ----------------------------------------------------------------------------

def _get_ax(ax=None) -> plt.Axes:
    if ax is not None:
        return ax
    _fig, created_ax = plt.subplots(figsize=(6.0, 6.0), layout="constrained")
    return created_ax


def _apply_limits(
    ax: plt.Axes,
    *,
    xlim: tuple[float | None, float | None] | None = None,
    ylim: tuple[float | None, float | None] | None = None,
) -> None:
    if xlim is not None:
        ax.set_xlim(xlim)
    if ylim is not None:
        ax.set_ylim(ylim)


def _apply_labels(ax: plt.Axes, *, xlabel: str | None, ylabel: str | None, title: str | None) -> None:
    if xlabel is not None:
        ax.set_xlabel(xlabel)
    if ylabel is not None:
        ax.set_ylabel(ylabel)
    if title is not None:
        ax.set_title(title)


def _pairs(flat: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    flat = np.asarray(flat, dtype=float)
    return flat[0::2], flat[1::2]


def _mask_non_finite(ys: np.ndarray) -> np.ndarray:
    # matplotlib breaks a line at nan but not at +/-inf
    return np.where(np.isfinite(ys), ys, np.nan)


# ----------------------------------------------------------------------------
# Plots
# ----------------------------------------------------------------------------

def cobweb(
    f: Optional[ScalarFn],
    x0: float,
    *,
    steps: int = DEFAULT_CONFIG.cobweb_iterations,
    xlim: tuple[float, float] | None = None,
    ylim: tuple[float, float] | None = None,
    samples: int = DEFAULT_CONFIG.curve_samples,
    ax=None,
    color: str | None = "tab:green",
    stair_color: str | None = "tab:red",
    identity_color: str | None = "gray",
    stair_lw: float = 0.8,
    xlabel: str | None = "x",
    ylabel: str | None = "f(x)",
    title: str | None = None,
    legend: bool = True,
) -> plt.Axes:
    """
    Cobweb plot of a 1D map: curve, identity line and iteration staircase.

    The curve is broken wherever f is undefined; the staircase ends where
    the orbit escapes. Limits default to the orbit's range plus 5% padding.
    """
    plot_ax = _get_ax(ax)

    if xlim is None:
        orb = orbit(f, x0, steps)
        if orb.size:
            lo, hi = float(orb.min()), float(orb.max())
        else:
            lo, hi = float(x0) - 0.5, float(x0) + 0.5
        pad = 0.05 * (hi - lo if hi > lo else 1.0)
        xlim = (lo - pad, hi + pad)
    if ylim is None:
        ylim = xlim

    ix, iy = _pairs(identity_line(xlim[0], xlim[1]))
    plot_ax.plot(ix, iy, linestyle="--", color=identity_color, label="y = x")

    if f is not None:
        cx, cy = _pairs(sample_curve(f, xlim[0], xlim[1], samples))
        plot_ax.plot(cx, _mask_non_finite(cy), color=color, label="f(x)")
        px, py = _pairs(cobweb_path(f, x0, steps))
        if px.size:
            plot_ax.plot(px, py, color=stair_color, linewidth=stair_lw)
            plot_ax.plot([px[0]], [py[0]], "o", color=stair_color, markersize=4)

    _apply_limits(plot_ax, xlim=xlim, ylim=ylim)
    _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
    if legend:
        plot_ax.legend()
    return plot_ax


def bifurcation_diagram(
    result: BifurcationResult,
    *,
    var: str = "x",
    ax=None,
    color: str | None = "black",
    y_color: str | None = "tab:blue",
    ms: float = 0.5,
    alpha: float | None = None,
    xlim: tuple[float, float] | None = None,
    ylim: tuple[float, float] | None = None,
    mark_doublings: bool = False,
    xlabel: str | None = None,
    ylabel: str | None = None,
    title: str | None = None,
) -> plt.Axes:
    """
    Scatter of a bifurcation sweep.

    ``var`` selects which state coordinate is drawn: "x", "y" or "both"
    (x in ``color``, y in ``y_color``). ``mark_doublings`` adds a vertical
    line at every period-doubling onset.
    """
    if var not in ("x", "y", "both"):
        raise ValueError(f"var must be 'x', 'y' or 'both', got {var!r}")
    plot_ax = _get_ax(ax)
    base = {"linestyle": "", "marker": ",", "markersize": ms}
    if ms and ms > 1:
        base["marker"] = "."
    if alpha is not None:
        base["alpha"] = alpha

    if var in ("x", "both"):
        plot_ax.plot(result.a, result.x, color=color, **base)
    if var in ("y", "both"):
        plot_ax.plot(result.a, result.y, color=y_color if var == "both" else color, **base)

    if mark_doublings:
        for period, value in result.sorted_doublings():
            plot_ax.axvline(value, color="tab:red", linewidth=0.6, linestyle=":")
            plot_ax.annotate(
                str(period), (value, 1.0), xycoords=("data", "axes fraction"),
                ha="center", va="bottom", fontsize=8, color="tab:red",
            )

    if xlim is None and result.values.size:
        xlim = (float(result.values[0]), float(result.values[-1]))
        if xlim[0] == xlim[1]:
            xlim = None
    if ylim is None:
        ylim = result.meta.get("plot_ylim")
    _apply_limits(plot_ax, xlim=xlim, ylim=ylim)

    if xlabel is None:
        xlabel = f"parameter {result.param_name}"
    if ylabel is None:
        ylabel = "x, y" if var == "both" else var
    if title is None and "map" in result.meta:
        title = f"{result.meta['map']} bifurcation diagram"
    _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
    return plot_ax


def iteration(
    state: IterationState,
    bounds: Bounds | None = None,
    *,
    ax=None,
    color: str | None = "black",
    cycle_color: str | None = "tab:blue",
    lw: float = 0.6,
    ms: float = 2.0,
    xlabel: str | None = "x",
    ylabel: str | None = "y",
    title: str | None = None,
) -> plt.Axes:
    """
    Draw one iteration snapshot: the trail (connected), the displayed state,
    and the detected cycle as a closed loop of circled points.
    """
    plot_ax = _get_ax(ax)
    trail = np.asarray(state.trail)
    if trail.shape[0]:
        style: dict[str, Any] = {"color": color, "linewidth": lw, "marker": "o", "markersize": ms}
        plot_ax.plot(trail[:, 0], trail[:, 1], **style)
    if not state.waiting:
        plot_ax.plot([state.x], [state.y], "o", color="tab:red", markersize=ms * 2)

    if state.detected_period and state.cycle_points:
        cyc = np.asarray(state.cycle_points + state.cycle_points[:1], dtype=float)
        plot_ax.plot(cyc[:, 0], cyc[:, 1], color=cycle_color, linewidth=lw)
        plot_ax.plot(
            cyc[:-1, 0], cyc[:-1, 1], linestyle="", marker="o", markersize=8,
            markerfacecolor="none", markeredgecolor=cycle_color,
        )

    if bounds is not None:
        _apply_limits(plot_ax, xlim=(bounds.x_min, bounds.x_max), ylim=(bounds.y_min, bounds.y_max))
    if title is None:
        title = _status_line(state)
    _apply_labels(plot_ax, xlabel=xlabel, ylabel=ylabel, title=title)
    return plot_ax


def _status_line(state: IterationState) -> str:
    if state.waiting:
        return "click to choose an initial condition"
    if state.diverged:
        status = "diverged"
    elif state.detected_period is None:
        status = "period: detecting"
    elif state.detected_period == 0:
        status = "period: chaotic / none"
    else:
        status = f"period: {state.detected_period}"
    return f"step {state.step}/{state.max_step}  {status}"
