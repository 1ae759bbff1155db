# src/chaoslab/plot/_export.py
from __future__ import annotations
from pathlib import Path
from typing import Iterable

import matplotlib.pyplot as plt

from chaoslab.maps.base import MapDefinition

__all__ = ["savefig", "show", "default_filename"]


def _figure_of(target) -> plt.Figure:
    # Axes carry their parent figure; a Figure has no `.figure` of its own.
    fig = getattr(target, "figure", None)
    return target if fig is None else fig


def _normalize_formats(fmts: Iterable[str]) -> list[str]:
    out: list[str] = []
    for raw in fmts:
        fmt = str(raw).strip().lower().lstrip(".")
        if fmt and fmt not in out:
            out.append(fmt)
    if not out:
        raise ValueError("At least one non-empty export format is required.")
    return out


def default_filename(map_def: MapDefinition, kind: str, fmt: str = "png") -> str:
    """File name used for exported figures, e.g. ``henon-bifurcation.png``."""
    return f"{map_def.slug}-{kind}.{fmt.lstrip('.')}"


def savefig(
    fig_or_ax,
    path: str | Path,
    *,
    fmts: Iterable[str] | None = None,
    dpi: int = 150,
    transparent: bool = False,
    bbox_inches: str | None = "tight",
) -> list[Path]:
    """
    Write a figure (or the figure owning an Axes) and return the paths written.

    Without ``fmts`` the suffix of ``path`` picks the format (png if it has
    none). With ``fmts`` one file per format is written next to ``path``,
    named ``<stem>.<fmt>``. Parent directories are created.
    """
    fig = _figure_of(fig_or_ax)
    path = Path(path)
    formats = _normalize_formats(fmts if fmts is not None else [path.suffix or "png"])
    stem = path.with_suffix("")
    stem.parent.mkdir(parents=True, exist_ok=True)

    paths = [stem.with_suffix(f".{fmt}") for fmt in formats]
    for out in paths:
        fig.savefig(out, dpi=dpi, transparent=transparent, bbox_inches=bbox_inches)
    return paths


def show() -> None:
    plt.show()
