# src/chaoslab/cli.py
"""
Command line entry point.

    chaoslab maps list
    chaoslab bifurcation henon --dparam 1e-4 --plot henon.png
    chaoslab iterate logistic --x0 0.3 --y0 0.3 --iterates 2000
    chaoslab cobweb logistic --param 3.2 --x0 0.5
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from chaoslab.analysis import run_bifurcation_sweep
from chaoslab.cobweb import logistic_fn, orbit, quadratic_fn
from chaoslab.config import EngineConfig, load_config
from chaoslab.errors import ChaoslabError
from chaoslab.maps import get_map, registry
from chaoslab.runtime import IterationEngine, IterationState

__all__ = ["main", "build_parser"]

logger = logging.getLogger(__name__)

_SCALAR_MAPS = {"logistic": logistic_fn, "quadratic": quadratic_fn}


def _assignment(text: str) -> tuple[str, float]:
    name, sep, value = text.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name.strip(), float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"value for {name.strip()!r} is not a number: {value!r}") from None


def _param_overrides(pairs) -> dict[str, float] | None:
    return dict(pairs) if pairs else None


def _format_period(state: IterationState) -> str:
    if state.diverged:
        return f"diverged at step {state.max_step}"
    if state.detected_period is None:
        return "detecting…"
    if state.detected_period == 0:
        return "chaotic / none"
    return str(state.detected_period)


# ---------------------------------------------------------------- commands

def _cmd_maps_list(args, config: EngineConfig) -> int:
    for key, m in sorted(registry().items()):
        params = ", ".join(f"{k}={v:g}" for k, v in m.default_params.items())
        print(f"{key:<10} {m.name:<10} sweep={m.bifurcation_param}  {params}")
    return 0


def _cmd_bifurcation(args, config: EngineConfig) -> int:
    map_def = get_map(args.map)
    map_params = dict(map_def.default_params)
    map_params.update(_param_overrides(args.set) or {})
    result = run_bifurcation_sweep(
        map_def,
        config=config,
        param_min=args.param_min,
        param_max=args.param_max,
        d_param=args.dparam,
        N=args.N,
        ic=tuple(args.ic) if args.ic else None,
        map_params=map_params,
    )
    n_div = int(result.diverged.size)
    print(
        f"{map_def.key}: {result.values.size} values of {result.param_name}, "
        f"{len(result)} points, {n_div} diverged"
    )
    print(f"period-doubling onsets ({result.param_name}):")
    doublings = result.sorted_doublings()
    if not doublings:
        print("  none")
    for period, value in doublings:
        print(f"  {period:>5} @ {value:.6g}")

    if args.plot:
        import matplotlib
        matplotlib.use("Agg")
        from chaoslab import plot

        target = Path(args.plot)
        if target.is_dir():
            target = target / plot.export.default_filename(map_def, "bifurcation")
        ax = plot.bifurcation_diagram(result, var=args.var, title=f"{map_def.name} bifurcation diagram")
        for path in plot.export.savefig(ax, target):
            print(f"wrote {path}")
    return 0


def _cmd_iterate(args, config: EngineConfig) -> int:
    map_def = get_map(args.map)
    engine = IterationEngine(
        map_def,
        iterates=args.iterates,
        lag=args.lag,
        speed=args.speed,
        params=_param_overrides(args.set),
        config=config,
    )
    engine.seed(args.x0, args.y0)
    state = engine.run_until_done()
    print(f"{map_def.key}: step {state.max_step}/{engine.iterates}  x={state.x:.10g}  y={state.y:.10g}")
    print(f"period: {_format_period(state)}")
    for x, y in state.cycle_points:
        print(f"  ({x:.10g}, {y:.10g})")
    return 0


def _cmd_cobweb(args, config: EngineConfig) -> int:
    f = _SCALAR_MAPS[args.map](args.param)
    steps = config.cobweb_iterations if args.steps is None else args.steps
    values = orbit(f, args.x0, steps)
    for k, v in enumerate(values):
        print(f"{k:>4}  {v:.10g}")
    if values.size < steps + 1:
        print(f"orbit escaped after {values.size - 1} steps")
    return 0


# ------------------------------------------------------------------ parser

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chaoslab", description="Explore discrete dynamical systems.")
    parser.add_argument("--config", metavar="PATH", help="engine configuration (TOML)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="more logging (-vv for debug)")
    sub = parser.add_subparsers(dest="command", required=True)

    maps_p = sub.add_parser("maps", help="map registry")
    maps_sub = maps_p.add_subparsers(dest="maps_command", required=True)
    maps_sub.add_parser("list", help="list registered maps").set_defaults(func=_cmd_maps_list)

    bif = sub.add_parser("bifurcation", help="run a bifurcation sweep")
    bif.add_argument("map")
    bif.add_argument("--param-min", type=float)
    bif.add_argument("--param-max", type=float)
    bif.add_argument("--dparam", type=float)
    bif.add_argument("-N", type=int, dest="N")
    bif.add_argument("--ic", type=float, nargs=2, metavar=("X", "Y"))
    bif.add_argument("--set", type=_assignment, action="append", metavar="NAME=VALUE")
    bif.add_argument("--var", choices=("x", "y", "both"), default="x")
    bif.add_argument("--plot", metavar="PATH", help="save the diagram to PATH (file or directory)")
    bif.set_defaults(func=_cmd_bifurcation)

    it = sub.add_parser("iterate", help="run the live engine to completion")
    it.add_argument("map")
    it.add_argument("--x0", type=float, required=True)
    it.add_argument("--y0", type=float, required=True)
    it.add_argument("--iterates", type=int)
    it.add_argument("--lag", type=int)
    it.add_argument("--speed", type=int)
    it.add_argument("--set", type=_assignment, action="append", metavar="NAME=VALUE")
    it.set_defaults(func=_cmd_iterate)

    cw = sub.add_parser("cobweb", help="print the orbit of a 1D map")
    cw.add_argument("map", choices=sorted(_SCALAR_MAPS))
    cw.add_argument("--param", type=float, required=True)
    cw.add_argument("--x0", type=float, required=True)
    cw.add_argument("--steps", type=int)
    cw.set_defaults(func=_cmd_cobweb)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    try:
        config = load_config(args.config)
        return args.func(args, config)
    except ChaoslabError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
