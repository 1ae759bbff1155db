# src/chaoslab/runtime/iteration.py
"""
Live iteration engine with period detection and scrubbable playback.

One engine instance is owned by one view and driven by a single tick source
(an animation timer, ``run_until_done``, or a test). ``advance`` is the only
operation that moves the simulation forward; everything else either restarts
it (``seed``, ``reset``, ``update``), toggles scheduling (``pause``,
``resume``) or changes what is displayed (``set_playback_step``).

Life cycle::

    WAITING --seed--> RUNNING <--pause/resume--> PAUSED
                         |
                         +--> FINISHED (iteration budget spent)
                         +--> DIVERGED (|x| or |y| above threshold, or non-finite)

``reset`` and ``update`` return to WAITING from any phase; ``seed`` starts a
fresh run from any phase.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
import logging
import math
from typing import Callable, Mapping, Optional

import numpy as np

from chaoslab.analysis.periodicity import extract_cycle, get_kernels
from chaoslab.config import DEFAULT_CONFIG, EngineConfig
from chaoslab.errors import ConfigError
from chaoslab.maps.base import MapDefinition, State
from chaoslab.runtime.guards import is_diverged, safe_step
from chaoslab.runtime.history import StateHistory, TrailBuffer

__all__ = ["Phase", "IterationState", "IterationEngine"]

logger = logging.getLogger(__name__)


class Phase(IntEnum):
    """Coarse engine phase, derived from the snapshot flags."""
    WAITING = 0
    RUNNING = 1
    PAUSED = 2
    FINISHED = 3
    DIVERGED = 4


@dataclass(frozen=True)
class IterationState:
    """
    Immutable snapshot returned by ``IterationEngine.get_state``.

    ``x``, ``y``, ``step`` and ``trail`` describe the displayed step, which is
    ``playback_step`` while scrubbing and the live step otherwise.
    ``max_step`` is always the live step count.

    ``detected_period``: None while undetermined, 0 once a finished run found
    no cycle (chaotic / none), k > 0 for a detected k-cycle.
    """
    x: float
    y: float
    step: int
    max_step: int
    waiting: bool
    running: bool
    diverged: bool
    finished: bool
    ic: State
    detected_period: Optional[int]
    cycle_points: tuple[State, ...]
    playback_step: Optional[int]
    trail: np.ndarray  # (m, 2), oldest first, read-only

    @property
    def phase(self) -> Phase:
        if self.waiting:
            return Phase.WAITING
        if self.diverged:
            return Phase.DIVERGED
        if self.finished:
            return Phase.FINISHED
        return Phase.RUNNING if self.running else Phase.PAUSED

    @property
    def scrubbed(self) -> bool:
        return self.playback_step is not None


StateCallback = Callable[["IterationEngine"], None]


def _check_count(name: str, value, minimum: int) -> int:
    if isinstance(value, bool) or int(value) != value:
        raise ConfigError(f"{name} must be an integer, got {value!r}")
    value = int(value)
    if value < minimum:
        raise ConfigError(f"{name} must be >= {minimum}, got {value}")
    return value


class IterationEngine:
    """
    Incremental, pausable orbit runner for a 2D map.

    Parameters
    ----------
    map_def : MapDefinition
        The map to iterate.
    iterates, lag, speed : int, optional
        Iteration budget, trail length and map applications per tick.
        Default to ``map_def.iteration_defaults``.
    params : mapping, optional
        Parameter overrides merged over ``map_def.default_params``.
    config : EngineConfig
        Thresholds and tolerances.

    Example:
        >>> from chaoslab.maps import logistic
        >>> eng = IterationEngine(logistic, iterates=2000, speed=50)
        >>> eng.seed(0.3, 0.3)
        >>> eng.run_until_done().detected_period
        2
    """

    def __init__(
        self,
        map_def: MapDefinition,
        *,
        iterates: Optional[int] = None,
        lag: Optional[int] = None,
        speed: Optional[int] = None,
        params: Optional[Mapping[str, float]] = None,
        config: EngineConfig = DEFAULT_CONFIG,
    ):
        self.map = map_def
        self.config = config
        d = map_def.iteration_defaults
        self._iterates, self._lag, self._speed, self._params = self._validate(
            d.iterates if iterates is None else iterates,
            d.lag if lag is None else lag,
            d.speed if speed is None else speed,
            params,
        )
        _, self._detect = get_kernels(config.jit)
        self._history = StateHistory()
        self._trail = TrailBuffer(self._lag)
        self._callbacks: list[StateCallback] = []
        self._clear()

    # ------------------------------------------------------------------ setup

    def _validate(self, iterates, lag, speed, params) -> tuple[int, int, int, dict[str, float]]:
        iterates = _check_count("iterates", iterates, 1)
        lag = _check_count("lag", lag, 1)
        speed = _check_count("speed", speed, 1)
        try:
            resolved = self.map.resolve_params(params)
        except KeyError as e:
            raise ConfigError(str(e.args[0])) from None
        return iterates, lag, speed, resolved

    def _clear(self) -> None:
        self._history.clear()
        self._trail.clear()
        self._ic: State = (0.0, 0.0)
        self._x = 0.0
        self._y = 0.0
        self._step = 0
        self._waiting = True
        self._running = False
        self._diverged = False
        self._finished = False
        self._detected: Optional[int] = None
        self._cycle: tuple[State, ...] = ()
        self._playback: Optional[int] = None

    # ------------------------------------------------------------- properties

    @property
    def iterates(self) -> int:
        return self._iterates

    @property
    def lag(self) -> int:
        return self._lag

    @property
    def speed(self) -> int:
        return self._speed

    @property
    def params(self) -> dict[str, float]:
        return dict(self._params)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def diverged(self) -> bool:
        return self._diverged

    @property
    def finished(self) -> bool:
        return self._finished

    # -------------------------------------------------------------- lifecycle

    def seed(self, x0: float, y0: float) -> None:
        """Start a fresh run from (x0, y0); discards any previous run."""
        self._clear()
        x0, y0 = float(x0), float(y0)
        self._ic = (x0, y0)
        self._x, self._y = x0, y0
        self._waiting = False
        self._history.append(x0, y0)
        if is_diverged(x0, y0, self.config.divergence_threshold):
            self._diverged = True
        else:
            self._trail.append(x0, y0)
            self._running = True
        logger.debug("seeded %s at (%r, %r)", self.map.key, x0, y0)
        self._notify()

    def advance(self) -> bool:
        """
        One tick: up to ``speed`` map applications, then period detection.

        Returns False (and changes nothing) when the engine is waiting, paused,
        diverged or finished.
        """
        if self._waiting or not self._running or self._diverged or self._finished:
            return False

        threshold = self.config.divergence_threshold
        step_fn = self.map.step
        params = self._params
        for _ in range(self._speed):
            if self._step >= self._iterates:
                break
            nx, ny = safe_step(step_fn, self._x, self._y, params)
            self._x, self._y = nx, ny
            self._step += 1
            self._history.append(nx, ny)
            if is_diverged(nx, ny, threshold):
                self._diverged = True
                self._running = False
                logger.debug("%s diverged at step %d", self.map.key, self._step)
                break
            self._trail.append(nx, ny)

        if not self._diverged:
            if self._detected is None and self._post_transient_len() > 3 * self.config.live_max_period:
                self._detect_period()
            if self._step >= self._iterates:
                self._finish()
        self._notify()
        return True

    def pause(self) -> bool:
        """Stop advancing; returns whether the engine was running."""
        was_running = self._running
        self._running = False
        if was_running:
            self._notify()
        return was_running

    def resume(self, run_immediately: bool = True) -> None:
        """
        Return the display to the live step and, if ``run_immediately``,
        restart advancing. ``resume(pause())`` restores the previous mode.
        """
        self._playback = None
        if run_immediately and not (self._waiting or self._diverged or self._finished):
            self._running = True
        self._notify()

    def reset(self) -> None:
        """Back to WAITING; history, period and state are discarded."""
        self._clear()
        self._notify()

    def update(
        self,
        *,
        iterates: Optional[int] = None,
        lag: Optional[int] = None,
        speed: Optional[int] = None,
        params: Optional[Mapping[str, float]] = None,
    ) -> None:
        """
        Change run settings and reset. ``params`` replaces the overrides
        (merged over the map defaults). Invalid values raise ConfigError and
        leave the engine untouched.
        """
        new_iterates, new_lag, new_speed, new_params = self._validate(
            self._iterates if iterates is None else iterates,
            self._lag if lag is None else lag,
            self._speed if speed is None else speed,
            self._params if params is None else params,
        )
        self._iterates, self._speed, self._params = new_iterates, new_speed, new_params
        if new_lag != self._lag:
            self._lag = new_lag
            self._trail = TrailBuffer(new_lag)
        self.reset()

    def run_until_done(self, max_ticks: Optional[int] = None) -> IterationState:
        """Tick synchronously until the run stops (or ``max_ticks`` ticks)."""
        ticks = 0
        while self._running and (max_ticks is None or ticks < max_ticks):
            self.advance()
            ticks += 1
        return self.get_state()

    # --------------------------------------------------------------- playback

    def set_playback_step(self, k: Optional[int]) -> None:
        """
        Display the state after exactly ``k`` applications (clamped into
        [0, live step]); ``None`` returns to live. Ignored while waiting.
        """
        if self._waiting:
            return
        if k is None:
            self._playback = None
        else:
            self._playback = min(max(0, int(k)), self._step)
        self._notify()

    def get_state(self) -> IterationState:
        if self._waiting:
            trail = np.empty((0, 2), dtype=np.float64)
            x, y, shown = self._x, self._y, 0
        elif self._playback is None:
            trail = self._trail.to_array()
            x, y, shown = self._x, self._y, self._step
        else:
            shown = self._playback
            x, y = self._history.state(shown)
            trail = self._trail_at(shown)
        trail.setflags(write=False)
        return IterationState(
            x=float(x),
            y=float(y),
            step=shown,
            max_step=self._step,
            waiting=self._waiting,
            running=self._running,
            diverged=self._diverged,
            finished=self._finished,
            ic=self._ic,
            detected_period=self._detected,
            cycle_points=self._cycle,
            playback_step=self._playback,
            trail=trail,
        )

    def on_state_change(self, callback: StateCallback) -> StateCallback:
        """Register ``callback(engine)``, called after every state change."""
        self._callbacks.append(callback)
        return callback

    # -------------------------------------------------------------- internals

    def _notify(self) -> None:
        for cb in list(self._callbacks):
            cb(self)

    def _trail_at(self, k: int) -> np.ndarray:
        # The diverging state itself never enters the live trail.
        stop = k if (self._diverged and k == self._step) else k + 1
        return self._history.window(stop - self._lag, stop)

    def _post_transient_len(self) -> int:
        return max(0, len(self._history) - (self.config.transient + 1))

    def _detect_period(self) -> None:
        hx, hy = self._history.views(self.config.transient + 1)
        n = int(hx.shape[0])
        if n < 2:
            return
        period = int(self._detect(hx, hy, n, self.config.live_max_period, self.config.live_period_tol))
        if period > 0:
            self._detected = period
            self._cycle = extract_cycle(hx, hy, n, period)
            logger.debug("%s: period %d detected at step %d", self.map.key, period, self._step)

    def _finish(self) -> None:
        self._finished = True
        self._running = False
        if self._detected is None and self._post_transient_len() > 2:
            self._detect_period()
        if self._detected is None:
            self._detected = 0
        logger.debug("%s finished after %d steps (period=%d)", self.map.key, self._step, self._detected)

    def __repr__(self) -> str:
        return (
            f"IterationEngine(map={self.map.key!r}, iterates={self._iterates}, lag={self._lag}, "
            f"speed={self._speed}, step={self._step}, phase={self.get_state().phase.name})"
        )
