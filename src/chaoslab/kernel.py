# src/chaoslab/kernel.py
"""
Process-wide math kernel bridge.

A kernel evaluates a named program with two scalar inputs and returns flat
``[x0, y0, x1, y1, ...]`` plot data, the same shape the cobweb helpers
produce. Exactly one kernel is active per process; ``init`` is idempotent
and ``teardown`` releases it.

``FunctionKernel`` is the built-in kernel. It serves the logistic view's
programs from ``chaoslab.cobweb``. External engines plug in by implementing
the ``Kernel`` protocol.
"""
from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Protocol, runtime_checkable

import numpy as np

from chaoslab import cobweb
from chaoslab.errors import KernelNotInitializedError

__all__ = [
    "Kernel",
    "FunctionKernel",
    "init",
    "teardown",
    "is_initialized",
    "get_kernel",
    "run",
]

logger = logging.getLogger(__name__)


@runtime_checkable
class Kernel(Protocol):
    def run(self, code: str, r: float = 0.0, x: float = 0.0) -> np.ndarray:
        ...


Program = Callable[[float, float], np.ndarray]


class FunctionKernel:
    """
    Kernel backed by Python callables keyed by program name.

    Built-in programs:
      - ``identity``: y = x at the integers 0..9
      - ``logistic_parabola``: y = r*x*(1-x) sampled on [0, 1]
      - ``cobweb``: logistic cobweb path from x
    """

    def __init__(self, programs: Optional[Dict[str, Program]] = None):
        self.programs: Dict[str, Program] = {
            "identity": lambda r, x: cobweb.identity_line(0.0, 9.0, 10),
            "logistic_parabola": lambda r, x: cobweb.logistic_parabola(r),
            "cobweb": lambda r, x: cobweb.logistic_cobweb(r, x),
        }
        if programs:
            self.programs.update(programs)

    def run(self, code: str, r: float = 0.0, x: float = 0.0) -> np.ndarray:
        name = code.strip()
        try:
            program = self.programs[name]
        except KeyError:
            raise ValueError(
                f"Unknown kernel program {name!r}; available: {sorted(self.programs)}"
            ) from None
        return program(float(r), float(x))


_kernel: Optional[Kernel] = None


def init(kernel: Optional[Kernel] = None) -> Kernel:
    """
    Activate ``kernel`` (default: ``FunctionKernel()``). Safe to call more
    than once; later calls return the already active kernel unchanged.
    """
    global _kernel
    if _kernel is not None:
        return _kernel
    k = kernel if kernel is not None else FunctionKernel()
    if not isinstance(k, Kernel):
        raise TypeError(f"kernel must provide run(code, r, x); got {type(k).__name__}")
    start = getattr(k, "start", None)
    if callable(start):
        start()
    _kernel = k
    logger.debug("math kernel initialized: %s", type(k).__name__)
    return k


def teardown() -> None:
    """Release the active kernel (calls its ``close()`` when present)."""
    global _kernel
    k, _kernel = _kernel, None
    if k is None:
        return
    close = getattr(k, "close", None)
    if callable(close):
        close()


def is_initialized() -> bool:
    return _kernel is not None


def get_kernel() -> Kernel:
    if _kernel is None:
        raise KernelNotInitializedError()
    return _kernel


def run(code: str, r: float = 0.0, x: float = 0.0) -> np.ndarray:
    """Run ``code`` on the active kernel; returns a float64 array."""
    result = np.asarray(get_kernel().run(code, r, x), dtype=np.float64)
    logger.debug("kernel run %r (r=%r, x=%r) -> %d values", code.strip(), r, x, result.size)
    return result
