# src/chaoslab/jit.py
from __future__ import annotations
from typing import Callable
import warnings

# The only place numba is touched. Engines ask for kernels through
# jit_compile() and get plain Python back when numba is unavailable.

__all__ = ["jit_compile", "numba_available"]

try:
    from numba import njit
    _NUMBA_OK = True
except Exception:
    _NUMBA_OK = False
    njit = None  # type: ignore

_compiled: dict[Callable, Callable] = {}


def numba_available() -> bool:
    return _NUMBA_OK


def jit_compile(fn: Callable, *, jit: bool = True) -> Callable:
    """
    Return ``fn`` compiled with ``numba.njit`` (or ``fn`` itself).

    ``jit=False`` always gives the Python function. When numba cannot be
    imported a RuntimeWarning is issued and the Python function is used.
    Dispatchers are cached per function so building several engines
    compiles each kernel once; a failure inside numba is re-raised as
    RuntimeError.
    """
    if not jit:
        return fn
    if not _NUMBA_OK:
        warnings.warn(
            "Numba not found; period detection runs in pure Python. "
            "Install numba (pip install numba) to speed up sweeps.",
            RuntimeWarning,
            stacklevel=3,
        )
        return fn

    compiled = _compiled.get(fn)
    if compiled is None:
        try:
            compiled = njit(cache=False)(fn)
        except Exception as exc:
            raise RuntimeError(f"numba could not compile {fn.__name__}: {type(exc).__name__}: {exc}") from exc
        _compiled[fn] = compiled
    return compiled
