# src/chaoslab/conjugacy.py
"""
Topological conjugacy between two 1D maps.

Given maps G and g and a candidate conjugacy C with ``C o G = g o C``, an
orbit of G started at x0 is carried by C onto the orbit of g started at
C(x0). ``Conjugacy`` keeps one shared seed in G's coordinates and derives
the g-side seed from it, so both cobweb paths always describe the same orbit
when C is a true conjugacy.

Every callable is optional. Missing callables make the dependent operations
return ``None`` or empty arrays; nothing here raises on bad numerics.

Example (the classic pair, C(x) = 4x - 2 carries the full logistic map onto
x -> 2 - x**2):

    >>> from chaoslab.cobweb import logistic_fn, quadratic_fn
    >>> conj = Conjugacy(G=logistic_fn(4.0), g=quadratic_fn(2.0), C=lambda x: 4 * x - 2)
    >>> conj.x0_g(0.25)
    -1.0
"""
from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Iterable, Optional

import numpy as np

from chaoslab.cobweb import ScalarFn, cobweb_path, invert_numerically
from chaoslab.config import DEFAULT_CONFIG
from chaoslab.runtime.guards import safe_call

__all__ = ["Conjugacy", "G_DOMAIN"]

# Seed domain in G's coordinates.
G_DOMAIN = (-0.05, 1.05)


def _clamp(x: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, x))


@dataclass
class Conjugacy:
    G: Optional[ScalarFn] = None
    g: Optional[ScalarFn] = None
    C: Optional[ScalarFn] = None
    C_inv: Optional[ScalarFn] = None
    auto_invert: bool = True
    domain: tuple[float, float] = G_DOMAIN
    x0: float = 0.2  # shared seed, G coordinates

    def x0_g(self, x0_G: Optional[float] = None) -> Optional[float]:
        """C(x0_G) when finite; None when C is missing or undefined there."""
        if self.C is None:
            return None
        v = safe_call(self.C, self.x0 if x0_G is None else float(x0_G))
        return v if math.isfinite(v) else None

    def seed_from_G(self, x: float) -> float:
        """Pick a seed on G's panel (clamped into the domain)."""
        lo, hi = self.domain
        self.x0 = _clamp(float(x), lo, hi)
        return self.x0

    def seed_from_g(self, x: float) -> Optional[float]:
        """
        Pick a seed on g's panel and pull it back to G's coordinates.

        With ``auto_invert`` C is inverted numerically over the domain;
        otherwise ``C_inv`` is used and clamped. Returns the new shared seed,
        or None (seed unchanged) when no preimage is available.
        """
        lo, hi = self.domain
        if self.auto_invert:
            if self.C is None:
                return None
            inv = invert_numerically(self.C, float(x), lo, hi)
        else:
            if self.C_inv is None:
                return None
            inv = safe_call(self.C_inv, float(x))
            if not math.isfinite(inv):
                return None
            inv = _clamp(inv, lo, hi)
        if inv is None:
            return None
        self.x0 = inv
        return inv

    def paths(
        self,
        x0_G: Optional[float] = None,
        n: int = DEFAULT_CONFIG.cobweb_iterations,
    ) -> tuple[np.ndarray, np.ndarray]:
        """Cobweb paths of G from x0_G and of g from C(x0_G)."""
        x0 = self.x0 if x0_G is None else float(x0_G)
        path_G = cobweb_path(self.G, x0, n)
        x0g = self.x0_g(x0)
        path_g = cobweb_path(self.g, x0g, n) if x0g is not None else np.empty((0,), dtype=float)
        return path_G, path_g

    def residual(self, xs: Iterable[float]) -> np.ndarray:
        """
        C(G(x)) - g(C(x)) at each x; identically ~0 for a true conjugacy.
        Entries are nan where any piece is missing or non-finite.
        """
        out = []
        for x in xs:
            x = float(x)
            lhs = safe_call(self.C, safe_call(self.G, x))
            rhs = safe_call(self.g, safe_call(self.C, x))
            out.append(lhs - rhs)
        return np.asarray(out, dtype=float)
