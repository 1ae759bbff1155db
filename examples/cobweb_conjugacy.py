"""
Cobweb of the logistic map at r=4 next to its conjugate c - x^2 (c=2).

C(x) = 4x - 2 maps orbits of G(x) = 4x(1-x) onto orbits of g(x) = 2 - x^2,
so the two staircases visit corresponding points step by step.
"""

from __future__ import annotations
import matplotlib.pyplot as plt
from chaoslab import Conjugacy
from chaoslab.cobweb import logistic_fn, quadratic_fn
from chaoslab.plot import export, cobweb

conj = Conjugacy(G=logistic_fn(4.0), g=quadratic_fn(2.0), C=lambda x: 4.0 * x - 2.0)
x0 = 0.2
print(f"seed in G: {x0}  ->  seed in g: {conj.x0_g(x0)}")
print(f"max |C(G(x)) - g(C(x))| on the seed orbit: {abs(conj.residual([x0, 0.5, 0.9])).max():.2e}")

fig, (ax_G, ax_g) = plt.subplots(1, 2, figsize=(12, 6), layout="constrained")
cobweb(conj.G, x0, steps=30, xlim=(0.0, 1.0), ax=ax_G, title="G(x) = 4x(1 - x)")
cobweb(conj.g, conj.x0_g(x0), steps=30, xlim=(-2.0, 2.0), ax=ax_g, title="g(x) = 2 - x²")

export.show()
