# tests/unit/test_conjugacy.py
from __future__ import annotations

import math

import numpy as np
import pytest

from chaoslab.cobweb import cobweb_path, logistic_fn, quadratic_fn
from chaoslab.conjugacy import G_DOMAIN, Conjugacy


def _classic(**kw) -> Conjugacy:
    # C(x) = 4x - 2 carries x -> 4x(1-x) onto x -> 2 - x**2
    return Conjugacy(G=logistic_fn(4.0), g=quadratic_fn(2.0), C=lambda x: 4.0 * x - 2.0, **kw)


def test_x0_g_applies_c():
    conj = _classic()
    assert conj.x0_g(0.25) == -1.0
    assert conj.x0_g() == pytest.approx(4.0 * 0.2 - 2.0)


def test_x0_g_missing_or_undefined():
    assert Conjugacy().x0_g(0.3) is None
    assert Conjugacy(C=lambda x: math.log(x)).x0_g(-1.0) is None


def test_residual_vanishes_for_true_conjugacy():
    xs = np.linspace(0.0, 1.0, 11)
    np.testing.assert_allclose(_classic().residual(xs), 0.0, atol=1e-12)


def test_residual_detects_wrong_conjugacy():
    conj = Conjugacy(G=logistic_fn(4.0), g=quadratic_fn(2.0), C=lambda x: x)
    assert np.max(np.abs(conj.residual([0.1, 0.3, 0.7]))) > 0.1
    assert np.all(np.isnan(Conjugacy(G=logistic_fn(4.0)).residual([0.1, 0.2])))


def test_seed_from_G_clamps():
    conj = _classic()
    assert conj.seed_from_G(2.0) == G_DOMAIN[1]
    assert conj.seed_from_G(-3.0) == G_DOMAIN[0]
    assert conj.seed_from_G(0.4) == 0.4
    assert conj.x0 == 0.4


def test_seed_from_g_auto_inverts():
    conj = _classic()
    assert conj.seed_from_g(-1.0) == pytest.approx(0.25, abs=1e-9)
    assert conj.x0 == pytest.approx(0.25, abs=1e-9)
    # outside C's range over the domain: no preimage, seed unchanged
    assert conj.seed_from_g(5.0) is None
    assert conj.x0 == pytest.approx(0.25, abs=1e-9)


def test_seed_from_g_manual_inverse():
    conj = _classic(auto_invert=False, C_inv=lambda y: (y + 2.0) / 4.0)
    assert conj.seed_from_g(0.0) == 0.5
    assert conj.seed_from_g(10.0) == G_DOMAIN[1]
    assert _classic(auto_invert=False).seed_from_g(0.0) is None


def test_paths_follow_the_same_orbit():
    conj = _classic()
    path_G, path_g = conj.paths(0.3, 20)
    assert path_G.size == 2 + 4 * 20
    np.testing.assert_array_equal(path_G, cobweb_path(logistic_fn(4.0), 0.3, 20))
    assert path_g[0] == pytest.approx(4.0 * 0.3 - 2.0)
    # orbit of g is C applied to the orbit of G
    np.testing.assert_allclose(4.0 * path_G[0:12:4] - 2.0, path_g[0:12:4], atol=1e-9)


def test_paths_without_c():
    path_G, path_g = Conjugacy(G=logistic_fn(4.0)).paths(0.3, 5)
    assert path_G.size == 22
    assert path_g.size == 0
