# tests/unit/test_kernel.py
from __future__ import annotations

import numpy as np
import pytest

from chaoslab import kernel
from chaoslab.cobweb import logistic_cobweb, logistic_parabola
from chaoslab.errors import KernelNotInitializedError


@pytest.fixture(autouse=True)
def _fresh_kernel():
    kernel.teardown()
    yield
    kernel.teardown()


class FakeKernel:
    def __init__(self):
        self.started = 0
        self.closed = 0
        self.calls = []

    def start(self):
        self.started += 1

    def close(self):
        self.closed += 1

    def run(self, code, r=0.0, x=0.0):
        self.calls.append((code, r, x))
        return [r, x]


def test_run_requires_init():
    assert not kernel.is_initialized()
    with pytest.raises(KernelNotInitializedError):
        kernel.run("identity")
    with pytest.raises(KernelNotInitializedError):
        kernel.get_kernel()


def test_init_is_idempotent():
    fake = FakeKernel()
    assert kernel.init(fake) is fake
    assert kernel.init(FakeKernel()) is fake
    assert kernel.init() is fake
    assert fake.started == 1
    assert kernel.get_kernel() is fake


def test_run_delegates_and_returns_float_array():
    fake = FakeKernel()
    kernel.init(fake)
    out = kernel.run("cobweb", 3.2, 0.5)
    assert out.dtype == np.float64
    np.testing.assert_array_equal(out, [3.2, 0.5])
    assert fake.calls == [("cobweb", 3.2, 0.5)]


def test_teardown_closes_and_allows_reinit():
    fake = FakeKernel()
    kernel.init(fake)
    kernel.teardown()
    assert fake.closed == 1
    assert not kernel.is_initialized()
    kernel.teardown()  # no-op
    other = FakeKernel()
    assert kernel.init(other) is other


def test_init_rejects_non_kernel():
    with pytest.raises(TypeError):
        kernel.init(object())
    assert not kernel.is_initialized()


def test_function_kernel_programs():
    kernel.init()
    assert isinstance(kernel.get_kernel(), kernel.FunctionKernel)
    ident = kernel.run("identity")
    assert ident.size == 20
    np.testing.assert_array_equal(ident[0::2], ident[1::2])
    np.testing.assert_array_equal(kernel.run("logistic_parabola", 3.0), logistic_parabola(3.0))
    np.testing.assert_array_equal(kernel.run(" cobweb\n", 3.2, 0.5), logistic_cobweb(3.2, 0.5))
    with pytest.raises(ValueError, match="Unknown kernel program"):
        kernel.run("mandelbrot")


def test_function_kernel_extra_programs():
    k = kernel.FunctionKernel({"const": lambda r, x: np.array([r, r])})
    np.testing.assert_array_equal(k.run("const", 2.0), [2.0, 2.0])
    assert "identity" in k.programs
