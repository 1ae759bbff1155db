# src/chaoslab/runtime/history.py
from __future__ import annotations

import numpy as np

__all__ = ["StateHistory", "TrailBuffer"]


def _resize_1d(arr: np.ndarray, new_cap: int) -> np.ndarray:
    out = np.zeros((new_cap,), dtype=arr.dtype)
    out[: arr.shape[0]] = arr
    return out


class StateHistory:
    """
    Growable (x, y) store indexed by step number.

    Entry k is the state after exactly k map applications; entry 0 is the
    initial condition. Buffers grow geometrically so appends stay amortized O(1)
    at animation rates.
    """

    def __init__(self, initial_capacity: int = 1024) -> None:
        cap = max(1, int(initial_capacity))
        self.x = np.zeros((cap,), dtype=np.float64)
        self.y = np.zeros((cap,), dtype=np.float64)
        self._cap = cap
        self.n = 0

    def __len__(self) -> int:
        return self.n

    def clear(self) -> None:
        self.n = 0

    def append(self, x: float, y: float) -> None:
        self._ensure_capacity(self.n + 1)
        self.x[self.n] = x
        self.y[self.n] = y
        self.n += 1

    def state(self, k: int) -> tuple[float, float]:
        if not 0 <= k < self.n:
            raise IndexError(f"step {k} out of range [0, {self.n - 1}]")
        return float(self.x[k]), float(self.y[k])

    def window(self, start: int, stop: int) -> np.ndarray:
        """(m, 2) copy of entries [start, stop), clipped to the filled range."""
        start = max(0, int(start))
        stop = min(self.n, int(stop))
        if stop <= start:
            return np.empty((0, 2), dtype=np.float64)
        return np.column_stack((self.x[start:stop], self.y[start:stop]))

    def views(self, start: int = 0) -> tuple[np.ndarray, np.ndarray]:
        """Contiguous (x, y) views of entries [start, n); no copy."""
        start = min(max(0, int(start)), self.n)
        return self.x[start: self.n], self.y[start: self.n]

    def _ensure_capacity(self, min_needed: int) -> None:
        if min_needed <= self._cap:
            return
        new_cap = self._cap
        while new_cap < min_needed:
            new_cap *= 2
        self.x = _resize_1d(self.x[: self.n], new_cap)
        self.y = _resize_1d(self.y[: self.n], new_cap)
        self._cap = new_cap


class TrailBuffer:
    """
    Fixed-capacity ring of the most recent (x, y) states.

    Once full, each append overwrites the oldest entry in place.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = int(capacity)
        self._data = np.zeros((self.capacity, 2), dtype=np.float64)
        self._head = 0  # slot of the oldest entry
        self.size = 0

    def __len__(self) -> int:
        return self.size

    def clear(self) -> None:
        self._head = 0
        self.size = 0

    def append(self, x: float, y: float) -> None:
        if self.size < self.capacity:
            slot = (self._head + self.size) % self.capacity
            self.size += 1
        else:
            slot = self._head
            self._head = (self._head + 1) % self.capacity
        self._data[slot, 0] = x
        self._data[slot, 1] = y

    def to_array(self) -> np.ndarray:
        """(size, 2) copy, oldest first."""
        idx = (self._head + np.arange(self.size)) % self.capacity
        return self._data[idx].copy()
