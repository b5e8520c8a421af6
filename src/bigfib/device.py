# src/bigfib/device.py
"""
File-like front end for the engine.

The handle position is the Fibonacci index: seek() moves it (clamped to
[0, max_index]), read() returns F(position) as a decimal string and write()
reports how long the last read spent inside the engine, in nanoseconds.
Only one handle may be open at a time; a second open() fails immediately
with DeviceBusyError instead of waiting.
"""

from __future__ import annotations

import os
import threading

from bigfib.digits import DEFAULT_CAPACITY
from bigfib.engine import ALGORITHMS, compute
from bigfib.runtime import CFG
from bigfib.utility import debug, fmt_ns

DEFAULT_MAX_INDEX = 500


class DeviceBusyError(RuntimeError):
    pass


class FibDevice:
    def __init__(
        self,
        max_index: int | None = None,
        capacity: int | None = None,
        algorithm: str | None = None,
        name: str = "fibonacci",
    ):
        self.name = name
        self.max_index = int(max_index if max_index is not None else CFG("ENGINE.MAX_INDEX", DEFAULT_MAX_INDEX))
        self.capacity = int(capacity if capacity is not None else CFG("ENGINE.CAPACITY", DEFAULT_CAPACITY))
        self.algorithm = algorithm or CFG("ENGINE.ALGORITHM", "fast")
        if self.max_index < 0:
            raise ValueError(f"max_index must be >= 0, got {self.max_index}")
        if self.algorithm not in ALGORITHMS:
            raise ValueError(f"unknown algorithm {self.algorithm!r}")
        self._gate = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._gate.locked()

    def open(self) -> FibHandle:
        if not self._gate.acquire(blocking=False):
            debug(f"{self.name}: open refused, device in use")
            raise DeviceBusyError(f"{self.name} is in use")
        return FibHandle(self)

    def _release(self) -> None:
        self._gate.release()


class FibHandle:
    """One open session on a FibDevice. Holds its own position and timing."""

    def __init__(self, device: FibDevice):
        self._device = device
        self._pos = 0
        self._elapsed_ns = 0
        self._closed = False

    # --- context manager ---

    def __enter__(self) -> FibHandle:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --- file operations ---

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise ValueError("I/O operation on closed handle")

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self._device._release()

    def tell(self) -> int:
        self._check_open()
        return self._pos

    def seek(self, offset: int, whence: int = os.SEEK_SET) -> int:
        self._check_open()
        limit = self._device.max_index
        if whence == os.SEEK_SET:
            new_pos = offset
        elif whence == os.SEEK_CUR:
            new_pos = self._pos + offset
        elif whence == os.SEEK_END:
            new_pos = limit - offset
        else:
            raise ValueError(f"invalid whence ({whence})")

        self._pos = min(max(new_pos, 0), limit)
        return self._pos

    def read(self) -> str:
        """Compute F(position). The position itself does not advance."""
        self._check_open()
        dev = self._device
        value, self._elapsed_ns = compute(self._pos, capacity=dev.capacity, algorithm=dev.algorithm)
        debug(f"{dev.name}: F({self._pos}) {len(value)} digits in {fmt_ns(self._elapsed_ns)} ({dev.algorithm})")
        return value

    def write(self, data: bytes | str = b"") -> int:
        """Writes are not stored; the return value is the last read's engine time in ns."""
        self._check_open()
        return self._elapsed_ns

    def elapsed_time(self) -> int:
        self._check_open()
        return self._elapsed_ns
