# src/bigfib/progress.py
from __future__ import annotations

import sys
import time


class Progress:
    """One-line throttled progress bar on STDOUT; a no-op when disabled."""

    THROTTLE = 0.05
    BAR_LEN = 24

    def __init__(self, total: int, *, enabled: bool = True, label: str = ""):
        self.total = max(1, int(total))
        self.enabled = enabled
        self.label = label
        self.last_draw = 0.0
        self.spin = "|/-\\"
        self.i = 0

    def __enter__(self) -> Progress:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.done()

    def update(self, done: int) -> None:
        if not self.enabled:
            return
        now = time.perf_counter()
        if now - self.last_draw < self.THROTTLE:
            return
        self.last_draw = now
        self.i = (self.i + 1) % len(self.spin)
        frac = min(max(done / self.total, 0.0), 1.0)
        fill = int(frac * self.BAR_LEN)
        bar = "#" * fill + "-" * (self.BAR_LEN - fill)
        sys.stdout.write(f"\r[{self.spin[self.i]}] [{bar}] {int(frac * 100):3d}%  {self.label} {done}/{self.total}")
        sys.stdout.flush()

    def done(self) -> None:
        if not self.enabled:
            return
        sys.stdout.write("\r" + " " * 80 + "\r")
        sys.stdout.flush()
