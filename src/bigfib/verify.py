# src/bigfib/verify.py
from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sympy import fibonacci

from bigfib.engine import compute, compute_linear


@dataclass(frozen=True, slots=True)
class Mismatch:
    index: int
    fast: str
    linear: str
    reference: str


def reference_value(k: int) -> str:
    """F(k) from sympy, used only as an independent oracle."""
    return str(fibonacci(k))


def cross_check(
    start: int,
    stop: int,
    *,
    capacity: int | None = None,
    on_index: Callable[[int], None] | None = None,
) -> list[Mismatch]:
    """
    Compare the fast engine against the linear engine and sympy for every
    index in [start, stop]. Returns the disagreeing indices (empty = all good).
    on_index, if given, is called after each index is checked.
    """
    bad: list[Mismatch] = []
    for k in range(start, stop + 1):
        fast = compute(k, capacity=capacity).value
        lin = compute_linear(k, capacity=capacity)
        ref = reference_value(k)
        if not (fast == lin == ref):
            bad.append(Mismatch(k, fast, lin, ref))
        if on_index is not None:
            on_index(k)
    return bad
