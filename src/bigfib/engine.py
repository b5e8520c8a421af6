# src/bigfib/engine.py
from __future__ import annotations

import time
from typing import NamedTuple

from bigfib.arithmetic import add, multiply, subtract
from bigfib.bits import bits_of
from bigfib.digits import (
    DEFAULT_CAPACITY,
    CapacityOverflowError,
    DecimalBignum,
    InvalidArgumentError,
)
from bigfib.runtime import CFG

ALGORITHMS = ("fast", "linear")


class FibonacciOverflowError(CapacityOverflowError):
    """F(index) could not be computed within the digit capacity."""

    def __init__(self, index: int, digits: int, capacity: int):
        self.index = index
        super().__init__(
            digits,
            capacity,
            f"F({index}) needs at least {digits} digits; capacity is {capacity}",
        )


class FibResult(NamedTuple):
    value: str
    elapsed_ns: int


# --- Engines ------------------------------------------------------------------

def fast_doubling(k: int, capacity: int = DEFAULT_CAPACITY) -> DecimalBignum:
    """
    F(k) in O(log k) bignum operations.

    The state pair (a, b) = (F(n), F(n+1)) starts at n = 1, i.e. with the
    leading 1 bit of k already consumed. Each further bit doubles n:

        F(2n)   = F(n) * (2*F(n+1) - F(n))
        F(2n+1) = F(n)^2 + F(n+1)^2

    and a 1 bit then advances n by one more.
    """
    bits = bits_of(k)
    if k == 0:
        return DecimalBignum.zero(capacity)

    a = DecimalBignum.from_small_integer(1, capacity)
    b = DecimalBignum.from_small_integer(1, capacity)
    try:
        for bit in bits[1:]:
            # both halves read the pre-update a and b
            t2 = subtract(add(b, b), a)
            a_next = multiply(a, t2)
            b_next = add(multiply(b, b), multiply(a, a))
            a, b = a_next, b_next
            if bit:
                a, b = b, add(a, b)
    except CapacityOverflowError as e:
        raise FibonacciOverflowError(k, e.digits, e.capacity) from e
    return a


def linear(k: int, capacity: int = DEFAULT_CAPACITY) -> DecimalBignum:
    """F(k) by repeated addition; O(k) additions, used as a cross-check."""
    bits_of(k)  # same argument validation as the fast path
    prev = DecimalBignum.zero(capacity)
    if k == 0:
        return prev
    cur = DecimalBignum.from_small_integer(1, capacity)
    try:
        for _ in range(2, k + 1):
            prev, cur = cur, add(prev, cur)
    except CapacityOverflowError as e:
        raise FibonacciOverflowError(k, e.digits, e.capacity) from e
    return cur


_ENGINES = {"fast": fast_doubling, "linear": linear}


# --- Timed entry points ---------------------------------------------------------

def _resolve_capacity(capacity: int | None) -> int:
    if capacity is not None:
        return capacity
    return int(CFG("ENGINE.CAPACITY", DEFAULT_CAPACITY))


def compute(k: int, *, capacity: int | None = None, algorithm: str = "fast") -> FibResult:
    """
    Return (decimal string of F(k), nanoseconds spent in the engine).

    Only the engine call is timed; capacity resolution and string
    extraction are outside the measured window.
    """
    engine = _ENGINES.get(algorithm)
    if engine is None:
        raise InvalidArgumentError(f"unknown algorithm {algorithm!r}; choose one of {', '.join(ALGORITHMS)}")
    cap = _resolve_capacity(capacity)

    t0 = time.perf_counter_ns()
    value = engine(k, cap)
    elapsed = time.perf_counter_ns() - t0

    return FibResult(value.to_string(), elapsed)


def compute_linear(k: int, *, capacity: int | None = None) -> str:
    return linear(k, _resolve_capacity(capacity)).to_string()
