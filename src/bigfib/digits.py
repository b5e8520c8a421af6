# src/bigfib/digits.py
from __future__ import annotations

import re
from dataclasses import dataclass, field

DEFAULT_CAPACITY = 256

_NUMERAL_RE = re.compile(r"0|[1-9][0-9]*")


# --- Errors -------------------------------------------------------------------

class BignumError(Exception):
    pass


class InvalidArgumentError(BignumError, ValueError):
    pass


class CapacityOverflowError(BignumError, OverflowError):
    """A digit sequence would not fit in the declared capacity."""

    def __init__(self, digits: int, capacity: int, message: str | None = None):
        self.digits = digits
        self.capacity = capacity
        super().__init__(message or f"{digits} digits exceed capacity of {capacity}")


# --- Decimal bignum -----------------------------------------------------------

@dataclass(frozen=True, slots=True)
class DecimalBignum:
    """
    Non-negative integer held as decimal digit characters, most significant first.

    The value is immutable. Construction validates the numeral form:
      - ASCII digits only
      - no leading zero unless the value is exactly "0"
      - at most `capacity` digits (CapacityOverflowError otherwise)
    """
    digits: str
    capacity: int = field(default=DEFAULT_CAPACITY, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.capacity, int) or isinstance(self.capacity, bool) or self.capacity < 1:
            raise InvalidArgumentError(f"capacity must be a positive integer, got {self.capacity!r}")
        if not isinstance(self.digits, str) or not _NUMERAL_RE.fullmatch(self.digits):
            raise InvalidArgumentError(f"not a decimal numeral: {self.digits!r}")
        if len(self.digits) > self.capacity:
            raise CapacityOverflowError(len(self.digits), self.capacity)

    @classmethod
    def zero(cls, capacity: int = DEFAULT_CAPACITY) -> DecimalBignum:
        return cls("0", capacity)

    @classmethod
    def from_small_integer(cls, value: int, capacity: int = DEFAULT_CAPACITY) -> DecimalBignum:
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidArgumentError(f"expected an int, got {type(value).__name__}")
        if value < 0:
            raise InvalidArgumentError(f"negative values are not representable: {value}")
        rev: list[int] = []
        while True:
            value, d = divmod(value, 10)
            rev.append(d)
            if not value:
                break
        return from_reversed(rev, capacity)

    @property
    def is_zero(self) -> bool:
        return self.digits == "0"

    def fits(self, n_digits: int) -> bool:
        return n_digits <= self.capacity

    def to_string(self) -> str:
        return self.digits

    def __str__(self) -> str:
        return self.digits

    def __len__(self) -> int:
        return len(self.digits)


# --- Internal digit-order helpers ----------------------------------------------
# Primitives work least-significant first and reverse exactly once on the way out.

def reversed_digits(x: DecimalBignum) -> list[int]:
    """Digits of x as ints, least significant first."""
    return [ord(c) - 48 for c in reversed(x.digits)]


def from_reversed(rev: list[int], capacity: int) -> DecimalBignum:
    """
    Build a DecimalBignum from least-significant-first digits.
    High-order zeros are stripped (keeping a single "0"); the capacity check
    happens before the value is assembled.
    """
    n = len(rev)
    while n > 1 and rev[n - 1] == 0:
        n -= 1
    if n > capacity:
        raise CapacityOverflowError(n, capacity)
    return DecimalBignum("".join(chr(48 + rev[i]) for i in range(n - 1, -1, -1)), capacity)
