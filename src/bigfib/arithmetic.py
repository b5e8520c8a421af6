# src/bigfib/arithmetic.py
"""
Schoolbook arithmetic over DecimalBignum values.

Each primitive walks the operands from the least significant digit upward,
collects the result in that order and normalizes once at the end. The
result capacity is the smaller of the two operand capacities.
"""

from __future__ import annotations

from bigfib.digits import (
    CapacityOverflowError,
    DecimalBignum,
    InvalidArgumentError,
    from_reversed,
    reversed_digits,
)


def _capacity(a: DecimalBignum, b: DecimalBignum) -> int:
    return min(a.capacity, b.capacity)


def compare(a: DecimalBignum, b: DecimalBignum) -> int:
    """Return -1, 0 or 1 as a is less than, equal to or greater than b."""
    if len(a) != len(b):
        return -1 if len(a) < len(b) else 1
    if a.digits == b.digits:
        return 0
    return -1 if a.digits < b.digits else 1


def add(a: DecimalBignum, b: DecimalBignum) -> DecimalBignum:
    ra, rb = reversed_digits(a), reversed_digits(b)
    la, lb = len(ra), len(rb)
    out: list[int] = []
    carry = 0
    for i in range(max(la, lb)):
        s = (ra[i] if i < la else 0) + (rb[i] if i < lb else 0) + carry
        if s >= 10:
            out.append(s - 10)
            carry = 1
        else:
            out.append(s)
            carry = 0
    if carry:
        out.append(carry)
    return from_reversed(out, _capacity(a, b))


def subtract(a: DecimalBignum, b: DecimalBignum) -> DecimalBignum:
    """a - b for a >= b; a smaller minuend is an InvalidArgumentError."""
    if compare(a, b) < 0:
        raise InvalidArgumentError(f"subtract would go negative: {a} - {b}")
    ra, rb = reversed_digits(a), reversed_digits(b)
    lb = len(rb)
    out: list[int] = []
    borrow = 0
    for i, da in enumerate(ra):
        d = da - borrow - (rb[i] if i < lb else 0)
        if d < 0:
            d += 10
            borrow = 1
        else:
            borrow = 0
        out.append(d)
    # a >= b guarantees no borrow is left over
    return from_reversed(out, _capacity(a, b))


def multiply(a: DecimalBignum, b: DecimalBignum) -> DecimalBignum:
    """
    Digit-by-digit convolution.

    For each digit of b, the inner pass over a's digits adds its partial
    products into the accumulator at position ia+ib, absorbing whatever
    earlier passes left there and carrying as it goes. The pass's final
    carry lands one past its last position, which no earlier pass touched.
    """
    ra, rb = reversed_digits(a), reversed_digits(b)
    la, lb = len(ra), len(rb)
    cap = _capacity(a, b)
    # Shortest possible product of non-zero operands is la+lb-1 digits.
    if not (a.is_zero or b.is_zero) and la + lb - 1 > cap:
        raise CapacityOverflowError(la + lb - 1, cap)

    acc = [0] * (la + lb)
    for ib, db in enumerate(rb):
        carry = 0
        for ia, da in enumerate(ra):
            t = da * db + acc[ia + ib] + carry
            carry, acc[ia + ib] = divmod(t, 10)
        acc[ib + la] = carry
    return from_reversed(acc, cap)
