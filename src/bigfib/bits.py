# src/bigfib/bits.py
from __future__ import annotations

from bigfib.digits import InvalidArgumentError


def bits_of(k: int) -> tuple[int, ...]:
    """
    Binary expansion of k >= 0, most significant bit first.

    bits_of(0) == (0,); for k > 0 the first element is always 1.
    The sequence is built from the bit length downward, so there is no
    recursion and no reversal step.
    """
    if not isinstance(k, int) or isinstance(k, bool):
        raise InvalidArgumentError(f"index must be an int, got {type(k).__name__}")
    if k < 0:
        raise InvalidArgumentError(f"index must be >= 0, got {k}")
    if k == 0:
        return (0,)
    return tuple((k >> i) & 1 for i in range(k.bit_length() - 1, -1, -1))
