# tests/test_bits.py
from __future__ import annotations

import pytest

from bigfib.bits import bits_of
from bigfib.digits import InvalidArgumentError


@pytest.mark.parametrize("k,expected", [
    (0, (0,)),
    (1, (1,)),
    (2, (1, 0)),
    (5, (1, 0, 1)),
    (10, (1, 0, 1, 0)),
    (50, (1, 1, 0, 0, 1, 0)),
    (500, (1, 1, 1, 1, 1, 0, 1, 0, 0)),
])
def test_bits_msb_first(k, expected):
    assert bits_of(k) == expected


def test_bits_reassemble_to_index():
    for k in range(1, 2049):
        bits = bits_of(k)
        assert bits[0] == 1
        assert int("".join(map(str, bits)), 2) == k


def test_bits_regenerate_identically():
    assert bits_of(12345) == bits_of(12345)


def test_large_index_needs_no_recursion():
    k = 1 << 5000
    bits = bits_of(k)
    assert len(bits) == 5001
    assert bits[0] == 1 and not any(bits[1:])


@pytest.mark.parametrize("k", [-1, -500, 1.0, "3", None, True])
def test_bits_rejects_bad_index(k):
    with pytest.raises(InvalidArgumentError):
        bits_of(k)
