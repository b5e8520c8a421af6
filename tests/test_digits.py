# tests/test_digits.py
"""
Tests for DecimalBignum construction and invariants.

Run: pytest -v
"""

from __future__ import annotations

import pytest

from bigfib.digits import (
    DEFAULT_CAPACITY,
    CapacityOverflowError,
    DecimalBignum,
    InvalidArgumentError,
    from_reversed,
    reversed_digits,
)


@pytest.mark.parametrize("value,expected", [
    (0, "0"),
    (1, "1"),
    (9, "9"),
    (10, "10"),
    (1000, "1000"),
    (12586269025, "12586269025"),
])
def test_from_small_integer(value, expected):
    assert DecimalBignum.from_small_integer(value).to_string() == expected


def test_zero_is_single_digit():
    z = DecimalBignum.zero()
    assert str(z) == "0"
    assert len(z) == 1
    assert z.is_zero
    assert z.capacity == DEFAULT_CAPACITY


@pytest.mark.parametrize("text", ["", "01", "00", "-1", "1.5", "12a", " 1", "１２", "٣"])
def test_rejects_malformed_numerals(text):
    with pytest.raises(InvalidArgumentError):
        DecimalBignum(text)


@pytest.mark.parametrize("value", [-1, 1.0, "5", True])
def test_from_small_integer_rejects_non_naturals(value):
    with pytest.raises(InvalidArgumentError):
        DecimalBignum.from_small_integer(value)


@pytest.mark.parametrize("capacity", [0, -3, True, 2.5])
def test_rejects_bad_capacity(capacity):
    with pytest.raises(InvalidArgumentError):
        DecimalBignum("1", capacity)


def test_capacity_overflow_is_reported_not_truncated():
    with pytest.raises(CapacityOverflowError) as ei:
        DecimalBignum("123456", capacity=5)
    assert ei.value.digits == 6
    assert ei.value.capacity == 5

    with pytest.raises(CapacityOverflowError):
        DecimalBignum.from_small_integer(100_000, capacity=5)


def test_fits_and_exact_capacity():
    x = DecimalBignum("12345", capacity=5)
    assert x.fits(5)
    assert not x.fits(6)


def test_equality_ignores_capacity():
    assert DecimalBignum("42", capacity=2) == DecimalBignum("42", capacity=256)
    assert DecimalBignum("42") != DecimalBignum("24")


def test_values_are_immutable():
    x = DecimalBignum("7")
    with pytest.raises(AttributeError):
        x.digits = "8"  # type: ignore[misc]


def test_reversed_round_trip_strips_high_zeros():
    assert reversed_digits(DecimalBignum("1203")) == [3, 0, 2, 1]
    assert from_reversed([3, 0, 2, 1, 0, 0], 10).to_string() == "1203"
    assert from_reversed([0, 0, 0], 10).to_string() == "0"


def test_from_reversed_checks_capacity_after_stripping():
    # six slots but only four significant digits
    assert from_reversed([1, 2, 3, 4, 0, 0], 4).to_string() == "4321"
    with pytest.raises(CapacityOverflowError):
        from_reversed([1, 2, 3, 4, 5], 4)
