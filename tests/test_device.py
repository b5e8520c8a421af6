# tests/test_device.py
from __future__ import annotations

import os
import threading

import pytest

from bigfib import APPLY
from bigfib.device import DeviceBusyError, FibDevice
from bigfib.engine import FibonacciOverflowError


@pytest.fixture
def dev():
    return FibDevice()


def test_defaults_follow_the_runtime(dev):
    assert dev.max_index == 500
    assert dev.capacity == 256
    assert dev.algorithm == "fast"

    APPLY({"ENGINE": {"MAX_INDEX": 90, "CAPACITY": 40, "ALGORITHM": "linear"}})
    d2 = FibDevice()
    assert (d2.max_index, d2.capacity, d2.algorithm) == (90, 40, "linear")


@pytest.mark.parametrize("offset,whence,expected", [
    (10, os.SEEK_SET, 10),
    (500, os.SEEK_SET, 500),
    (501, os.SEEK_SET, 500),
    (10**9, os.SEEK_SET, 500),
    (-1, os.SEEK_SET, 0),
    (0, os.SEEK_END, 500),
    (10, os.SEEK_END, 490),
    (-10, os.SEEK_END, 500),
    (600, os.SEEK_END, 0),
])
def test_seek_clamps(dev, offset, whence, expected):
    with dev.open() as fh:
        assert fh.seek(offset, whence) == expected
        assert fh.tell() == expected


def test_seek_cur_is_relative(dev):
    with dev.open() as fh:
        fh.seek(100)
        assert fh.seek(5, os.SEEK_CUR) == 105
        assert fh.seek(-200, os.SEEK_CUR) == 0
        assert fh.seek(1000, os.SEEK_CUR) == 500


def test_bad_whence(dev):
    with dev.open() as fh, pytest.raises(ValueError):
        fh.seek(0, 7)


def test_read_and_elapsed(dev):
    with dev.open() as fh:
        assert fh.write(b"anything") == 0  # nothing read yet
        fh.seek(100)
        assert fh.read() == "354224848179261915075"
        assert fh.tell() == 100  # reads don't advance
        ns = fh.write(b"testing writing")
        assert isinstance(ns, int) and ns >= 0
        assert fh.elapsed_time() == ns


def test_read_walk_like_the_client(dev):
    expected = ["0", "1", "1", "2", "3", "5", "8", "13", "21", "34", "55"]
    with dev.open() as fh:
        got = []
        for i in range(11):
            fh.seek(i)
            got.append(fh.read())
    assert got == expected


def test_second_open_is_busy(dev):
    fh = dev.open()
    assert dev.busy
    with pytest.raises(DeviceBusyError):
        dev.open()
    fh.close()
    assert not dev.busy
    with dev.open() as fh2:
        assert fh2.read() == "0"


def test_busy_across_threads(dev):
    errors: list[BaseException] = []

    def other():
        try:
            dev.open()
        except DeviceBusyError as e:
            errors.append(e)

    with dev.open():
        t = threading.Thread(target=other)
        t.start()
        t.join()
    assert len(errors) == 1


def test_close_is_idempotent_and_final(dev):
    fh = dev.open()
    fh.close()
    fh.close()
    assert fh.closed
    with pytest.raises(ValueError):
        fh.read()
    with pytest.raises(ValueError):
        fh.seek(1)


def test_overflow_surfaces_through_read():
    small = FibDevice(max_index=100, capacity=10)
    with small.open() as fh:
        fh.seek(60)
        with pytest.raises(FibonacciOverflowError) as ei:
            fh.read()
        assert ei.value.index == 60
    assert not small.busy


def test_linear_device_agrees():
    fast, lin = FibDevice(), FibDevice(algorithm="linear")
    with fast.open() as a, lin.open() as b:
        for i in (0, 1, 2, 77, 250, 500):
            a.seek(i)
            b.seek(i)
            assert a.read() == b.read()


def test_rejects_unknown_algorithm():
    with pytest.raises(ValueError):
        FibDevice(algorithm="matrix")
