from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("bigfib")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .arithmetic import add, compare, multiply, subtract
from .bits import bits_of
from .device import DeviceBusyError, FibDevice, FibHandle
from .digits import (
    DEFAULT_CAPACITY,
    BignumError,
    CapacityOverflowError,
    DecimalBignum,
    InvalidArgumentError,
)
from .engine import (
    FibonacciOverflowError,
    FibResult,
    compute,
    compute_linear,
    fast_doubling,
    linear,
)
from .runtime import APPLY, CFG

__all__ = [
    "APPLY",
    "CFG",
    "DEFAULT_CAPACITY",
    "BignumError",
    "CapacityOverflowError",
    "DecimalBignum",
    "DeviceBusyError",
    "FibDevice",
    "FibHandle",
    "FibResult",
    "FibonacciOverflowError",
    "InvalidArgumentError",
    "__version__",
    "add",
    "bits_of",
    "compare",
    "compute",
    "compute_linear",
    "fast_doubling",
    "linear",
    "multiply",
    "subtract",
]
