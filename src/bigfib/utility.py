# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import re
import sys

from colorama import Fore, Style

from bigfib.runtime import current as _rt_current

_SEP_CLASS = r"[ ,_\u00A0\u2009\u202F]"  # spaces/commas/underscores & NBSP variants
_GROUPED_RE = re.compile(rf"^\+?\d{{1,3}}(?:{_SEP_CLASS}\d{{3}})+$")
_PLAIN_RE = re.compile(r"^\+?\d+$")


class UserInputError(Exception):
    pass


def parse_index(text: str) -> int | None:
    """
    Parse a Fibonacci index typed by a user.

    Accepts plain digits and thousands-grouped digits ("1,000", "1 000", "1_000").
    Returns None when the text is not number-like at all (e.g. a profile name);
    raises UserInputError for a negative number.
    """
    s = (text or "").strip()
    if not s:
        return None
    if s.startswith("-") and _PLAIN_RE.match(s[1:]):
        raise UserInputError(f"Invalid input: index must be >= 0, got {s}.")
    if _PLAIN_RE.match(s):
        return int(s)
    if _GROUPED_RE.match(s):
        return int(re.sub(_SEP_CLASS, "", s))
    return None


def typename(v: object) -> str:
    return type(v).__name__


def flatten_dotted(d: dict, prefix: str = "") -> dict[str, object]:
    out: dict[str, object] = {}
    for k, v in (d or {}).items():
        key = f"{prefix}.{k}" if prefix else str(k)
        if isinstance(v, dict):
            out.update(flatten_dotted(v, key))
        else:
            out[key] = v
    return out


def fmt_ns(ns: int) -> str:
    if ns < 10_000:
        return f"{ns} ns"
    if ns < 10_000_000:
        return f"{ns / 1_000:.1f} µs"
    return f"{ns / 1_000_000:.2f} ms"


def debug(msg: str) -> None:
    """Emit a '[debug]' line on STDERR when the runtime debug flag is on."""
    if not _rt_current().debug:
        return
    sys.stderr.write(f"{Style.DIM}[debug]{Style.RESET_ALL} {msg}\n")
    sys.stderr.flush()


def status_word(ok: bool) -> str:
    if ok:
        return f"{Fore.GREEN}{Style.BRIGHT}OK  {Style.RESET_ALL}"
    return f"{Fore.RED}{Style.BRIGHT}FAIL{Style.RESET_ALL}"
