# src/bigfib/cli.py

"""
bigfib - exact Fibonacci numbers with decimal-string arithmetic

Description:
    Computes F(n) with a fast-doubling engine built on digit-string
    add/subtract/multiply, reports how long the engine took, and drives the
    file-like device the way the classic fibdrv client does (seek, read,
    write back the timing).

usage: see bigfib -h
"""

from __future__ import annotations

import argparse
import csv
import sys
import textwrap
import time
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

from bigfib import __version__ as _ver
from bigfib import config as CONFIG
from bigfib.device import FibDevice
from bigfib.digits import BignumError
from bigfib.engine import FibonacciOverflowError
from bigfib.progress import Progress
from bigfib.runtime import APPLY, CFG, ensure_runtime_deps
from bigfib.runtime import current as _rt_current
from bigfib.utility import (
    UserInputError,
    flatten_dotted,
    fmt_ns,
    parse_index,
    status_word,
    typename,
)
from bigfib.verify import cross_check
from bigfib.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("init", "where", "profiles", "client", "verify")


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _resolve_inputs(items: list[str]) -> tuple[str | None, str | None, int | None]:
    """Return (command, profile, index) from the positionals.

    Rules:
      - a leading command word takes no further positionals
      - otherwise: [profile] [index], where a number-like item is the index
    """
    if not items:
        return None, None, None

    first = items[0].lower()
    if first in COMMANDS:
        if len(items) > 1:
            raise UserInputError(f"'{first}' takes no further arguments (got {' '.join(items[1:])}).")
        return first, None, None

    if len(items) > 2:
        raise UserInputError(f"too many arguments: {' '.join(items)}")

    if len(items) == 1:
        n = parse_index(items[0])
        return (None, None, n) if n is not None else (None, items[0], None)

    a, b = items
    na, nb = parse_index(a), parse_index(b)
    if na is None and nb is not None:
        return None, a, nb
    raise UserInputError(f"expected '[profile] index', got '{a} {b}'.")


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit profile (--profile or positional)
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      init
          Create the workspace and copy the packaged profiles if missing.

      where
          Show the workspace and package paths.

      profiles
          List the available profiles.

      client
          Walk offsets 0..LIMIT on the device: seek, read, write back the
          engine time, and print both engine and caller-side latency.

      verify
          Cross-check the fast engine against the linear engine and sympy
          for every index 0..LIMIT.
    """)

    p = argparse.ArgumentParser(
        prog="bigfib",
        description="Exact Fibonacci numbers with decimal-string arithmetic",
        usage=(
            "bigfib [[profile] index] [--linear] [--quiet] [--debug]\n"
            "       bigfib client [--limit N] [--csv]\n"
            "       bigfib verify [--limit N]\n"
            "       bigfib init | where | profiles\n"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("items", nargs="*", metavar="[[profile] index]",
                   help="optional profile name followed by the Fibonacci index, or a command")
    p.add_argument("--profile", default=None, help="Profile to use (remembered for later runs)")
    p.add_argument("--linear", action="store_true", help="Use the O(n) reference engine instead of fast doubling")
    p.add_argument("--limit", type=int, default=None, help="Last offset for client/verify (default: ENGINE.MAX_INDEX)")
    p.add_argument("--csv", action="store_true", help="client: emit offset,kernel_ns,user_ns,value as CSV")
    p.add_argument("--overwrite", action="store_true", help="init: replace existing profiles")
    p.add_argument("--quiet", action="store_true", help="Print only the values")
    p.add_argument("--debug", action="store_true", help="Show settings, per-read timings and tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {_ver}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except FibonacciOverflowError as e:
        _print_user_error(f"{e}. Use a profile with a larger ENGINE.CAPACITY.")
        return 2
    except (UserInputError, BignumError) as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if args.overwrite and not (args.items and args.items[0].lower() == "init"):
        parser.error("--overwrite can only be used together with init")

    if not ensure_runtime_deps(strict=True):
        return 1

    command, profile, index = _resolve_inputs(args.items)

    if command == "init":
        if args.overwrite:
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied.get('profiles', 0)}")
        return 0

    ensure_workspace_seeded()

    if command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('bigfib')}")
        return 0

    if command == "profiles":
        current_name = CONFIG.read_current_profile() or "default"
        for name in CONFIG.list_all_profiles():
            mark = "*" if name == current_name else " "
            print(f"{mark} {name}")
        return 0

    # Choose profile: explicit → last-used → default
    explicit = args.profile or profile
    if explicit and not CONFIG.has_profile(explicit):
        print(f"Unknown profile: '{explicit}'", file=sys.stderr)
        print("Available profiles:", ", ".join(CONFIG.list_all_profiles()), file=sys.stderr)
        return 2

    profile_name = _select_profile_name(explicit)
    selected = CONFIG.load_settings(profile_name)
    APPLY(selected)
    rt.debug = bool(args.debug) or rt.debug
    if explicit:
        CONFIG.write_current_profile(explicit)

    if rt.debug:
        print(f"[debug] active profile: {selected.name}", file=sys.stderr)
        if selected._source:
            print(f"[debug] profile file: {selected._source}", file=sys.stderr)
        flat = flatten_dotted(rt.settings)
        for k in sorted(flat, key=str.lower):
            v = flat[k]
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
        print(file=sys.stderr)

    algorithm = "linear" if args.linear else CFG("ENGINE.ALGORITHM", "fast")

    if command == "client":
        return _run_client(args, algorithm)
    if command == "verify":
        return _run_verify(args)

    if index is None:
        parser.print_usage()
        return 0
    return _run_single(index, args, algorithm)


# ---- commands ----
def _limit(args) -> int:
    if args.limit is None:
        return int(CFG("ENGINE.MAX_INDEX", 500))
    if args.limit < 0:
        raise UserInputError(f"--limit must be >= 0, got {args.limit}.")
    return args.limit


def _run_single(index: int, args, algorithm: str) -> int:
    dev = FibDevice(algorithm=algorithm)
    with dev.open() as fh:
        pos = fh.seek(index)
        if pos != index and not args.quiet:
            print(
                f"{Fore.YELLOW}Note:{Style.RESET_ALL} index {index} is above ENGINE.MAX_INDEX; "
                f"clamped to {pos}.",
                file=sys.stderr,
            )
        value = fh.read()
        ns = fh.write()

    if args.quiet:
        print(value)
        return 0

    print(f"F({pos}) = {value}")
    if CFG("OUTPUT.SHOW_TIMING", True):
        print(f"{Style.DIM}{len(value)} digits, {fmt_ns(ns)} in engine ({algorithm}){Style.RESET_ALL}")
    return 0


def _run_client(args, algorithm: str) -> int:
    limit = _limit(args)
    dev = FibDevice(algorithm=algorithm)
    writer = csv.writer(sys.stdout, lineterminator="\n") if args.csv else None
    if writer:
        writer.writerow(["offset", "kernel_ns", "user_ns", "value"])

    with dev.open() as fh:
        for i in range(limit + 1):
            pos = fh.seek(i)
            t1 = time.perf_counter_ns()
            value = fh.read()
            t2 = time.perf_counter_ns()
            kernel_ns = fh.write(b"testing writing")
            user_ns = t2 - t1

            if writer:
                writer.writerow([pos, kernel_ns, user_ns, value])
            elif args.quiet:
                print(value)
            else:
                print(
                    f"Reading from {dev.name} at offset {pos}, returned the sequence {value}. "
                    f"cost time in kernel: {kernel_ns} ns, cost time in userspace: {user_ns} ns."
                )
    return 0


def _run_verify(args) -> int:
    limit = _limit(args)
    enabled = not args.quiet and sys.stdout.isatty()
    with Progress(limit + 1, enabled=enabled, label="checking") as bar:
        bad = cross_check(0, limit, on_index=lambda k: bar.update(k + 1))

    ok = not bad
    print(f"{status_word(ok)}  F(0)..F({limit}): fast, linear and sympy "
          + ("agree" if ok else f"disagree at {len(bad)} index(es)"))
    for m in bad:
        print(f"  F({m.index}): fast={m.fast} linear={m.linear} sympy={m.reference}", file=sys.stderr)
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
