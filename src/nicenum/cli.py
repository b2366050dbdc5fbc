# src/nicenum/cli.py

"""
Nice Numbers - distributed search client

Description:
    Claims a field (a base and a range of candidates) from the nice numbers
    server, scans it and submits the results. A number n is nice in base b
    when the digits of n^2 and n^3 together use every digit 0..b-1.

    detailed  counts unique digits for every candidate and reports a
              histogram plus near misses.
    niceonly  only looks for fully nice numbers, skipping candidates that
              the residue filter rules out.

usage: see nicenum -h
"""

from __future__ import annotations

import argparse
import faulthandler
import os
import sys
import textwrap
import threading
import time
import traceback
from importlib.resources import files as pkg_files

from colorama import Fore, Style
from colorama import init as colorama_init

import nicenum.config as CONFIG
from nicenum.api import DEFAULT_API_BASE, DEFAULT_USERNAME, get_field, get_field_benchmark, submit_field
from nicenum.display import (
    print_claim,
    print_detailed_result,
    print_niceonly_result,
    print_profiles_with_descriptions,
    print_sqube_report,
    print_timing,
)
from nicenum.field import CLIENT_VERSION, Mode
from nicenum.niceness import sqube_report
from nicenum.output_manager import OutputManager
from nicenum.progress import Progress
from nicenum.runtime import APPLY, CFG, ensure_runtime_deps
from nicenum.runtime import current as _rt_current
from nicenum.scan import process_field
from nicenum.utility import (
    ApiError,
    UserInputError,
    apply_int_digit_limit,
    flatten_dotted,
    typename,
    validate_output_setting,
)
from nicenum.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir

COMMANDS = ("detailed", "niceonly", "check", "init", "where", "profiles")


def _install_loud_error_handlers(debug: bool) -> None:
    if not debug:
        return
    faulthandler.enable()

    def _excepthook(exc_type, exc, tb):
        sys.stderr.write("\n[UNCAUGHT EXCEPTION]\n")
        traceback.print_exception(exc_type, exc, tb, file=sys.stderr)
        sys.stderr.flush()
    sys.excepthook = _excepthook

    def _thread_excepthook(args):
        sys.stderr.write("\n[UNCAUGHT THREAD EXCEPTION]\n")
        traceback.print_exception(args.exc_type, args.exc_value, args.exc_traceback, file=sys.stderr)
        sys.stderr.flush()
    threading.excepthook = _thread_excepthook


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not (msg.startswith("Invalid input:") or msg.startswith("Error:")):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def _debug(msg: str) -> None:
    if _rt_current().debug:
        print(f"[debug] {msg}", file=sys.stderr)


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    commands:
      detailed
          Claim a field and report the unique-digit histogram and near misses.

      niceonly
          Claim a field and report only fully nice numbers.

      check -n N -b B
          Show the sqube of N in base B and whether N is nice.

      init [--overwrite]
          Create the workspace and copy the packaged profiles if missing.
          --overwrite requires environment variable NICENUM_DEV=1.

      where
          Show the workspace and package paths.

      profiles
          List the available profiles.
    """)

    p = argparse.ArgumentParser(
        prog="nicenum",
        description="Nice Numbers: distributed search for square-cube pandigitals",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("command", nargs="?", choices=COMMANDS, default=None,
                   help="search mode or command (default: SEARCH.MODE from the profile)")
    p.add_argument("--profile", default=None, help="profile name from <workspace>/profiles")
    p.add_argument("--api-base", default=None, help="the base API URL to connect to")
    p.add_argument("-u", "--username", default=None, help="the username to send alongside your contribution")
    p.add_argument("-q", "--quiet", action="store_true", help="suppress screen output")
    p.add_argument("-v", "--verbose", action="store_true", help="show elapsed time and hash rate")
    p.add_argument("--benchmark", action="store_true", help="run an offline benchmark (nothing is submitted)")
    p.add_argument("-b", "--base", type=int, default=None, help="request a range in a specific base")
    p.add_argument("-r", "--max-range", type=int, default=None, help="request a differently-sized range")
    p.add_argument("--field", type=int, default=None, help="request a specific field by id")
    p.add_argument("-w", "--workers", type=int, default=None, help="worker processes used for scanning")
    p.add_argument("-n", "--number", type=str, default=None, help="number to inspect with 'check'")
    p.add_argument("--output", default=None, help="write results to a file (also prints unless --quiet)")
    p.add_argument("--overwrite", action="store_true", help="with 'init': replace existing profiles")
    p.add_argument("--debug", action="store_true", help="show internal trace info and full tracebacks")

    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except ApiError as e:
        _print_user_error(str(e))
        return 1
    except KeyboardInterrupt:
        print("\nAborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


def _select_profile_name(explicit: str | None) -> str:
    """
    Precedence:
      1) explicit --profile
      2) last used (from workspace)
      3) 'default'
    """
    if explicit:
        return explicit
    last = CONFIG.read_current_profile()
    if last and CONFIG.has_profile(last):
        return last
    return "default"


def _load_profile(explicit: str | None, *, debug: bool = False) -> str:
    if explicit and not CONFIG.has_profile(explicit):
        available = ", ".join(CONFIG.list_all_profiles()) or "(none)"
        raise UserInputError(f"Unknown profile: '{explicit}'. Available profiles: {available}")

    name = _select_profile_name(explicit)
    if not CONFIG.has_profile(name):
        # Workspace without profiles: keep built-in defaults
        _debug(f"profile '{name}' not found, using built-in defaults")
        return name

    selected = CONFIG.load_settings(name)
    APPLY(selected)
    if debug:
        _rt_current().debug = True  # --debug wins over the profile
    if explicit:
        CONFIG.write_current_profile(explicit)

    if _rt_current().debug:
        _debug(f"active profile: {name}")
        _debug(f"profile file: {selected._source}")
        flat = flatten_dotted(selected.as_dict())
        for k in sorted(flat, key=str.lower):
            v = CFG(k, None)
            print(f"        {k:.<40} {v!r} ({typename(v)})", file=sys.stderr)
    return name


def _parse_number(text: str | None) -> int:
    if text is None:
        raise UserInputError("'check' needs a number: nicenum check -n 69 -b 10")
    try:
        n = int(text.replace("_", "").replace(",", ""), 10)
    except ValueError:
        raise UserInputError(f"Invalid input: '{text}' is not an integer.") from None
    if n < 0:
        raise UserInputError(f"Invalid input: {n} is negative.")
    return n


# ---- main ----
def _main_impl(argv=None) -> int:

    colorama_init(autoreset=True)

    parser = _build_parser()
    args = parser.parse_args(argv)
    rt = _rt_current()
    rt.debug = bool(args.debug)

    _install_loud_error_handlers(args.debug)

    if args.overwrite and args.command != "init":
        parser.error("--overwrite can only be used together with 'init'")

    if not ensure_runtime_deps(strict=True):
        return 1

    # --- workspace commands ---
    if args.command == "init":
        if args.overwrite:
            if os.environ.get("NICENUM_DEV") != "1":
                print("Refusing to overwrite: set NICENUM_DEV=1 to enable developer overwrite.")
                return 2
            ws, copied = seed_workspace(overwrite=True)
            print(f"Workspace ready at: {ws} (overwrote existing files)")
        else:
            ws, _seeded, copied = ensure_workspace_seeded()
            print(f"Workspace ready at: {ws}")
        print(f"Copied -> profiles: {copied}")
        return 0

    if args.command == "where":
        print(f"Workspace: {workspace_dir()}")
        print(f"Package:   {pkg_files('nicenum')}")
        return 0

    ensure_workspace_seeded()

    if args.command == "profiles":
        print_profiles_with_descriptions()
        return 0

    _load_profile(args.profile, debug=args.debug)
    apply_int_digit_limit()

    # --- output routing (CLI --output overrides profile OUTPUT_FILE) ---
    try:
        target = validate_output_setting(args.output)
        if target is None:
            target = validate_output_setting(CFG("OUTPUT.OUTPUT_FILE", None))
    except ValueError as e:
        raise UserInputError(f"--output: {e}") from None

    # --- one-shot number inspection ---
    if args.command == "check":
        n = _parse_number(args.number)
        if args.base is None:
            raise UserInputError("'check' needs a base: nicenum check -n 69 -b 10")
        om = OutputManager(output_file=None, quiet=args.quiet)
        try:
            print_sqube_report(sqube_report(n, args.base), om)
        finally:
            om.close()
        return 0

    mode = Mode.parse(args.command or CFG("SEARCH.MODE", Mode.DETAILED.value))
    api_base = args.api_base or CFG("API.API_BASE", DEFAULT_API_BASE)
    username = args.username or CFG("API.USERNAME", DEFAULT_USERNAME)
    workers = args.workers if args.workers is not None else int(CFG("SEARCH.WORKERS", 1))
    if workers < 1:
        raise UserInputError(f"--workers must be at least 1, got {workers}.")

    # --- claim ---
    if args.benchmark:
        claim = get_field_benchmark(args.base, args.max_range)
    else:
        _debug(f"claiming from {api_base} as {username} (client {CLIENT_VERSION})")
        claim = get_field(mode, api_base, username, args.base, args.max_range, args.field)
    _debug(f"claim: {claim}")

    om = OutputManager(output_file=target, quiet=args.quiet, field_id=claim.id)
    try:
        print_claim(claim, om, mode=mode.value)

        show_bar = rt.progress and not args.quiet and not rt.debug and sys.stdout.isatty()
        progress = Progress(claim.search_range, enabled=show_bar)

        before = time.perf_counter()
        submit = process_field(claim, mode, username=username, workers=workers, progress=progress)
        elapsed = time.perf_counter() - before

        if mode is Mode.DETAILED:
            print_detailed_result(submit, claim.base, om, show_histogram=args.verbose or args.benchmark)
        else:
            print_niceonly_result(submit, om)

        if args.benchmark or args.verbose:
            print_timing(elapsed, claim, om)

        if not args.benchmark:
            submit_field(mode, api_base, submit)
            om.write(f"{Fore.GREEN}Submitted field {claim.id}.{Style.RESET_ALL}")
    finally:
        om.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
