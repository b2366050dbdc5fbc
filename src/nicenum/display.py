# src/nicenum/display.py
from __future__ import annotations

from colorama import Fore, Style

from nicenum.base_range import get_base_range
from nicenum.config import list_profiles_with_descriptions, read_current_profile
from nicenum.field import FieldClaim, FieldSubmit
from nicenum.fmt import abbr_int_fast, format_digits, format_duration, format_rate, histogram_bar
from nicenum.niceness import SqubeReport
from nicenum.residue import residue_filter_sorted
from nicenum.scan import near_miss_cutoff

ALIGN_WIDTH = 16  # label column


def _row(label: str, value: object) -> str:
    return f"{Fore.CYAN}{label:<{ALIGN_WIDTH}}{Style.RESET_ALL}{value}"


def print_claim(claim: FieldClaim, om, *, mode: str) -> None:
    om.write(f"{Fore.YELLOW}{Style.BRIGHT}Field {claim.id}{Style.RESET_ALL} ({mode})")
    om.write(_row("Base", claim.base))
    om.write(_row("Start", abbr_int_fast(claim.search_start)))
    om.write(_row("End", abbr_int_fast(claim.search_end)))
    om.write(_row("Range", f"{claim.search_range:,}"))


def print_detailed_result(submit: FieldSubmit, base: int, om, *, show_histogram: bool = True) -> None:
    """
    Histogram of unique-digit counts, then the near misses.
    Rows before the first and after the last non-zero count are hidden.
    """
    hist = submit.unique_count or {}
    near = submit.near_misses or {}
    total = sum(hist.values())

    if show_histogram and total:
        om.write(f"\n{Style.BRIGHT}Unique digits{Style.RESET_ALL}")
        nonzero = [k for k, v in hist.items() if v]
        lo, hi = min(nonzero), max(nonzero)
        peak = max(hist.values())
        cutoff = near_miss_cutoff(base)
        for uniques in range(lo, hi + 1):
            qty = hist.get(uniques, 0)
            color = Fore.GREEN if uniques == base else (Fore.MAGENTA if uniques > cutoff else "")
            reset = Style.RESET_ALL if color else ""
            om.write(f"  {color}{uniques:>4}{reset}  {qty:>10,}  {histogram_bar(qty, peak)}")

    om.write(_row("Checked", f"{total:,}"))
    if not near:
        om.write(_row("Near misses", f"{Style.DIM}none{Style.RESET_ALL}"))
        return
    om.write(_row("Near misses", len(near)))
    for n, uniques in sorted(near.items()):
        mark = f" {Fore.GREEN}{Style.BRIGHT}NICE{Style.RESET_ALL}" if uniques == base else ""
        om.write(f"  {abbr_int_fast(n):>40}  {uniques}/{base}{mark}")


def print_niceonly_result(submit: FieldSubmit, om) -> None:
    nice = submit.nice_list or []
    if not nice:
        om.write(_row("Nice numbers", f"{Style.DIM}none{Style.RESET_ALL}"))
        return
    om.write(_row("Nice numbers", f"{Fore.GREEN}{Style.BRIGHT}{len(nice)}{Style.RESET_ALL}"))
    for n in nice:
        om.write(f"  {Fore.GREEN}{n}{Style.RESET_ALL}")


def print_timing(elapsed: float, claim: FieldClaim, om) -> None:
    om.write(_row("Elapsed time", format_duration(elapsed)))
    om.write(_row("Hash rate", format_rate(claim.search_range, elapsed)))


def print_sqube_report(report: SqubeReport, om) -> None:
    b = report.base
    start, end = get_base_range(b)
    in_range = start <= report.n < end
    residues = residue_filter_sorted(b)

    om.write(_row("n", abbr_int_fast(report.n)))
    om.write(_row("Base", b))
    om.write(_row("n^2", format_digits(report.square_digits, b)))
    om.write(_row("n^3", format_digits(report.cube_digits, b)))
    om.write(_row("Sqube length", f"{len(report.square_digits) + len(report.cube_digits)} digits"))
    om.write(_row("Unique digits", f"{report.uniques}/{b} ({report.niceness:.2%})"))
    if report.missing:
        om.write(_row("Missing", ", ".join(map(str, report.missing))))
    if report.repeated:
        om.write(_row("Repeated", ", ".join(map(str, report.repeated))))
    om.write(_row("Residue", f"{report.n % (b - 1)} mod {b - 1}, allowed: {list(residues)}"))
    om.write(_row("In base range", "yes" if in_range else f"{Fore.YELLOW}no{Style.RESET_ALL}"))
    if report.is_nice and in_range:
        om.write(f"{Fore.GREEN}{Style.BRIGHT}{report.n} is nice in base {b}!{Style.RESET_ALL}")
    else:
        om.write(f"{Style.DIM}{abbr_int_fast(report.n)} is not nice in base {b}.{Style.RESET_ALL}")


def print_profiles_with_descriptions() -> None:
    pairs = list_profiles_with_descriptions()
    if not pairs:
        print("\nAvailable profiles: (none)")
        return

    current = read_current_profile()
    lines = []
    for name, desc in pairs:
        mark = "*" if current and name == current else " "
        lines.append(f"{mark} {name:13} - {desc}")
    print("\nAvailable profiles:\n  " + "\n  ".join(lines))
