# src/nicenum/fmt.py
from __future__ import annotations

import re
import string
from collections.abc import Sequence

from nicenum.utility import dec_digits

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

# Digit symbols for bases up to 36; larger bases print digits as [n].
_SYMBOLS = string.digits + string.ascii_uppercase


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def abbr_int_fast(n: int, head: int = 10, tail: int = 10, threshold: int = 35, ellipsis: str = "…") -> str:
    """Abbreviate very large ints as first<head>…last<tail> without str(n)."""
    if not isinstance(n, int):
        return str(n)
    if n == 0:
        return "0"

    sign = "-" if n < 0 else ""
    a = -n if n < 0 else n

    d = dec_digits(a)
    if d <= threshold or head + tail >= d:
        return sign + str(a)

    first = a // 10 ** (d - head)
    last = a % 10 ** tail
    return f"{sign}{first}{ellipsis}{last:0{tail}d}"


def format_duration(seconds: float) -> str:
    """ms if <1s; s with millis if <60s; else mm:ss.mmm (and hh:mm:ss.mmm if ≥1h)."""
    MAX_SECONDS = 60
    if seconds < 1:
        ms = round(seconds * 1000)
        return f"{ms} ms"
    if seconds < MAX_SECONDS:
        return f"{seconds:.3f} s"
    m, s = divmod(seconds, MAX_SECONDS)
    if m < MAX_SECONDS:
        return f"{int(m)}:{s:06.3f}"               # mm:ss.mmm
    h, m = divmod(int(m), MAX_SECONDS)
    return f"{h}:{m:02d}:{s:06.3f}"                # hh:mm:ss.mmm


def format_rate(count: int, seconds: float) -> str:
    """Numbers per second in scientific notation, e.g. '1.234e+06/s'."""
    if seconds <= 0:
        return "n/a"
    return f"{count / seconds:.3e}/s"


def format_digits(digits: Sequence[int], base: int) -> str:
    if base <= len(_SYMBOLS):
        return "".join(_SYMBOLS[d] for d in digits)
    return "".join(f"[{d}]" for d in digits)


def histogram_bar(qty: int, peak: int, width: int = 30) -> str:
    if peak <= 0 or qty <= 0:
        return ""
    return "█" * max(1, round(qty / peak * width))
