# -----------------------------------------------------------------------------
#  niceness.py
#  Digit tests on the sqube (n^2 followed by n^3) of a candidate
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass
from functools import lru_cache

import gmpy2
from sympy.ntheory import digits as _sympy_digits

from nicenum.utility import InvalidBaseError, UserInputError

# Chunks of base**k stay below this so the inner divmod loop runs on small ints.
_CHUNK_LIMIT = 1 << 60


@lru_cache(maxsize=256)
def _chunking(base: int) -> tuple[int, int]:
    """Return (k, base**k) with base**k the largest power of base <= 2**60."""
    k = 1
    while base ** (k + 1) <= _CHUNK_LIMIT:
        k += 1
    return k, base ** k


def _check_args(n: int, base: int) -> None:
    if base < 2:
        raise InvalidBaseError(f"Invalid base {base}: must be at least 2.")
    if n < 0:
        raise UserInputError(f"Candidate {n} is negative.")


def iter_digits(value: int, base: int) -> Iterator[int]:
    """
    Yield the base-`base` digits of value >= 0, least significant first.
    Zero yields a single 0 digit.
    """
    chunk_len, chunk_mod = _chunking(base)
    while value >= chunk_mod:
        value, low = divmod(value, chunk_mod)
        low = int(low)
        # full chunk: emit leading zeros too
        for _ in range(chunk_len):
            low, d = divmod(low, base)
            yield d
    value = int(value)
    while True:
        value, d = divmod(value, base)
        yield d
        if not value:
            return


def _mark_unique(value: int, base: int, seen: bytearray) -> bool:
    """Mark digits of value in `seen`; False as soon as a digit repeats."""
    for d in iter_digits(value, base):
        if seen[d]:
            return False
        seen[d] = 1
    return True


def get_num_uniques(n: int, base: int) -> int:
    """Count of distinct digits in the sqube of n written in `base` (1..base)."""
    _check_args(n, base)
    num = gmpy2.mpz(n)
    squared = num * num
    seen = set(iter_digits(squared, base))
    seen.update(iter_digits(squared * num, base))
    return len(seen)


def get_is_nice(n: int, base: int) -> bool:
    """
    True if no digit occurs twice across n^2 and n^3 in `base`.

    Inside the base range the sqube has exactly `base` digits, so this is
    equivalent to get_num_uniques(n, base) == base. Stops at the first repeat.
    """
    _check_args(n, base)
    num = gmpy2.mpz(n)
    squared = num * num
    seen = bytearray(base)
    return _mark_unique(squared, base, seen) and _mark_unique(squared * num, base, seen)


# --- Reporting (used by `nicenum check`) ---

@dataclass(frozen=True)
class SqubeReport:
    n: int
    base: int
    square_digits: list[int]     # most significant first
    cube_digits: list[int]       # most significant first
    uniques: int
    is_nice: bool
    missing: tuple[int, ...]
    repeated: tuple[int, ...]

    @property
    def niceness(self) -> float:
        return self.uniques / self.base


def sqube_digits(n: int, base: int) -> tuple[list[int], list[int]]:
    """Digits of n^2 and n^3 in `base`, most significant first."""
    _check_args(n, base)
    # sympy returns [base, d_msd, ..., d_lsd]
    return _sympy_digits(n ** 2, base)[1:], _sympy_digits(n ** 3, base)[1:]


def sqube_report(n: int, base: int) -> SqubeReport:
    sq, cu = sqube_digits(n, base)
    counts = Counter(sq + cu)
    return SqubeReport(
        n=n,
        base=base,
        square_digits=sq,
        cube_digits=cu,
        uniques=get_num_uniques(n, base),
        is_nice=get_is_nice(n, base),
        missing=tuple(d for d in range(base) if d not in counts),
        repeated=tuple(sorted(d for d, c in counts.items() if c > 1)),
    )
