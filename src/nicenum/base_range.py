# -----------------------------------------------------------------------------
#  base_range.py
#  Range of candidates whose sqube has exactly `base` digits
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache

import gmpy2


def floor_root(x: int, n: int) -> int:
    """Largest r with r**n <= x (exact, arbitrary precision)."""
    if x < 0:
        raise ValueError(f"floor_root of negative value {x}")
    root, _exact = gmpy2.iroot(gmpy2.mpz(x), n)
    return int(root)


def ceiling_root(x: int, n: int) -> int:
    """Smallest r with r**n >= x (exact, arbitrary precision)."""
    if x < 0:
        raise ValueError(f"ceiling_root of negative value {x}")
    root, exact = gmpy2.iroot(gmpy2.mpz(x), n)
    return int(root) if exact else int(root) + 1


@lru_cache(maxsize=256)
def get_base_range(base: int) -> tuple[int, int]:
    """
    Return (start, end) for `base`, end exclusive.

    A number n can only be nice if n^2 and n^3 together have exactly `base`
    digits in base b. With k = base // 5 the bounds are:

      base % 5 == 0:  ceil(cbrt(b^(3k-1)))  ..  b^k
      base % 5 == 1:  empty (0, 0)
      base % 5 == 2:  b^k                   ..  floor(cbrt(b^(3k+1)))
      base % 5 == 3:  ceil(cbrt(b^(3k+1)))  ..  floor(sqrt(b^(2k+1)))
      base % 5 == 4:  ceil(sqrt(b^(2k+1)))  ..  floor(cbrt(b^(3k+2)))
    """
    if base < 2:
        return 0, 0
    b = base
    k = base // 5

    r = base % 5
    if r == 0:
        return ceiling_root(b ** (3 * k - 1), 3), b ** k
    if r == 2:
        return b ** k, floor_root(b ** (3 * k + 1), 3)
    if r == 3:
        return ceiling_root(b ** (3 * k + 1), 3), floor_root(b ** (2 * k + 1), 2)
    if r == 4:
        return ceiling_root(b ** (2 * k + 1), 2), floor_root(b ** (3 * k + 2), 3)
    return 0, 0


def base_range_size(base: int) -> int:
    start, end = get_base_range(base)
    return max(0, end - start)


def has_search_range(base: int) -> bool:
    return base_range_size(base) > 0
