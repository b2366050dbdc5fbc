# -----------------------------------------------------------------------------
#  residue.py
#  Residue classes mod (base - 1) that may contain nice numbers
# -----------------------------------------------------------------------------

from __future__ import annotations

from functools import lru_cache


@lru_cache(maxsize=256)
def get_residue_filter(base: int) -> frozenset[int]:
    """
    Residues r in [0, base-2] that a fully nice number may have mod (base-1).

    A number is congruent to its digit sum mod (base-1). A nice sqube uses each
    digit 0..b-1 exactly once, so n^2 + n^3 must be congruent to
    0 + 1 + ... + (b-1) = b(b-1)/2.
    """
    m = base - 1
    if m < 1:
        return frozenset()
    target = base * (base - 1) // 2 % m
    return frozenset(r for r in range(m) if (r * r + r * r * r) % m == target)


def residue_filter_sorted(base: int) -> tuple[int, ...]:
    return tuple(sorted(get_residue_filter(base)))


def passes_residue_filter(n: int, base: int) -> bool:
    return n % (base - 1) in get_residue_filter(base)
