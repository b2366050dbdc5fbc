# tests/test_residue.py
"""
Residue filter mod (base - 1).

Run: pytest -v tests/test_residue.py
"""

from __future__ import annotations

import pytest

from nicenum.base_range import get_base_range
from nicenum.niceness import get_is_nice
from nicenum.residue import get_residue_filter, passes_residue_filter, residue_filter_sorted

RESIDUE_CASES = [
    (10, (0, 3, 6, 8)),
    (11, ()),
    (12, (0, 10)),
    (13, (5, 9)),
    (14, (0, 12)),
    (15, ()),
    (16, (0, 5, 9, 14)),
    (17, (7,)),
    (18, (0, 16)),
    (19, ()),
    (20, (0, 18)),
    (21, (5, 9)),
    (22, (0, 6, 14, 20)),
    (23, ()),
    (24, (0, 22)),
    (25, (2, 3, 6, 11, 14, 18)),
    (26, (0, 5, 10, 15, 20, 24)),
    (27, ()),
    (28, (0, 9, 18, 26)),
    (29, (13, 21)),
    (30, (0, 28)),
    (40, (0, 12, 26, 38)),
    (50, (0, 7, 14, 21, 28, 35, 42, 48)),
    (60, (0, 58)),
    (70, (0, 23, 45, 68)),
    (80, (0, 78)),
    (90, (0, 88)),
    (100, (0, 21, 33, 44, 54, 66, 87, 98)),
    (110, (0, 108)),
    (111, ()),
    (112, (0, 36, 74, 110)),
    (113, (7, 55)),
    (114, (0, 112)),
    (115, ()),
    (116, (0, 45, 69, 114)),
    (117, (29, 57)),
    (118, (0, 12, 26, 39, 51, 78, 90, 116)),
    (119, ()),
    (120, (0, 34, 84, 118)),
]


@pytest.mark.parametrize("base,expected", RESIDUE_CASES, ids=[f"b{b}" for b, _ in RESIDUE_CASES])
def test_residue_filter_golden(base, expected):
    assert residue_filter_sorted(base) == expected
    assert get_residue_filter(base) == frozenset(expected)


@pytest.mark.parametrize("base", [10, 12, 20, 40, 120])
def test_filter_members_lie_below_modulus(base):
    assert all(0 <= r < base - 1 for r in get_residue_filter(base))


def test_degenerate_modulus_is_empty():
    assert get_residue_filter(1) == frozenset()


def test_known_nice_number_passes():
    assert passes_residue_filter(69, 10)
    assert not passes_residue_filter(68, 10)


@pytest.mark.parametrize("base", [7, 8, 9, 10, 12, 13, 14, 15])
def test_filter_never_drops_a_nice_number(base):
    start, end = get_base_range(base)
    for n in range(start, end):
        if get_is_nice(n, base):
            assert passes_residue_filter(n, base), f"n={n} base={base}"
