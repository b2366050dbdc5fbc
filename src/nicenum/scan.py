# -----------------------------------------------------------------------------
#  scan.py
#  Range scanning: detailed statistics and nice-only search
# -----------------------------------------------------------------------------

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from multiprocessing import Pool

import numpy as np

from nicenum.field import CLIENT_VERSION, FieldClaim, FieldSubmit, Mode
from nicenum.niceness import get_is_nice, get_num_uniques
from nicenum.progress import Progress
from nicenum.residue import residue_filter_sorted
from nicenum.runtime import CFG
from nicenum.utility import UserInputError, validate_base, validate_range

NEAR_MISS_CUTOFF_PERCENT = 0.9

# With a progress bar the range is cut finer than the worker count.
PROGRESS_PARTITIONS = 64


# ---------- Results -----------------------------------------------------------

@dataclass
class DetailedResult:
    unique_count: dict[int, int]                          # uniques -> how many candidates
    near_misses: dict[int, int] = field(default_factory=dict)  # candidate -> uniques


@dataclass
class NiceOnlyResult:
    nice_list: list[int] = field(default_factory=list)


def empty_histogram(base: int) -> dict[int, int]:
    return {i: 0 for i in range(1, base + 1)}


def near_miss_cutoff(base: int, percent: float = NEAR_MISS_CUTOFF_PERCENT) -> int:
    """
    Candidates with more uniques than this are near misses.

    Computed in single precision and truncated, the same cutoff the server
    applies to submitted near misses.
    """
    return int(np.float32(base) * np.float32(percent))


# ---------- Single-range kernels ---------------------------------------------

def process_range_detailed(start: int, end: int, base: int, *, cutoff: int | None = None) -> DetailedResult:
    """Count uniques for every n in [start, end); no residue filter."""
    if cutoff is None:
        cutoff = near_miss_cutoff(base)
    counts = [0] * (base + 1)
    near_misses: dict[int, int] = {}
    for n in range(start, end):
        uniques = get_num_uniques(n, base)
        counts[uniques] += 1
        if uniques > cutoff:
            near_misses[n] = uniques
    return DetailedResult(
        unique_count={i: counts[i] for i in range(1, base + 1)},
        near_misses=near_misses,
    )


def iter_residue_candidates(start: int, end: int, base: int):
    """
    Yield n in [start, end), ascending, with n mod (base-1) in the residue filter.
    Walks the range in blocks of base-1 so filtered-out n are never visited.
    """
    m = base - 1
    residues = residue_filter_sorted(base)
    if not residues or start >= end:
        return
    for block in range(start - start % m, end, m):
        for r in residues:
            n = block + r
            if n < start:
                continue
            if n >= end:
                return
            yield n


def process_range_niceonly(start: int, end: int, base: int) -> NiceOnlyResult:
    """Collect fully nice numbers in [start, end)."""
    return NiceOnlyResult(
        nice_list=[n for n in iter_residue_candidates(start, end, base) if get_is_nice(n, base)]
    )


# ---------- Partition / merge -------------------------------------------------

def split_range(start: int, end: int, parts: int) -> list[tuple[int, int]]:
    """
    Cut [start, end) into at most `parts` contiguous pieces whose sizes differ
    by at most one. Empty pieces are dropped.
    """
    if parts < 1:
        raise UserInputError(f"Cannot split a range into {parts} parts.")
    size = end - start
    if size <= 0:
        return []
    parts = min(parts, size)
    q, r = divmod(size, parts)
    out: list[tuple[int, int]] = []
    lo = start
    for i in range(parts):
        hi = lo + q + (1 if i < r else 0)
        out.append((lo, hi))
        lo = hi
    return out


def merge_detailed(results: Iterable[DetailedResult], base: int) -> DetailedResult:
    """Point-wise sum of histograms, union of near-miss maps."""
    merged = DetailedResult(unique_count=empty_histogram(base), near_misses={})
    for res in results:
        for uniques, qty in res.unique_count.items():
            merged.unique_count[uniques] = merged.unique_count.get(uniques, 0) + qty
        merged.near_misses.update(res.near_misses)
    return merged


def merge_niceonly(results: Iterable[NiceOnlyResult]) -> NiceOnlyResult:
    """Concatenate nice lists in partition order."""
    merged = NiceOnlyResult()
    for res in results:
        merged.nice_list.extend(res.nice_list)
    return merged


# ---------- Drivers -----------------------------------------------------------

def _scan_partition(task: tuple[str, int, int, int, int]) -> DetailedResult | NiceOnlyResult:
    """Pool entry point; must stay at module level to be picklable."""
    mode, start, end, base, cutoff = task
    if mode == Mode.DETAILED.value:
        return process_range_detailed(start, end, base, cutoff=cutoff)
    return process_range_niceonly(start, end, base)


def _resolve_workers(workers: int | None) -> int:
    if workers is None:
        workers = int(CFG("SEARCH.WORKERS", 1))
    if workers < 1:
        raise UserInputError(f"Worker count must be at least 1, got {workers}.")
    return workers


def _run_partitions(
    mode: Mode,
    start: int,
    end: int,
    base: int,
    *,
    cutoff: int,
    workers: int,
    partitions: int | None,
    progress: Progress | None,
) -> list[DetailedResult | NiceOnlyResult]:
    if partitions is None:
        partitions = max(workers, PROGRESS_PARTITIONS) if progress is not None and progress.enabled else workers
    pieces = split_range(start, end, partitions)
    tasks = [(mode.value, lo, hi, base, cutoff) for lo, hi in pieces]

    results: list[DetailedResult | NiceOnlyResult] = []
    done = 0

    def _tick(i: int) -> None:
        nonlocal done
        done += pieces[i][1] - pieces[i][0]
        if progress is not None:
            progress.update(done, f"{mode.value} base {base}: {i + 1}/{len(pieces)} parts")

    if workers == 1 or len(tasks) <= 1:
        for i, task in enumerate(tasks):
            results.append(_scan_partition(task))
            _tick(i)
    else:
        with Pool(processes=min(workers, len(tasks))) as pool:
            for i, res in enumerate(pool.imap(_scan_partition, tasks)):
                results.append(res)
                _tick(i)

    if progress is not None:
        progress.done()
    return results


def scan_detailed(
    start: int,
    end: int,
    base: int,
    *,
    workers: int | None = 1,
    partitions: int | None = None,
    cutoff_percent: float | None = None,
    max_base: int | None = None,
    progress: Progress | None = None,
) -> DetailedResult:
    """
    Histogram of uniques and near misses over [start, end) in `base`.
    Input is validated before any candidate is touched; the result does not
    depend on `workers` or `partitions`.
    """
    validate_base(base, max_base)
    validate_range(start, end)
    workers = _resolve_workers(workers)
    if cutoff_percent is None:
        cutoff_percent = float(CFG("SEARCH.NEAR_MISS_CUTOFF_PERCENT", NEAR_MISS_CUTOFF_PERCENT))
    cutoff = near_miss_cutoff(base, cutoff_percent)

    parts = _run_partitions(
        Mode.DETAILED, start, end, base,
        cutoff=cutoff, workers=workers, partitions=partitions, progress=progress,
    )
    return merge_detailed(parts, base)


def scan_niceonly(
    start: int,
    end: int,
    base: int,
    *,
    workers: int | None = 1,
    partitions: int | None = None,
    max_base: int | None = None,
    progress: Progress | None = None,
) -> NiceOnlyResult:
    """Fully nice numbers in [start, end) in `base`, ascending."""
    validate_base(base, max_base)
    validate_range(start, end)
    workers = _resolve_workers(workers)

    parts = _run_partitions(
        Mode.NICEONLY, start, end, base,
        cutoff=0, workers=workers, partitions=partitions, progress=progress,
    )
    return merge_niceonly(parts)


def process_field(
    claim: FieldClaim,
    mode: Mode | str,
    *,
    username: str,
    workers: int | None = 1,
    max_base: int | None = None,
    progress: Progress | None = None,
) -> FieldSubmit:
    """Scan a claimed field and package the results for submission."""
    mode = Mode.parse(mode)
    claim.validate(max_base)
    if mode is Mode.DETAILED:
        res = scan_detailed(
            claim.search_start, claim.search_end, claim.base,
            workers=workers, max_base=max_base, progress=progress,
        )
        return FieldSubmit(
            id=claim.id,
            username=username,
            client_version=CLIENT_VERSION,
            unique_count=res.unique_count,
            near_misses=res.near_misses,
        )

    res = scan_niceonly(
        claim.search_start, claim.search_end, claim.base,
        workers=workers, max_base=max_base, progress=progress,
    )
    return FieldSubmit(
        id=claim.id,
        username=username,
        client_version=CLIENT_VERSION,
        nice_list=res.nice_list,
    )
