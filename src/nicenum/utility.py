# -----------------------------------------------------------------------------
#  Utility functions
# -----------------------------------------------------------------------------

from __future__ import annotations

import os
import sys

from nicenum.runtime import CFG

# Bases 2 and 3 have degenerate ranges; nothing below 4 is worth claiming.
MIN_SEARCH_BASE = 4


class UserInputError(Exception):
    pass


class InvalidBaseError(UserInputError):
    pass


class MalformedRangeError(UserInputError):
    pass


class ApiError(Exception):
    pass


def validate_base(base: int, max_base: int | None = None) -> int:
    """
    Reject bases that cannot be searched before any work starts.

    - base < 4           -> no meaningful search range
    - base % 5 == 1      -> the square/cube digit lengths never add up to base
    - base > max_base    -> above the configured limit (SEARCH.MAX_BASE)
    """
    if isinstance(base, bool) or not isinstance(base, int):
        raise InvalidBaseError(f"Base must be an integer, got {base!r}.")
    if base < MIN_SEARCH_BASE:
        raise InvalidBaseError(f"Invalid base {base}: must be at least {MIN_SEARCH_BASE}.")
    if base % 5 == 1:
        raise InvalidBaseError(f"Invalid base {base}: base cannot be 1 mod 5.")
    if max_base is None:
        max_base = int(CFG("SEARCH.MAX_BASE", 120))
    if base > max_base:
        raise InvalidBaseError(f"Invalid base {base}: the maximum supported base is {max_base}.")
    return base


def validate_range(start: int, end: int) -> tuple[int, int]:
    if start < 0:
        raise MalformedRangeError(f"Invalid range: start {start} is negative.")
    if start > end:
        raise MalformedRangeError(f"Invalid range: start {start} is greater than end {end}.")
    return start, end


def parse_big_int(value: object, label: str = "value") -> int:
    """
    Parse an integer sent as a JSON number or as a (possibly quoted) decimal
    string, e.g. 916284264916, "916284264916" or '"916284264916"'.
    """
    if isinstance(value, bool):
        raise UserInputError(f"{label}: expected an integer, got {value!r}.")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        s = value.strip().strip('"').strip()
        try:
            return int(s, 10)
        except ValueError:
            raise UserInputError(f"{label}: invalid number {value!r}.") from None
    raise UserInputError(f"{label}: expected an integer, got {type(value).__name__}.")


def dec_digits(n: int) -> int:
    """Exact decimal digit count without str(); handles n >= 0."""
    n = abs(n)
    if n == 0:
        return 1
    # floor(log10(n)) ~= floor(bitlen*log10(2))
    bl = n.bit_length()
    est = int((bl * 30103) // 100000)
    p10 = 10 ** est
    if n < p10:
        while n < p10:
            est -= 1
            p10 //= 10
    else:
        p10 *= 10
        while n >= p10:
            est += 1
            p10 *= 10
    return est + 1


def apply_int_digit_limit(limit: int | None = None) -> None:
    """Raise Python's int<->str guard to BEHAVIOUR.MAX_DIGITS unless set by the user."""
    if os.environ.get("PYTHONINTMAXSTRDIGITS"):
        return
    if limit is None:
        limit = int(CFG("BEHAVIOUR.MAX_DIGITS", 100_000))
    try:
        sys.set_int_max_str_digits(limit)
    except (AttributeError, ValueError):
        pass


def validate_output_setting(output_file: str | None) -> str | None:
    """
    Validate output setting.
    - None / "" => ok (screen only)
    - "." / "./" / trailing "/" => ok (one file per field id)
    - path/to/file => must not be a source file or a reserved device name
    Returns the output_file unchanged, or raises ValueError.
    """
    FORBIDDEN_FILENAMES = {
        "pyproject.toml",
        "license",
        # Windows reserved device names (case-insensitive on Windows)
        "con", "prn", "aux", "nul",
        "com1", "com2", "com3", "com4", "com5", "com6", "com7", "com8", "com9",
        "lpt1", "lpt2", "lpt3", "lpt4", "lpt5", "lpt6", "lpt7", "lpt8", "lpt9",
    }

    FORBIDDEN_EXTENSIONS = {".py", ".md", ".toml"}

    if not output_file:
        return output_file

    if output_file in (".", "./") or output_file.endswith("/"):
        return output_file

    basename = os.path.basename(output_file)
    name_no_ext, ext = os.path.splitext(basename)
    ext = ext.lower()

    if basename.lower() in FORBIDDEN_FILENAMES or name_no_ext.lower() in FORBIDDEN_FILENAMES:
        raise ValueError(f"Forbidden output filename: {basename}")

    if ext in FORBIDDEN_EXTENSIONS:
        raise ValueError(f"Forbidden output file extension: {ext}")

    return output_file


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
