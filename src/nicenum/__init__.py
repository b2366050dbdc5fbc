from __future__ import annotations

# Version
from .field import CLIENT_VERSION as __version__

# Public API re-exports
from .base_range import get_base_range
from .config import has_profile, load_settings, read_current_profile
from .field import FieldClaim, FieldSubmit, Mode
from .niceness import get_is_nice, get_num_uniques
from .residue import get_residue_filter
from .runtime import APPLY, CFG
from .scan import (
    DetailedResult,
    NiceOnlyResult,
    merge_detailed,
    merge_niceonly,
    process_field,
    scan_detailed,
    scan_niceonly,
    split_range,
)
from .utility import ApiError, InvalidBaseError, MalformedRangeError, UserInputError
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "ApiError",
    "DetailedResult",
    "FieldClaim",
    "FieldSubmit",
    "InvalidBaseError",
    "MalformedRangeError",
    "Mode",
    "NiceOnlyResult",
    "UserInputError",
    "__version__",
    "get_base_range",
    "get_is_nice",
    "get_num_uniques",
    "get_residue_filter",
    "has_profile",
    "load_settings",
    "merge_detailed",
    "merge_niceonly",
    "process_field",
    "read_current_profile",
    "scan_detailed",
    "scan_niceonly",
    "split_range",
    "workspace_dir",
]
