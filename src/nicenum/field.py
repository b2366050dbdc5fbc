# src/nicenum/field.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version
from typing import Any

from nicenum.utility import UserInputError, parse_big_int, validate_base, validate_range

try:
    CLIENT_VERSION = _pkg_version("nicenum")
except PackageNotFoundError:
    CLIENT_VERSION = "0+unknown"


class Mode(str, Enum):
    DETAILED = "detailed"
    NICEONLY = "niceonly"

    @classmethod
    def parse(cls, value: str | Mode) -> Mode:
        if isinstance(value, Mode):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise UserInputError(f"Unknown mode {value!r} (choose from {choices}).") from None


@dataclass(frozen=True)
class FieldClaim:
    """A field handed out by the server: scan [search_start, search_end) in `base`."""
    id: int
    base: int
    search_start: int
    search_end: int
    search_range: int | None = None

    def __post_init__(self):
        if self.search_range is None:
            object.__setattr__(self, "search_range", self.search_end - self.search_start)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> FieldClaim:
        if not isinstance(data, dict):
            raise UserInputError(f"Field claim must be a JSON object, got {type(data).__name__}.")
        missing = [k for k in ("id", "base", "search_start", "search_end") if k not in data]
        if missing:
            raise UserInputError(f"Field claim is missing {', '.join(missing)}.")
        start = parse_big_int(data["search_start"], "search_start")
        end = parse_big_int(data["search_end"], "search_end")
        rng = data.get("search_range")
        return cls(
            id=parse_big_int(data["id"], "id"),
            base=parse_big_int(data["base"], "base"),
            search_start=start,
            search_end=end,
            search_range=parse_big_int(rng, "search_range") if rng is not None else None,
        )

    def validate(self, max_base: int | None = None) -> FieldClaim:
        validate_base(self.base, max_base)
        validate_range(self.search_start, self.search_end)
        return self


@dataclass
class FieldSubmit:
    """
    Results sent back to the server. Detailed mode fills unique_count and
    near_misses, niceonly mode fills nice_list; the rest stay None.
    """
    id: int
    username: str
    client_version: str
    unique_count: dict[int, int] | None = None
    near_misses: dict[int, int] | None = None
    nice_list: list[int] | None = field(default=None)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "username": self.username,
            "client_version": self.client_version,
            "unique_count": (
                {str(k): v for k, v in sorted(self.unique_count.items())}
                if self.unique_count is not None else None
            ),
            "near_misses": (
                {str(k): v for k, v in sorted(self.near_misses.items())}
                if self.near_misses is not None else None
            ),
            "nice_list": list(self.nice_list) if self.nice_list is not None else None,
        }
