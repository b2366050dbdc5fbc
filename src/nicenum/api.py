# -----------------------------------------------------------------------------
#  api.py
#  Claiming fields from and submitting results to the nice numbers server
# -----------------------------------------------------------------------------

from __future__ import annotations

import requests

from nicenum.base_range import get_base_range
from nicenum.field import FieldClaim, FieldSubmit, Mode
from nicenum.runtime import CFG
from nicenum.utility import ApiError, InvalidBaseError, UserInputError

DEFAULT_API_BASE = "https://nicenumbers.net/api"
DEFAULT_USERNAME = "anonymous"
MAX_SUPPORTED_BASE = 120

BENCHMARK_BASE = 40
BENCHMARK_RANGE = 100_000


def _timeout() -> float:
    return float(CFG("API.TIMEOUT_S", 30))


def get_claim_url(
    mode: Mode | str,
    api_base: str,
    username: str,
    base: int | None = None,
    max_range: int | None = None,
    field: int | None = None,
    max_base: int | None = None,
) -> str:
    """
    Build the claim URL. Parameter order is fixed:
      {api}/claim/{mode}?username=..[&base=..][&max_range=..][&field=..]&max_base=..
    """
    mode = Mode.parse(mode)
    if max_base is None:
        max_base = int(CFG("SEARCH.MAX_BASE", MAX_SUPPORTED_BASE))
    url = f"{api_base.rstrip('/')}/claim/{mode.value}?username={username}"
    if base is not None:
        url += f"&base={base}"
    if max_range is not None:
        url += f"&max_range={max_range}"
    if field is not None:
        url += f"&field={field}"
    url += f"&max_base={max_base}"
    return url


def get_field(
    mode: Mode | str,
    api_base: str,
    username: str,
    base: int | None = None,
    max_range: int | None = None,
    field: int | None = None,
    *,
    session: requests.Session | None = None,
) -> FieldClaim:
    """Request a field from the server. No retries: failures raise ApiError."""
    url = get_claim_url(mode, api_base, username, base, max_range, field)
    http = session or requests.Session()
    try:
        r = http.get(url, timeout=_timeout())
    except requests.RequestException as e:
        raise ApiError(f"Network error while claiming a field: {e}") from e
    if not r.ok:
        raise ApiError(f"Server refused the claim ({r.status_code}): {r.text.strip() or r.reason}")
    try:
        data = r.json()
    except ValueError as e:
        raise ApiError(f"Server sent an invalid claim: {e}") from e
    try:
        return FieldClaim.from_json(data)
    except UserInputError as e:
        raise ApiError(f"Server sent an invalid claim: {e}") from e


def submit_field(
    mode: Mode | str,
    api_base: str,
    submit: FieldSubmit,
    *,
    session: requests.Session | None = None,
) -> None:
    """POST results to {api}/submit/{mode}; raise ApiError on anything but 2xx."""
    mode = Mode.parse(mode)
    url = f"{api_base.rstrip('/')}/submit/{mode.value}"
    http = session or requests.Session()
    try:
        r = http.post(url, json=submit.to_json(), timeout=_timeout())
    except requests.RequestException as e:
        raise ApiError(f"Network error: {e}") from e
    if not r.ok:
        msg = (r.text or "").strip()
        raise ApiError(f"Server returned an error: {msg}" if msg else "Server returned an error.")


def get_field_benchmark(base: int | None = None, max_range: int | None = None) -> FieldClaim:
    """
    Offline field for benchmarking: the first `max_range` numbers of the
    base's search range (clamped to its end).
    """
    if base is None:
        base = int(CFG("SEARCH.BENCHMARK_BASE", BENCHMARK_BASE))
    if max_range is None:
        max_range = int(CFG("SEARCH.BENCHMARK_RANGE", BENCHMARK_RANGE))
    if base % 5 == 1:
        raise InvalidBaseError(f"Invalid base {base}! Base cannot be 1 mod 5.")
    if max_range < 0:
        raise UserInputError(f"Benchmark range must be non-negative, got {max_range}.")
    start, range_end = get_base_range(base)
    end = min(range_end, start + max_range)
    return FieldClaim(id=0, base=base, search_start=start, search_end=end)
