# tests/test_config.py
"""
Workspace seeding, TOML profiles and the runtime settings they feed.

Run: pytest -v tests/test_config.py
"""

from __future__ import annotations

import pytest

import nicenum.config as CONFIG
from nicenum.runtime import APPLY, CFG, current
from nicenum.utility import UserInputError
from nicenum.workspace import ensure_workspace_seeded, seed_workspace, workspace_dir


def _write_profile(name: str, text: str):
    root, _, _ = ensure_workspace_seeded()
    path = root / "profiles" / f"{name}.toml"
    path.write_text(text, encoding="utf-8")
    return path


def test_workspace_follows_env(tmp_path, monkeypatch):
    monkeypatch.setenv("NICENUM_HOME", str(tmp_path / "elsewhere"))
    assert workspace_dir() == (tmp_path / "elsewhere").resolve()


def test_seeding_copies_packaged_profiles_once():
    root, seeded, copied = ensure_workspace_seeded()
    assert seeded and copied == 2
    assert (root / "profiles" / "default.toml").is_file()
    assert (root / "profiles" / "niceonly.toml").is_file()
    assert (root / "results").is_dir()

    _, seeded_again, copied_again = ensure_workspace_seeded()
    assert not seeded_again and copied_again == 0


def test_seeding_keeps_user_edits_unless_overwriting():
    path = _write_profile("default", '[PROFILE]\nname = "mine"\n')
    ensure_workspace_seeded()
    assert "mine" in path.read_text(encoding="utf-8")

    _, copied = seed_workspace(overwrite=True)
    assert copied == 2
    assert "mine" not in path.read_text(encoding="utf-8")


def test_list_profiles():
    assert CONFIG.list_all_profiles() == ["default", "niceonly"]
    pairs = dict(CONFIG.list_profiles_with_descriptions())
    assert pairs["default"] == "Public server, detailed mode, one worker"


def test_broken_profile_still_listed():
    _write_profile("broken", "[SEARCH\n")
    assert ("broken", "(unreadable)") in CONFIG.list_profiles_with_descriptions()


def test_load_default_profile_applies_to_runtime():
    ensure_workspace_seeded()
    settings = CONFIG.load_settings("default")
    assert settings.name == "default"
    assert "PROFILE" not in settings.as_dict()

    APPLY(settings)
    assert CFG("SEARCH.MAX_BASE") == 120
    assert CFG("SEARCH.MODE") == "detailed"
    assert CFG("API.API_BASE") == "https://nicenumbers.net/api"
    assert CFG("SEARCH.MISSING", "fallback") == "fallback"
    assert current().profile_name == "default"
    assert current().progress is True


def test_load_missing_sections_default_to_tables():
    _write_profile("tiny", "[SEARCH]\nWORKERS = 2\n")
    settings = CONFIG.load_settings("tiny")
    for section in CONFIG.SECTIONS:
        assert isinstance(settings.as_dict()[section], dict)
    assert settings.description == "(no description)"


def test_behaviour_flags_sync():
    _write_profile("quiet", "[BEHAVIOUR]\nPROGRESS = false\nDEBUG = true\n")
    APPLY(CONFIG.load_settings("quiet"))
    assert current().progress is False
    assert current().debug is True


def test_unknown_profile():
    ensure_workspace_seeded()
    assert not CONFIG.has_profile("nope")
    with pytest.raises(UserInputError, match="not found"):
        CONFIG.load_settings("nope")


def test_bad_toml_reports_location():
    _write_profile("bad", "[SEARCH]\nWORKERS = = 2\n")
    with pytest.raises(UserInputError, match="bad.toml"):
        CONFIG.load_settings("bad")


@pytest.mark.parametrize("body", [
    '[SEARCH]\nWORKERS = "4"\n',
    "[SEARCH]\nWORKERS = 0\n",
    "[SEARCH]\nMAX_BASE = 12.5\n",
    "[SEARCH]\nNEAR_MISS_CUTOFF_PERCENT = 1.5\n",
    "[SEARCH]\nNEAR_MISS_CUTOFF_PERCENT = true\n",
    'SEARCH = "flat"\n',
])
def test_bad_values_rejected(body):
    _write_profile("typo", body)
    with pytest.raises(UserInputError):
        CONFIG.load_settings("typo")


def test_current_profile_roundtrip():
    ensure_workspace_seeded()
    assert CONFIG.read_current_profile() is None
    CONFIG.write_current_profile("niceonly.toml")
    assert CONFIG.read_current_profile() == "niceonly"
