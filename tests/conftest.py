# tests/conftest.py
from __future__ import annotations

import pytest

from nicenum import runtime


@pytest.fixture(autouse=True)
def _isolated_workspace(tmp_path, monkeypatch):
    """Every test gets a fresh workspace and fresh runtime settings."""
    monkeypatch.setenv("NICENUM_HOME", str(tmp_path / "workspace"))
    runtime.reset()
    yield
    runtime.reset()
