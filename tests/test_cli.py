# tests/test_cli.py
"""
End-to-end runs of the command line client. The server is replaced by
monkeypatched claim/submit functions; benchmark runs need no server at all.

Run: pytest -v tests/test_cli.py
"""

from __future__ import annotations

import pytest

import nicenum.cli as cli
from nicenum.field import FieldClaim, Mode
from nicenum.fmt import strip_ansi
from nicenum.utility import ApiError
from nicenum.workspace import workspace_dir

# ---------- helpers -----------------------------------------------------------


@pytest.fixture(autouse=True)
def _no_colorama_wrapping(monkeypatch):
    # colorama would replace sys.stdout for the rest of the session
    monkeypatch.setattr(cli, "colorama_init", lambda **kw: None)


@pytest.fixture
def fake_server(monkeypatch):
    calls = {"claims": [], "submits": []}

    def fake_get_field(mode, api_base, username, base=None, max_range=None, field=None):
        calls["claims"].append((mode, api_base, username, base, max_range, field))
        return FieldClaim(id=77, base=10, search_start=47, search_end=100)

    def fake_submit_field(mode, api_base, submit):
        calls["submits"].append((mode, api_base, submit))

    monkeypatch.setattr(cli, "get_field", fake_get_field)
    monkeypatch.setattr(cli, "submit_field", fake_submit_field)
    return calls


def _run(capsys, *argv):
    code = cli.main(list(argv))
    out, err = capsys.readouterr()
    return code, strip_ansi(out), strip_ansi(err)


# ---------- benchmark ---------------------------------------------------------

def test_benchmark_detailed(capsys):
    code, out, _ = _run(capsys, "detailed", "--benchmark", "-b", "10", "-r", "1000")
    assert code == 0
    assert "Field 0 (detailed)" in out
    assert "Near misses" in out
    assert "10/10" in out
    assert "Hash rate" in out


def test_benchmark_niceonly(capsys):
    code, out, _ = _run(capsys, "niceonly", "--benchmark", "-b", "10")
    assert code == 0
    assert "Nice numbers" in out
    assert "  69" in out


def test_benchmark_quiet_prints_nothing(capsys):
    code, out, _ = _run(capsys, "--benchmark", "-b", "12", "-r", "50", "-q")
    assert code == 0
    assert out == ""


def test_benchmark_never_submits(capsys, fake_server):
    assert _run(capsys, "--benchmark", "-b", "10")[0] == 0
    assert fake_server["claims"] == []
    assert fake_server["submits"] == []


@pytest.mark.parametrize("argv", [
    ("--benchmark", "-b", "11"),
    ("--benchmark", "-b", "3"),
    ("--benchmark", "-b", "10", "-w", "0"),
    ("--benchmark", "--profile", "nope"),
    ("--benchmark", "--output", "setup.py"),
])
def test_user_errors_exit_2(capsys, argv):
    code, _, err = _run(capsys, *argv)
    assert code == 2
    assert "Error" in err or "Invalid" in err


# ---------- server round trip -------------------------------------------------

def test_detailed_round_trip(capsys, fake_server):
    code, out, _ = _run(capsys, "detailed", "-u", "alice", "--api-base", "http://localhost:8000/api")
    assert code == 0
    assert fake_server["claims"][0][:3] == (Mode.DETAILED, "http://localhost:8000/api", "alice")
    mode, api_base, submit = fake_server["submits"][0]
    assert mode is Mode.DETAILED
    assert submit.id == 77
    assert submit.username == "alice"
    assert submit.near_misses == {69: 10}
    assert submit.unique_count[10] == 1
    assert "Submitted field 77." in out


def test_niceonly_round_trip_with_claim_options(capsys, fake_server):
    code, _, _ = _run(capsys, "niceonly", "-b", "10", "-r", "53", "--field", "77", "-q")
    assert code == 0
    assert fake_server["claims"][0][3:] == (10, 53, 77)
    _, _, submit = fake_server["submits"][0]
    assert submit.nice_list == [69]


def test_mode_comes_from_profile(capsys, fake_server):
    code, _, _ = _run(capsys, "--profile", "niceonly", "-q", "-w", "1")
    assert code == 0
    assert fake_server["submits"][0][0] is Mode.NICEONLY
    # niceonly profile writes one file per field
    assert (workspace_dir() / "results" / "field_77.txt").is_file()


def test_output_file_option(capsys, fake_server, tmp_path):
    target = tmp_path / "run.log"
    code, _, _ = _run(capsys, "detailed", "-q", "--output", str(target))
    assert code == 0
    assert "Field 77 (detailed)" in target.read_text(encoding="utf-8")


def test_submit_failure_exits_1(capsys, monkeypatch, fake_server):
    def refuse(mode, api_base, submit):
        raise ApiError("Server returned an error: field already submitted")

    monkeypatch.setattr(cli, "submit_field", refuse)
    code, _, err = _run(capsys, "detailed", "-q")
    assert code == 1
    assert "field already submitted" in err


# ---------- check -------------------------------------------------------------

def test_check_nice_number(capsys):
    code, out, _ = _run(capsys, "check", "-n", "69", "-b", "10")
    assert code == 0
    assert "4761" in out
    assert "328509" in out
    assert "69 is nice in base 10!" in out


def test_check_not_nice(capsys):
    code, out, _ = _run(capsys, "check", "-n", "68", "-b", "10")
    assert code == 0
    assert "Repeated" in out
    assert "68 is not nice in base 10." in out


@pytest.mark.parametrize("argv", [
    ("check", "-b", "10"),
    ("check", "-n", "69"),
    ("check", "-n", "sixty-nine", "-b", "10"),
    ("check", "-n", "69", "-b", "1"),
])
def test_check_bad_input(capsys, argv):
    assert _run(capsys, *argv)[0] == 2


# ---------- workspace commands ------------------------------------------------

def test_init_and_where(capsys):
    code, out, _ = _run(capsys, "init")
    assert code == 0
    assert "Copied -> profiles: 2" in out

    code, out, _ = _run(capsys, "where")
    assert code == 0
    assert str(workspace_dir()) in out


def test_init_overwrite_needs_dev_flag(capsys, monkeypatch):
    monkeypatch.delenv("NICENUM_DEV", raising=False)
    assert _run(capsys, "init", "--overwrite")[0] == 2

    monkeypatch.setenv("NICENUM_DEV", "1")
    code, out, _ = _run(capsys, "init", "--overwrite")
    assert code == 0
    assert "overwrote" in out


def test_overwrite_only_with_init(capsys):
    with pytest.raises(SystemExit):
        cli.main(["detailed", "--overwrite"])


def test_profiles_listing(capsys):
    code, out, _ = _run(capsys, "profiles")
    assert code == 0
    assert "default" in out
    assert "niceonly" in out
