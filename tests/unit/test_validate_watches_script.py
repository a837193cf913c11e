"""Tests for scripts/validate_watches.py."""

import importlib.util
from pathlib import Path

import pytest

_SCRIPT = Path(__file__).resolve().parents[2] / "scripts" / "validate_watches.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("validate_watches", _SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_valid_file_prints_summary(script, tmp_path: Path, capsys, monkeypatch):
    """Test that a valid file prints one summary line per watch."""
    monkeypatch.delenv("WORKER_FOO_EXAMPLE_COM", raising=False)
    monkeypatch.delenv("ANSIBLE_VERBOSITY_FOO_EXAMPLE_COM", raising=False)
    playbook = tmp_path / "playbook.yml"
    playbook.write_text("- hosts: localhost\n")
    watches = tmp_path / "watches.yaml"
    watches.write_text(
        f"- {{version: v1, group: example.com, kind: Foo, playbook: {playbook}, reconcilePeriod: 90s}}\n"
    )

    rc = script.main(["--watches-file", str(watches), "--max-workers", "3"])

    out = capsys.readouterr().out
    assert rc == 0
    assert f"example.com/v1, Kind=Foo: playbook={playbook} workers=3 verbosity=2" in out
    assert "reconcilePeriod=1m30s" in out


def test_invalid_file_reports_error(script, tmp_path: Path, capsys):
    """Test that a validation error exits 1 with the message on stderr."""
    watches = tmp_path / "watches.yaml"
    watches.write_text("- {version: v1, group: example.com, kind: Foo}\n")

    rc = script.main(["--watches-file", str(watches)])

    assert rc == 1
    assert "must specify Role or Playbook" in capsys.readouterr().err


def test_missing_file_reports_error(script, tmp_path: Path, capsys):
    """Test that an unreadable file exits 1."""
    rc = script.main(["--watches-file", str(tmp_path / "nope.yaml")])
    assert rc == 1
    assert "error:" in capsys.readouterr().err
