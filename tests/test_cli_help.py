"""Tests for CLI help text."""

from __future__ import annotations

import pytest

from unfolder.cli import main


def _render_help(capsys: pytest.CaptureFixture[str]) -> str:
    """Run `unfolder --help` via CLI entrypoint and return captured stdout."""
    with pytest.raises(SystemExit) as exc:
        main(["--help"])
    assert exc.value.code == 0
    return capsys.readouterr().out


def test_help_includes_tagline(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "unfolder: Flatten a repository into a single text file for AI analysis" in out


def test_help_includes_common_usage(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    assert "Common usage:" in out
    assert "unfolder path/to/repo out.txt" in out
    assert "unfolder --list-files ." in out


def test_help_lists_flags(capsys: pytest.CaptureFixture[str]) -> None:
    out = _render_help(capsys)
    for flag in ["--include-vcs", "--vcs", "--extend-exclude", "--list-files", "--version"]:
        assert flag in out
