"""Tests for bundle output."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from unfolder.bundle import (
    END_MARKER,
    HEADER,
    SECTION_DIVIDER,
    BundleOptions,
    BundleWriter,
    determine_output_path,
    list_included_files,
    write_bundle,
)
from unfolder.errors import TreeReadError
from unfolder.sniff import is_binary


def test_header_names_markers():
    assert SECTION_DIVIDER in HEADER
    assert END_MARKER in HEADER
    assert "\n" not in HEADER


def test_determine_output_path_default(tmp_path: Path):
    repo = tmp_path / "myrepo"
    repo.mkdir()
    assert determine_output_path(repo) == Path("myrepo.txt")
    assert determine_output_path(repo, "") == Path("myrepo.txt")


def test_determine_output_path_directory(tmp_path: Path):
    repo = tmp_path / "myrepo"
    repo.mkdir()
    assert determine_output_path(repo, "out/") == Path("out") / "myrepo.txt"


def test_determine_output_path_file(tmp_path: Path):
    assert determine_output_path(tmp_path, "bundle.txt") == Path("bundle.txt")


def test_determine_output_path_dot(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    repo = tmp_path / "project"
    repo.mkdir()
    monkeypatch.chdir(repo)
    assert determine_output_path(".") == Path("project.txt")


def test_writer_sections():
    stream = io.BytesIO()
    writer = BundleWriter(stream)
    writer.write_header()
    writer.write_file("a.txt", b"no newline")
    writer.write_file("b.txt", b"has newline\n")
    writer.write_file("empty.txt", b"")
    writer.write_end()
    assert stream.getvalue().decode() == (
        f"{HEADER}\n"
        "--------\na.txt\nno newline\n"
        "--------\nb.txt\nhas newline\n"
        "--------\nempty.txt\n"
        "----END----\n"
    )


def test_writer_keeps_raw_bytes():
    stream = io.BytesIO()
    BundleWriter(stream).write_file("latin1.txt", b"caf\xe9\r\n")
    assert stream.getvalue() == b"--------\nlatin1.txt\ncaf\xe9\r\n"


def test_is_binary(tmp_path: Path):
    text = tmp_path / "t.txt"
    text.write_text("plain text\n")
    binary = tmp_path / "b.bin"
    binary.write_bytes(b"abc\x00def")
    late_zero = tmp_path / "late.bin"
    late_zero.write_bytes(b"a" * 600 + b"\x00")
    empty = tmp_path / "empty"
    empty.write_bytes(b"")
    assert not is_binary(text)
    assert is_binary(binary)
    assert not is_binary(late_zero)
    assert not is_binary(empty)


def _make_repo(root: Path) -> None:
    (root / ".gitignore").write_text("*.log\nbuild/\n")
    (root / "README.md").write_text("# Hello\n")
    (root / "debug.log").write_text("noise\n")
    build = root / "build"
    build.mkdir()
    (build / "out.js").write_text("built\n")
    src = root / "src"
    src.mkdir()
    (src / "main.py").write_text("print('hi')")
    (src / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00")


def test_write_bundle(tmp_path: Path):
    repo = tmp_path / "repo"
    repo.mkdir()
    _make_repo(repo)
    output = tmp_path / "repo.txt"

    result = write_bundle(repo, output)

    assert result.output_path == output
    assert result.files_written == 3
    assert result.diagnostics.warning_count == 0
    assert output.read_text() == (
        f"{HEADER}\n"
        "--------\n.gitignore\n*.log\nbuild/\n"
        "--------\nREADME.md\n# Hello\n"
        "--------\nsrc/main.py\nprint('hi')\n"
        "----END----\n"
    )


def test_write_bundle_output_inside_tree_is_not_included(tmp_path: Path):
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "a.txt").write_text("a\n")
    output = repo / "repo.txt"
    output.write_text("stale bundle from a previous run\n")

    write_bundle(repo, output)

    content = output.read_text()
    assert "\nrepo.txt\n" not in content
    assert "stale bundle" not in content
    assert "partial" not in content
    assert "\na.txt\n" in content
    # No temporary files left behind.
    assert sorted(p.name for p in repo.iterdir()) == ["a.txt", "repo.txt"]


def test_write_bundle_extend_exclude_takes_precedence(tmp_path: Path):
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / ".gitignore").write_text("!docs/\n")
    docs = repo / "docs"
    docs.mkdir()
    (docs / "guide.md").write_text("# Guide\n")
    (repo / "main.py").write_text("pass\n")

    output = tmp_path / "out.txt"
    result = write_bundle(repo, output, BundleOptions(extend_exclude=["docs/"]))
    assert result.files_written == 2
    assert "docs/guide.md" not in output.read_text()


def test_write_bundle_include_vcs(tmp_path: Path):
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / ".git" / "HEAD").write_text("ref: refs/heads/main\n")

    output = tmp_path / "out.txt"
    assert write_bundle(repo, output).files_written == 0
    assert write_bundle(repo, output, BundleOptions(include_vcs=True)).files_written == 1
    assert "\n.git/HEAD\n" in output.read_text()


def test_write_bundle_makes_parent_directories(tmp_path: Path):
    repo = tmp_path / "repo"
    repo.mkdir()
    (repo / "a.txt").write_text("a\n")
    output = tmp_path / "nested" / "dir" / "repo.txt"
    write_bundle(repo, output)
    assert output.is_file()


def test_write_bundle_missing_directory_leaves_no_output(tmp_path: Path):
    output = tmp_path / "out.txt"
    with pytest.raises(TreeReadError):
        write_bundle(tmp_path / "missing", output)
    assert not output.exists()
    assert list(tmp_path.iterdir()) == []


def test_list_included_files(tmp_path: Path):
    _make_repo(tmp_path)
    files, diagnostics = list_included_files(tmp_path)
    assert files == [".gitignore", "README.md", "src/main.py"]
    assert diagnostics.warning_count == 0
