"""
Writing a directory tree out as a single text bundle.

The bundle is a header paragraph, then one section per included file, then an end
marker::

    <header>
    --------
    src/main.py
    <file contents>
    --------
    README.md
    <file contents>
    ----END----
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO

from strif import atomic_output_file

from unfolder.ignore.decision import DecisionEngine
from unfolder.ignore.defaults import IGNORE_FILE_NAMES
from unfolder.ignore.loader import load_rules, parse_ignore_lines
from unfolder.ignore.types import Diagnostics
from unfolder.walker import iter_included_files, walk_tree

log = logging.getLogger(__name__)

SECTION_DIVIDER = "--------"
"""Line that starts each file section."""

END_MARKER = "----END----"
"""Line that ends the bundle."""

HEADER = (
    "This text describes a repository with code. It consists of sections starting with "
    f"{SECTION_DIVIDER}, followed by a line with the file path and name, then varying "
    f"lines of file contents. The repository text concludes when {END_MARKER} is reached. "
    f"Any text after {END_MARKER} is to be understood as instructions related to the "
    "provided repository."
)


@dataclass
class BundleOptions:
    """
    Settings for one bundle run.

    `extend_exclude` patterns use ignore-file syntax and are placed ahead of every
    rule read from disk, so they take precedence over all of them.
    """

    include_vcs: bool = False
    ignore_file_names: list[str] = field(default_factory=lambda: list(IGNORE_FILE_NAMES))
    extend_exclude: list[str] = field(default_factory=list)


@dataclass
class BundleResult:
    """What a bundle run produced."""

    output_path: Path
    files_written: int
    diagnostics: Diagnostics


def determine_output_path(directory: str | Path, output: str | None = None) -> Path:
    """
    Resolve where the bundle goes. With no `output`, it is `<dirname>.txt` in the
    current directory. An `output` ending in a path separator is a directory that
    gets the same default name. Anything else is used as is.
    """
    base_name = Path(os.path.abspath(directory)).name
    default_name = f"{base_name}.txt"

    if not output:
        return Path(default_name)
    if output.endswith(("/", "\\")):
        return Path(output) / default_name
    return Path(output)


class BundleWriter:
    """Writes bundle framing and file sections to a binary stream."""

    def __init__(self, stream: BinaryIO) -> None:
        self._stream: BinaryIO = stream

    def _write_line(self, text: str) -> None:
        self._stream.write(text.encode("utf-8") + b"\n")

    def write_header(self) -> None:
        self._write_line(HEADER)

    def write_file(self, rel_path: str, content: bytes) -> None:
        """Write one section. Contents are copied as is, plus a final newline if missing."""
        self._write_line(SECTION_DIVIDER)
        self._write_line(rel_path)
        self._stream.write(content)
        if content and not content.endswith(b"\n"):
            self._stream.write(b"\n")

    def write_end(self) -> None:
        self._write_line(END_MARKER)


def build_engine(
    directory: str | Path, options: BundleOptions, diagnostics: Diagnostics
) -> DecisionEngine:
    """Load all ignore rules under `directory` and wrap them for the walk."""
    initial_rules = parse_ignore_lines(options.extend_exclude)
    rules = load_rules(directory, diagnostics, options.ignore_file_names, initial_rules)
    return DecisionEngine(rules, include_vcs=options.include_vcs)


def list_included_files(
    directory: str | Path,
    options: BundleOptions | None = None,
    skip_paths: Sequence[str | Path] = (),
) -> tuple[list[str], Diagnostics]:
    """Relative paths of the files a bundle of `directory` would contain, in order."""
    options = options or BundleOptions()
    diagnostics = Diagnostics()
    engine = build_engine(directory, options, diagnostics)
    files = [
        candidate
        for _path, candidate in iter_included_files(directory, engine, diagnostics, skip_paths)
    ]
    return files, diagnostics


def write_bundle(
    directory: str | Path,
    output_path: str | Path,
    options: BundleOptions | None = None,
) -> BundleResult:
    """
    Load ignore rules under `directory`, then write every included file to
    `output_path`.

    The output is written atomically: if the run fails, nothing appears at
    `output_path` and no partial file is left behind. The output file and its
    temporary file are never included in the bundle, even when they are inside
    `directory`.

    Raises `TreeReadError` on fatal I/O errors while reading the tree. Errors
    writing the output propagate unchanged.
    """
    options = options or BundleOptions()
    diagnostics = Diagnostics()
    output_path = Path(output_path)

    engine = build_engine(directory, options, diagnostics)

    with atomic_output_file(output_path, make_parents=True) as tmp_path:
        try:
            with open(tmp_path, "wb") as f:
                writer = BundleWriter(f)
                writer.write_header()
                files_written = walk_tree(
                    directory,
                    writer.write_file,
                    engine,
                    diagnostics,
                    skip_paths=(output_path, tmp_path),
                )
                writer.write_end()
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    log.info("Wrote %d files to %s", files_written, output_path)
    return BundleResult(
        output_path=output_path, files_written=files_written, diagnostics=diagnostics
    )
