"""
Tree walk that decides, entry by entry, what goes into the bundle.

Entries are visited depth-first in name order. Excluded directories are pruned
before they are entered. A file is emitted only if it is not one of the output
files being written, is a regular file and not a symlink, is not excluded by the
rules, and does not look binary.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Collection, Iterator
from pathlib import Path

from unfolder.errors import TreeReadError
from unfolder.ignore.decision import DecisionEngine
from unfolder.ignore.loader import list_directory
from unfolder.ignore.types import Diagnostics
from unfolder.sniff import is_binary

log = logging.getLogger(__name__)

# Receives each emitted file as (slash-separated relative path, raw contents).
FileSink = Callable[[str, bytes], None]


def iter_included_files(
    root: str | Path,
    engine: DecisionEngine,
    diagnostics: Diagnostics,
    skip_paths: Collection[str | Path] = (),
) -> Iterator[tuple[Path, str]]:
    """
    Yield `(absolute path, relative path)` for every file under `root` that belongs
    in the bundle. `skip_paths` are never yielded, typically the output file itself.

    Permission errors below the root become warnings and skip the entry. Any other
    I/O error, or an unreadable root, raises `TreeReadError`.
    """
    abs_root = Path(os.path.abspath(root))
    skip = frozenset(Path(os.path.abspath(p)) for p in skip_paths)
    yield from _walk_directory(abs_root, "", engine, diagnostics, skip)


def _walk_directory(
    directory: Path,
    rel_dir: str,
    engine: DecisionEngine,
    diagnostics: Diagnostics,
    skip: frozenset[Path],
) -> Iterator[tuple[Path, str]]:
    try:
        entries = list_directory(directory)
    except PermissionError as e:
        if not rel_dir:
            raise TreeReadError(directory, e) from e
        diagnostics.warn(log, f"Permission denied accessing {directory}: {e}")
        return
    except OSError as e:
        raise TreeReadError(directory, e) from e

    for entry in entries:
        path = directory / entry.name
        candidate = f"{rel_dir}/{entry.name}" if rel_dir else entry.name

        if entry.is_dir(follow_symlinks=False):
            if engine.is_excluded(candidate):
                log.debug("Pruned directory: %s", candidate)
                continue
            yield from _walk_directory(path, candidate, engine, diagnostics, skip)
            continue

        if path in skip:
            continue
        if entry.is_symlink() or not entry.is_file(follow_symlinks=False):
            continue
        if engine.is_excluded(candidate):
            continue
        try:
            if is_binary(path):
                continue
        except PermissionError as e:
            diagnostics.warn(log, f"Permission denied reading {path}: {e}")
            continue
        except OSError as e:
            raise TreeReadError(path, e) from e

        yield path, candidate


def walk_tree(
    root: str | Path,
    sink: FileSink,
    engine: DecisionEngine,
    diagnostics: Diagnostics,
    skip_paths: Collection[str | Path] = (),
) -> int:
    """
    Read every included file under `root` and pass it to `sink`. Returns the
    number of files emitted.
    """
    emitted = 0
    for path, candidate in iter_included_files(root, engine, diagnostics, skip_paths):
        try:
            content = path.read_bytes()
        except PermissionError as e:
            diagnostics.warn(log, f"Permission denied reading {path}: {e}")
            continue
        except OSError as e:
            raise TreeReadError(path, e) from e
        sink(candidate, content)
        emitted += 1
    return emitted
