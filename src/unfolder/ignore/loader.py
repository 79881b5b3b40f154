"""
Loading of `.gitignore` and `.unfolderignore` files into a `RuleStore`.

The tree is scanned depth-first, root first. Each directory's ignore files are read
before its subdirectories are visited, and a subdirectory that is already excluded
by the rules loaded so far is never entered, so ignore files inside it are never
read.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from pathlib import Path

from unfolder.errors import TreeReadError
from unfolder.ignore.decision import is_excluded
from unfolder.ignore.defaults import IGNORE_FILE_NAMES
from unfolder.ignore.types import Diagnostics, Rule, RuleStore

log = logging.getLogger(__name__)


def parse_ignore_lines(lines: Iterable[str], directory: str = "") -> list[Rule]:
    """
    Turn ignore-file lines into rules declared by `directory`. Blank lines and `#`
    comments are skipped, and a leading `!` marks a negated rule.
    """
    rules: list[Rule] = []
    for raw_line in lines:
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negated = line.startswith("!")
        pattern = line[1:] if negated else line
        rules.append(Rule(pattern=pattern, directory=directory, negated=negated))
    return rules


def read_ignore_file(path: Path, directory: str, diagnostics: Diagnostics) -> list[Rule]:
    """
    Read one ignore file. A missing file gives no rules. An unreadable or non-UTF-8
    file gives no rules and a warning. Other I/O errors raise `TreeReadError`.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (FileNotFoundError, IsADirectoryError):
        return []
    except PermissionError as e:
        diagnostics.warn(log, f"Permission denied reading {path}: {e}")
        return []
    except UnicodeDecodeError:
        diagnostics.warn(log, f"Skipping {path}: not valid UTF-8")
        return []
    except OSError as e:
        raise TreeReadError(path, e) from e
    return parse_ignore_lines(text.splitlines(), directory)


def list_directory(path: Path) -> list[os.DirEntry[str]]:
    """Directory entries sorted by name, so every pass sees the same order."""
    with os.scandir(path) as entries:
        return sorted(entries, key=lambda entry: entry.name)


def load_rules(
    root: str | Path,
    diagnostics: Diagnostics,
    ignore_file_names: Sequence[str] = IGNORE_FILE_NAMES,
    initial_rules: Iterable[Rule] = (),
) -> RuleStore:
    """
    Collect all rules under `root`, in discovery order.

    `initial_rules` go first, ahead of anything read from disk. Permission problems
    below the root are recorded in `diagnostics` and skipped. An unreadable root or
    any other I/O error raises `TreeReadError`.
    """
    root = Path(root)
    store = RuleStore(initial_rules)
    _load_directory(root, "", store, ignore_file_names, diagnostics)
    log.debug("Loaded %d ignore rules under %s", len(store), root)
    return store


def _load_directory(
    root: Path,
    rel_dir: str,
    store: RuleStore,
    ignore_file_names: Sequence[str],
    diagnostics: Diagnostics,
) -> None:
    current = root / rel_dir if rel_dir else root

    for name in ignore_file_names:
        store.extend(read_ignore_file(current / name, rel_dir, diagnostics))

    try:
        entries = list_directory(current)
    except PermissionError as e:
        if not rel_dir:
            raise TreeReadError(current, e) from e
        diagnostics.warn(log, f"Permission denied accessing {current}: {e}")
        return
    except OSError as e:
        raise TreeReadError(current, e) from e

    for entry in entries:
        if not entry.is_dir(follow_symlinks=False):
            continue
        sub_dir = f"{rel_dir}/{entry.name}" if rel_dir else entry.name
        if is_excluded(sub_dir, store):
            log.debug("Not scanning excluded directory for ignore files: %s", sub_dir)
            continue
        _load_directory(root, sub_dir, store, ignore_file_names, diagnostics)
