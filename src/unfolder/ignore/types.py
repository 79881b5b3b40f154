"""Rule, rule store, and diagnostics types for the ignore engine."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rule:
    """
    One ignore pattern together with the directory whose ignore file declared it.

    `directory` is a slash-separated path relative to the scan root, with `""`
    meaning the root itself. `pattern` has any leading `!` already stripped;
    `negated` records whether it was present.
    """

    pattern: str
    directory: str = ""
    negated: bool = False


class RuleStore:
    """
    Rules in discovery order: root rules first, then each subdirectory's rules in
    traversal order. The order decides which rule wins, so the store is append-only.
    """

    def __init__(self, rules: Iterable[Rule] = ()) -> None:
        self._rules: list[Rule] = list(rules)

    def extend(self, rules: Iterable[Rule]) -> None:
        self._rules.extend(rules)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"RuleStore({self._rules!r})"


@dataclass
class Diagnostics:
    """
    Non-fatal problems seen during one run. Passed explicitly to every call that
    can hit one, then summarized by the caller.
    """

    warnings: list[str] = field(default_factory=list)

    def warn(self, logger: logging.Logger, message: str) -> None:
        """Log `message` as a warning on the caller's `logger` and record it."""
        logger.warning("%s", message)
        self.warnings.append(message)

    @property
    def warning_count(self) -> int:
        return len(self.warnings)


def to_candidate(rel_path: str | os.PathLike[str]) -> str:
    """Normalize a root-relative path to the slash-separated form rules match against."""
    candidate = os.fspath(rel_path).replace(os.sep, "/")
    if candidate == ".":
        return ""
    return candidate
