"""Include/exclude decisions for a path, given the rules loaded so far."""

from __future__ import annotations

from collections.abc import Iterable

from unfolder.ignore.defaults import VCS_DIRECTORIES
from unfolder.ignore.matcher import match_pattern
from unfolder.ignore.types import Rule, to_candidate


def in_vcs_directory(candidate: str) -> bool:
    """True if any segment of `candidate` is a version control directory name."""
    return any(part in VCS_DIRECTORIES for part in candidate.split("/"))


def rule_matches(candidate: str, rule: Rule) -> bool:
    """
    Check whether `rule` applies to `candidate` and its pattern matches.

    A rule only applies inside the directory that declared it. Its pattern is
    matched against the path relative to that directory.
    """
    if not rule.directory:
        return match_pattern(candidate, rule.pattern)

    scope = rule.directory + "/"
    if candidate.startswith(scope):
        return match_pattern(candidate[len(scope) :], rule.pattern)
    if candidate == rule.directory:
        return match_pattern(candidate, rule.pattern)
    return False


def is_excluded(candidate: str, rules: Iterable[Rule], include_vcs: bool = False) -> bool:
    """
    Decide whether `candidate` (a slash-separated path relative to the scan root)
    is excluded.

    VCS directories are excluded first unless `include_vcs` is set. Then rules are
    checked in store order and the first one that matches decides: excluded, or
    included if the rule is negated. Later rules are never consulted, so a negation
    in a subdirectory cannot undo a root rule that already matched.
    """
    candidate = to_candidate(candidate)
    if not include_vcs and in_vcs_directory(candidate):
        return True

    for rule in rules:
        if rule_matches(candidate, rule):
            return not rule.negated
    return False


class DecisionEngine:
    """The loaded rules and VCS setting for one run, as used by the tree walker."""

    def __init__(self, rules: Iterable[Rule], include_vcs: bool = False) -> None:
        self.rules: tuple[Rule, ...] = tuple(rules)
        self.include_vcs: bool = include_vcs

    def is_excluded(self, candidate: str) -> bool:
        return is_excluded(candidate, self.rules, self.include_vcs)
