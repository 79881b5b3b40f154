"""
Ignore-rule engine: loads `.gitignore`-style rules from a directory tree and decides
which paths are excluded.

Usage::

    from unfolder.ignore import DecisionEngine, Diagnostics, load_rules

    diagnostics = Diagnostics()
    rules = load_rules("path/to/repo", diagnostics)
    engine = DecisionEngine(rules)
    engine.is_excluded("build/output.txt")
"""

from unfolder.ignore.decision import DecisionEngine, is_excluded
from unfolder.ignore.defaults import IGNORE_FILE_NAMES, VCS_DIRECTORIES
from unfolder.ignore.loader import load_rules
from unfolder.ignore.matcher import match_pattern
from unfolder.ignore.types import Diagnostics, Rule, RuleStore, to_candidate

__all__ = [
    "IGNORE_FILE_NAMES",
    "VCS_DIRECTORIES",
    "DecisionEngine",
    "Diagnostics",
    "Rule",
    "RuleStore",
    "is_excluded",
    "load_rules",
    "match_pattern",
    "to_candidate",
]
