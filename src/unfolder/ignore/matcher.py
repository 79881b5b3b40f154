"""
Pattern matching for ignore rules.

`match_pattern()` tests one candidate path (relative to the directory that declared
the rule) against one pattern. It recognizes these forms, in this order:

- `a/**/b`: starts with `a`, ends with `/b`
- `a/**`: `a` itself or anything under it
- `**/a`: `a` itself or anything ending in `/a`
- exact equality
- `a/`: `a` itself or anything under it
- `*`, `?`, `[...]` wildcards, matched over the whole path as one string
- a bare name: anything under it

Note that `*` is not stopped by `/`: `*.log` matches `sub/app.log`. Malformed
character classes never raise, they just never match.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import cache

# Characters that make a pattern a wildcard pattern rather than a literal.
_GLOB_CHARS = frozenset("*?[")


@dataclass(frozen=True)
class _CharClass:
    """A `[...]` class as inclusive character ranges. Single characters have lo == hi."""

    ranges: tuple[tuple[str, str], ...]
    negated: bool = False

    def accepts(self, ch: str) -> bool:
        for lo, hi in self.ranges:
            if lo <= ch <= hi:
                return not self.negated
        return self.negated


# Stands in for `[]` and for an unterminated `[`.
_NEVER = _CharClass(())

_Token = str | _CharClass


def _normalize(path: str) -> str:
    return path.replace(os.sep, "/").removeprefix("/")


def match_pattern(candidate: str, pattern: str) -> bool:
    """
    Return True if `candidate` matches the ignore `pattern`.

    Both are normalized to forward slashes with one leading slash removed.
    """
    candidate = _normalize(candidate)
    pattern = _normalize(pattern)

    # A leftover `!` (e.g. from `!!name`) is not supported here.
    if pattern.startswith("!"):
        return False

    if "/**/" in pattern:
        return _match_double_star(candidate, pattern)

    if pattern.endswith("/**"):
        base = pattern[: -len("/**")]
        return candidate == base or candidate.startswith(base + "/")

    if pattern.startswith("**/"):
        base = pattern[len("**/") :]
        return candidate == base or candidate.endswith("/" + base)

    if candidate == pattern:
        return True

    if pattern.endswith("/"):
        base = pattern[:-1]
        return candidate == base or candidate.startswith(base + "/")

    if any(c in pattern for c in _GLOB_CHARS):
        return glob_match(candidate, pattern)

    return candidate.startswith(pattern + "/")


def _match_double_star(candidate: str, pattern: str) -> bool:
    """Match `prefix/**/suffix`. More than one `/**/` is not supported."""
    parts = pattern.split("/**/")
    if len(parts) != 2:
        return False
    prefix, suffix = parts

    if not prefix:
        return candidate == suffix or candidate.endswith("/" + suffix)
    if not suffix:
        return candidate == prefix or candidate.startswith(prefix + "/")

    if not candidate.startswith(prefix):
        return False
    remaining = candidate[len(prefix) :]
    return remaining.endswith("/" + suffix)


def _parse_class(body: str) -> _CharClass:
    if not body:
        return _NEVER
    negated = body.startswith("!")
    if negated:
        body = body[1:]

    ranges: list[tuple[str, str]] = []
    i = 0
    while i < len(body):
        if i + 2 < len(body) and body[i + 1] == "-":
            ranges.append((body[i], body[i + 2]))
            i += 3
        else:
            ranges.append((body[i], body[i]))
            i += 1
    return _CharClass(tuple(ranges), negated)


def _tokenize(pattern: str) -> list[_Token]:
    """
    Split a wildcard pattern into tokens: `"*"`, `"?"`, a literal character, or a
    `_CharClass`. Runs of `*` collapse to one, since they match the same texts.
    """
    tokens: list[_Token] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "[":
            end = pattern.find("]", i + 1)
            if end == -1:
                tokens.append(_NEVER)
                break
            tokens.append(_parse_class(pattern[i + 1 : end]))
            i = end + 1
            continue
        if ch == "*" and tokens and tokens[-1] == "*":
            i += 1
            continue
        tokens.append(ch)
        i += 1
    return tokens


def _accepts(token: _Token, ch: str) -> bool:
    if isinstance(token, _CharClass):
        return token.accepts(ch)
    return token == "?" or token == ch


def glob_match(text: str, pattern: str) -> bool:
    """
    Backtracking wildcard match of the whole of `text` against `pattern`.

    `*` matches any run of characters, including `/`. `?` matches one character.
    `[abc]`, `[a-z]` and `[!a-z]` match one character in (or not in) the class.
    Results are memoized per (text position, pattern position), so adjacent
    wildcards do not blow up.
    """
    tokens = _tokenize(pattern)
    n_text = len(text)
    n_tokens = len(tokens)

    @cache
    def match_from(ti: int, pi: int) -> bool:
        # Single-character tokens are consumed in a loop; only `*` recurses.
        while pi < n_tokens:
            token = tokens[pi]
            if token == "*":
                if pi + 1 == n_tokens:
                    return True
                return any(match_from(i, pi + 1) for i in range(ti, n_text + 1))
            if ti == n_text or not _accepts(token, text[ti]):
                return False
            ti += 1
            pi += 1
        return ti == n_text

    return match_from(0, 0)
