"""
Built-in names used by the ignore engine.
"""

from __future__ import annotations

# Ignore files read in each directory, in this order.
IGNORE_FILE_NAMES: tuple[str, ...] = (".gitignore", ".unfolderignore")

# Version control directories, excluded wherever they appear as a full path segment
# unless explicitly included.
VCS_DIRECTORIES: frozenset[str] = frozenset(
    {
        ".git",
        ".svn",
        ".hg",
        ".bzr",
        "CVS",
        ".darcs",
    }
)
