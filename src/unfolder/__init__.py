"""
unfolder: flatten a directory tree into one text bundle, honoring `.gitignore` and
`.unfolderignore` rules.

Usage::

    from unfolder import BundleOptions, write_bundle

    result = write_bundle("path/to/repo", "repo.txt", BundleOptions(include_vcs=False))
    print(result.files_written, result.diagnostics.warning_count)
"""

from unfolder.bundle import (
    BundleOptions,
    BundleResult,
    determine_output_path,
    list_included_files,
    write_bundle,
)
from unfolder.errors import ConfigError, TreeReadError, UnfolderError

__all__ = [
    "BundleOptions",
    "BundleResult",
    "ConfigError",
    "TreeReadError",
    "UnfolderError",
    "determine_output_path",
    "list_included_files",
    "write_bundle",
]
