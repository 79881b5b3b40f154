#!/usr/bin/env python3
"""
unfolder: Flatten a repository into a single text file for AI analysis

Common usage:
  unfolder                      # bundle . into ./<dirname>.txt
  unfolder path/to/repo
  unfolder path/to/repo out.txt
  unfolder path/to/repo out/    # writes out/<dirname>.txt
  unfolder --list-files .

Files matched by .gitignore and .unfolderignore rules are left out, as are binary
files, symlinks, and version control directories (unless --include-vcs is given).
"""

from __future__ import annotations

import argparse
import importlib.metadata
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path

from unfolder.bundle import BundleOptions, determine_output_path, list_included_files, write_bundle
from unfolder.config import find_config_file, load_config, merge_cli_with_config
from unfolder.errors import UnfolderError
from unfolder.ignore.defaults import IGNORE_FILE_NAMES
from unfolder.ignore.types import Diagnostics


@dataclass
class Options:
    """Command-line options for the unfolder tool."""

    directory: str
    output: str | None
    include_vcs: bool
    extend_exclude: list[str]
    list_files: bool
    verbose: bool
    version: bool
    # Only settable from a config file
    ignore_files: list[str] = field(default_factory=lambda: list(IGNORE_FILE_NAMES))


class UsageError(Exception):
    """Bad positional arguments."""


def _parse_args(args: list[str] | None = None) -> tuple[Options, set[str]]:
    """
    Parse command-line arguments.

    Returns a tuple of (options, explicit_flags) where `explicit_flags` tracks
    which flags the user explicitly passed (for config merge precedence).
    """
    module_doc = __doc__ or ""
    doc_parts = module_doc.split("\n\n")
    description = doc_parts[0]
    epilog = "\n\n".join(doc_parts[1:])

    parser = argparse.ArgumentParser(
        prog="unfolder",
        description=description,
        epilog=epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "paths",
        nargs="*",
        type=str,
        default=[],
        metavar="PATH",
        help="Directory to bundle (default: '.') and output file. An output ending in '/' "
        "is a directory that receives <dirname>.txt (default: ./<dirname>.txt)",
    )
    parser.add_argument(
        "--include-vcs",
        "--vcs",
        action="store_true",
        dest="include_vcs",
        help="Include VCS directories (.git/, .svn/, etc.) in output",
    )
    parser.add_argument(
        "--extend-exclude",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Additional ignore pattern, checked before all ignore files (e.g., 'docs/'). "
        "Can be repeated",
    )
    parser.add_argument(
        "--list-files",
        action="store_true",
        dest="list_files",
        help="Print the relative paths that would be bundled, without writing output",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log pruned directories and other details to stderr",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version information and exit",
    )
    opts = parser.parse_args(args)

    if len(opts.paths) > 2:
        raise UsageError("Too many arguments")
    directory = opts.paths[0] if opts.paths else "."
    output = opts.paths[1] if len(opts.paths) == 2 else None

    # Re-parse with sentinel defaults to detect which flags were actually supplied,
    # rather than comparing against default values.
    _SENTINEL = object()
    sentinel_parser = argparse.ArgumentParser(add_help=False)
    sentinel_parser.add_argument(
        "--include-vcs", "--vcs", dest="include_vcs", action="store_true", default=_SENTINEL
    )
    sentinel_parser.add_argument("--extend-exclude", action="append", default=None)
    sentinel_opts, _ = sentinel_parser.parse_known_args(args if args is not None else sys.argv[1:])

    explicit_flags: set[str] = set()
    if sentinel_opts.include_vcs is not _SENTINEL:
        explicit_flags.add("include_vcs")
    if sentinel_opts.extend_exclude is not None:
        explicit_flags.add("extend_exclude")

    return (
        Options(
            directory=directory,
            output=output,
            include_vcs=opts.include_vcs,
            extend_exclude=opts.extend_exclude,
            list_files=opts.list_files,
            verbose=opts.verbose,
            version=opts.version,
        ),
        explicit_flags,
    )


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def _print_warning_summary(diagnostics: Diagnostics) -> None:
    if diagnostics.warning_count > 0:
        print(
            f"\nNote: {diagnostics.warning_count} warning(s) occurred during processing. "
            "Some files may have been skipped due to permission issues.",
            file=sys.stderr,
        )


def main(args: list[str] | None = None) -> int:
    """
    Main entry point for the unfolder CLI.

    Args:
        args: Command-line arguments (uses sys.argv if None)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        options, explicit_flags = _parse_args(args)
    except UsageError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    _setup_logging(options.verbose)

    if options.version:
        try:
            version = importlib.metadata.version("unfolder")
            print(f"v{version}")
        except importlib.metadata.PackageNotFoundError:
            print("unknown (package not installed)")
        return 0

    try:
        config_path = find_config_file(Path.cwd())
        if config_path:
            merge_cli_with_config(options, load_config(config_path), explicit_flags)
    except (UnfolderError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not Path(options.directory).is_dir():
        print(f"Error: Not a directory: {options.directory}", file=sys.stderr)
        return 1

    bundle_options = BundleOptions(
        include_vcs=options.include_vcs,
        ignore_file_names=options.ignore_files,
        extend_exclude=options.extend_exclude,
    )

    try:
        if options.list_files:
            files, diagnostics = list_included_files(options.directory, bundle_options)
            for rel_path in files:
                print(rel_path)
            _print_warning_summary(diagnostics)
            return 0

        output_path = determine_output_path(options.directory, options.output)
        result = write_bundle(options.directory, output_path, bundle_options)
    except OSError as e:
        # Includes TreeReadError, and failures writing the output file.
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Repository contents written to {result.output_path}")
    _print_warning_summary(result.diagnostics)
    return 0


if __name__ == "__main__":
    sys.exit(main())
