"""Exception types raised by unfolder."""

from __future__ import annotations

from pathlib import Path


class UnfolderError(Exception):
    """Base class for fatal unfolder errors."""


class TreeReadError(UnfolderError, OSError):
    """
    A structural I/O failure while scanning or reading the tree. Always fatal.
    The underlying `OSError` is kept as `__cause__`.
    """

    def __init__(self, path: str | Path, cause: OSError) -> None:
        self.path: Path = Path(path)
        super().__init__(f"Could not read {self.path}: {cause.strerror or cause}")


class ConfigError(UnfolderError):
    """A config file exists but could not be parsed."""
