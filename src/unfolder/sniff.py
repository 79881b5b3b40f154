"""Binary content detection."""

from __future__ import annotations

from pathlib import Path

# How much of a file is checked for a zero byte.
SNIFF_SIZE = 512


def is_binary(path: Path) -> bool:
    """
    True if the first `SNIFF_SIZE` bytes of the file contain a zero byte. Empty
    files are text. I/O errors propagate to the caller.
    """
    with open(path, "rb") as f:
        head = f.read(SNIFF_SIZE)
    return b"\0" in head
