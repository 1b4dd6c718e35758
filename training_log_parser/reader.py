"""Generator-based folder enumeration and line streaming."""

import os
from typing import Generator


def enumerate_files(folder: str) -> Generator[str, None, None]:
    """Yield every file under *folder*, depth-first, sorted by name per directory.

    A subdirectory is expanded in place at its sorted position. OSError from
    listing a directory propagates to the caller.
    """
    for name in sorted(os.listdir(folder)):
        path = os.path.join(folder, name)
        if os.path.isdir(path):
            yield from enumerate_files(path)
        else:
            yield path


def read_lines(filepath: str) -> Generator[str, None, None]:
    """Yield each line of a file with its line terminator removed."""
    with open(filepath, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            yield line.rstrip("\r\n")
