"""
Output file opening for the critscore CLI.

"-" always means stdout. An existing file is never overwritten
silently: pass force to truncate it or append to add to it. A new
file is removed again if the run fails.
"""

from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, TextIO


STDIO_NAME = "-"


@contextmanager
def open_output(filename: str, force: bool = False, append: bool = False) -> Iterator[TextIO]:
    """
    Open the output destination for CSV writing.

    Raises:
        FileExistsError: If the file exists and neither force nor append is set
        OSError: If the file cannot be opened
    """
    if filename == STDIO_NAME:
        yield sys.stdout
        sys.stdout.flush()
        return

    path = Path(filename)
    if append:
        mode = "a"
    elif force:
        mode = "w"
    else:
        mode = "x"

    try:
        f = path.open(mode, encoding="utf-8", newline="")
    except FileExistsError:
        raise FileExistsError(
            f"{path} already exists (use --force to overwrite or --append to append)"
        ) from None
    with f:
        try:
            yield f
        except Exception:
            if mode == "x":
                # Created by this run; remove it so a rerun is not refused
                f.close()
                path.unlink(missing_ok=True)
            raise


@contextmanager
def open_input(filename: str) -> Iterator[TextIO]:
    """Open the input CSV, or stdin for "-"."""
    if filename == STDIO_NAME:
        yield sys.stdin
        return
    with Path(filename).open("r", encoding="utf-8", newline="") as f:
        yield f
