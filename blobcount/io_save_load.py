# io_save_load.py
# plain-text grid (P2) load/save, JSON reports

from __future__ import annotations
import json, logging, os
import pathlib as _p
from typing import IO
import numpy as np

from .grid import Grid

logger = logging.getLogger(__name__)

MAGIC = "P2"
MAX_HEADER_LINE = 4096  # longer header lines are rejected, never truncated


class GridFormatError(ValueError):
    """Unrecognised magic, unparseable header field or short pixel data."""


def _read_header_line(f: IO[str]) -> str | None:
    line = f.readline(MAX_HEADER_LINE + 2)
    if len(line.rstrip("\r\n")) > MAX_HEADER_LINE:
        raise GridFormatError(f"header line longer than {MAX_HEADER_LINE} characters")
    return line if line else None

def _next_valid_line(f: IO[str], what: str) -> str:
    # skips '#' comments and blank lines
    while True:
        line = _read_header_line(f)
        if line is None:
            raise GridFormatError(f"unexpected end of file while reading {what}")
        if line.startswith("#") or not line.strip():
            continue
        return line

def _ints(line: str, n: int, what: str) -> list[int]:
    fields = line.split()[:n]
    try:
        values = [int(v) for v in fields]
    except ValueError:
        raise GridFormatError(f"cannot parse {what}: {line.strip()!r}") from None
    if len(values) < n:
        raise GridFormatError(f"cannot parse {what}: {line.strip()!r}")
    return values


def read_pgm(path: str) -> Grid:
    """
    Read a plain-text grayscale grid:
      magic line, `width height`, `max_val`, then width*height integers.
    Header values are trusted as given. Open failures raise OSError.
    """
    with open(path, "r", encoding="ascii", errors="replace") as f:
        magic = _read_header_line(f)
        if magic is None:
            raise GridFormatError("empty file")
        if magic.rstrip("\r\n") != MAGIC:
            raise GridFormatError(f"unsupported file format: {magic.rstrip()!r}")

        width, height = _ints(_next_valid_line(f, "size"), 2, "width/height")
        (max_val,) = _ints(_next_valid_line(f, "max value"), 1, "max value")

        n = width * height
        tokens = f.read().split()

    if len(tokens) < n:
        raise GridFormatError(f"expected {n} pixels, found {len(tokens)}")
    try:
        data = np.array([int(t) for t in tokens[:n]], dtype=np.int64)
    except ValueError:
        raise GridFormatError("failed to read pixel data") from None

    logger.debug("read %s: %dx%d max=%d", path, width, height, max_val)
    return Grid(data.reshape(height, width), max_val)


def write_pgm(path: str, grid: Grid) -> None:
    with open(path, "w", encoding="ascii") as f:
        f.write(f"{MAGIC}\n{grid.width} {grid.height}\n{grid.max_val}\n")
        for row in grid.pixels.tolist():
            f.write(" ".join(map(str, row)) + "\n")
    logger.debug("wrote %s", path)


def save_json(path: str, obj: dict):
    _p.Path(os.path.dirname(path) or ".").mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f: json.dump(obj, f, ensure_ascii=False, indent=2)
