"""Shared test fixtures."""

from __future__ import annotations

import numpy as np
import pytest

from blobcount.grid import Grid


# 5x5 scan: a dark 3x3 bean on bright paper
BEAN_5X5 = [
    [240, 240, 240, 240, 240],
    [240, 10, 10, 10, 240],
    [240, 10, 10, 10, 240],
    [240, 10, 10, 10, 240],
    [240, 240, 240, 240, 240],
]

BEAN_5X5_PGM = """P2
# a single bean
5 5
255
240 240 240 240 240
240 10 10 10 240
240 10 10 10 240
240 10 10 10 240
240 240 240 240 240
"""


def binary(rows: list[str]) -> Grid:
    """'#' is foreground (0), anything else background (255)."""
    return Grid.from_rows([[0 if c == "#" else 255 for c in row] for row in rows])


@pytest.fixture
def bean_grid() -> Grid:
    return Grid.from_rows(BEAN_5X5)


@pytest.fixture
def bean_file(tmp_path) -> str:
    path = tmp_path / "bean.pgm"
    path.write_text(BEAN_5X5_PGM)
    return str(path)


@pytest.fixture
def noisy_scan() -> Grid:
    """Speckled paper with three dark blobs."""
    rng = np.random.default_rng(7)
    px = rng.integers(180, 256, size=(40, 60))
    px[5:12, 5:14] = rng.integers(0, 60, size=(7, 9))
    px[20:30, 30:38] = rng.integers(0, 60, size=(10, 8))
    px[30:36, 48:56] = rng.integers(0, 60, size=(6, 8))
    return Grid(px, 255)
