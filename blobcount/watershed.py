# watershed.py
# marker seeding + minimum-label relaxation (a simplified "watershed")
# Dependencies: numpy

from __future__ import annotations
import logging
from typing import List, Tuple
import numpy as np

from .grid import Grid, FOREGROUND, BACKGROUND

logger = logging.getLogger(__name__)

NO_MARKER = 0
UNREACHED = np.iinfo(np.int64).max  # above every marker id that can exist

NBRS = [(-1,-1),(-1,0),(-1,1),(0,-1),(0,1),(1,-1),(1,0),(1,1)]


def _seed(px: List[List[int]], mk: List[List[int]], h: int, w: int) -> Tuple[int, List[Tuple[int, int]]]:
    """Give each interior foreground pixel touching background a fresh id.
    Returns (next unused id, unmarked interior foreground pixels in raster order)."""
    next_id = 1
    pending = []
    for y in range(1, h - 1):
        for x in range(1, w - 1):
            if px[y][x] != FOREGROUND:
                continue
            if any(px[y+dy][x+dx] == BACKGROUND for dy, dx in NBRS):
                mk[y][x] = next_id; next_id += 1
            else:
                pending.append((y, x))
    return next_id, pending

def _sweep(mk: List[List[int]], pending: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """One raster sweep; assignments are visible to later pixels of the same sweep."""
    left = []
    for y, x in pending:
        best = UNREACHED
        for dy, dx in NBRS:
            m = mk[y+dy][x+dx]
            if m > NO_MARKER and m < best:
                best = m
        if best < UNREACHED:
            mk[y][x] = best
        else:
            left.append((y, x))
    return left

def marker_map(pixels: np.ndarray) -> Tuple[np.ndarray, int]:
    """
    Marker buffer for a 0/255 image:
      - seeds: interior foreground pixels with a background 8-neighbour,
        numbered 1, 2, ... in raster order (outer ring never seeded)
      - relaxation: unmarked interior foreground pixels take the smallest
        positive neighbour marker, sweep after sweep, until a sweep changes
        nothing. Cells are only ever filled, never reassigned.
    Returns (markers int64 (H,W), number of seeds).
    """
    h, w = pixels.shape
    px = pixels.tolist()
    mk = [[NO_MARKER] * w for _ in range(h)]
    next_id, pending = _seed(px, mk, h, w)

    sweeps = 0
    while pending:
        left = _sweep(mk, pending)
        sweeps += 1
        if len(left) == len(pending):
            break  # fixed point
        pending = left
    logger.debug("watershed: %d seeds, %d sweeps, %d foreground pixels unreached",
                 next_id - 1, sweeps, len(pending))
    return np.array(mk, dtype=np.int64).reshape(h, w), next_id - 1

def commit_markers(grid: Grid, markers: np.ndarray) -> Grid:
    """Write every positive marker into the grid; other pixels keep their value.
    Marker ids are not clamped to max_val."""
    grid.replace_pixels(np.where(markers > NO_MARKER, markers, grid.pixels))
    return grid

def propagate(grid: Grid) -> Grid:
    markers, seeds = marker_map(grid.pixels)
    logger.info("watershed: %d markers", seeds)
    return commit_markers(grid, markers)
