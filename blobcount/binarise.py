# binarise.py
# local (Sauvola) and global (Otsu) thresholding to a 0/255 grid

from __future__ import annotations
import logging
import numpy as np
from skimage.filters import threshold_otsu
from skimage.transform import integral_image

from .grid import Grid, FOREGROUND, BACKGROUND

logger = logging.getLogger(__name__)


def _window_sums(table: np.ndarray, r0, r1, c0, c1) -> np.ndarray:
    """Inclusive-exclusive box sums from a zero-padded summed-area table."""
    return (table[np.ix_(r1, c1)] - table[np.ix_(r0, c1)]
            - table[np.ix_(r1, c0)] + table[np.ix_(r0, c0)])

def sauvola_threshold(pixels: np.ndarray, window_radius: int, k: float, r: float) -> np.ndarray:
    """
    Per-pixel Sauvola threshold  mu * (1 + k * (sigma/r - 1)).
    The window is clipped at the image border, so edge pixels average over
    fewer samples. Sums are exact integers; mean/std follow E[x^2] - mu^2.
    """
    h, w = pixels.shape
    rad = max(int(window_radius), 0)
    img = pixels.astype(np.int64)
    # zero row/col in front so that window [a, b] is table[b+1] - table[a]
    s1 = np.pad(integral_image(img), ((1, 0), (1, 0)))
    s2 = np.pad(integral_image(img * img), ((1, 0), (1, 0)))

    rows = np.arange(h); cols = np.arange(w)
    r0 = np.maximum(rows - rad, 0); r1 = np.minimum(rows + rad, h - 1) + 1
    c0 = np.maximum(cols - rad, 0); c1 = np.minimum(cols + rad, w - 1) + 1

    num = np.outer(r1 - r0, c1 - c0).astype(np.float64)
    mean = _window_sums(s1, r0, r1, c0, c1) / num
    var = _window_sums(s2, r0, r1, c0, c1) / num - mean * mean
    std = np.sqrt(np.maximum(var, 0.0))
    return mean * (1 + k * ((std / r) - 1))

def threshold(grid: Grid, window_radius: int = 17, k: float = 0.92, r: float = 128.0) -> Grid:
    """Sauvola binarisation in place: 0 below the local threshold, 255 otherwise."""
    if grid.pixels.size == 0:
        return grid
    if window_radius < 0:
        logger.warning("negative window radius %d, using 0", window_radius)
        window_radius = 0
    thr = sauvola_threshold(grid.pixels, window_radius, k, r)
    out = np.where(grid.pixels < thr, FOREGROUND, BACKGROUND)
    grid.replace_pixels(out)
    logger.debug("sauvola r=%d k=%.3f R=%.1f: %d foreground pixels",
                 window_radius, k, r, int((out == FOREGROUND).sum()))
    return grid


def binarise(grid: Grid, threshold: int|None=None) -> tuple[Grid,int]:
    """Global binarisation in place; pixels at or below the level (Otsu by default) become foreground."""
    if threshold is None:
        threshold = int(threshold_otsu(grid.pixels)) if grid.pixels.size else 0
    grid.replace_pixels(np.where(grid.pixels <= threshold, FOREGROUND, BACKGROUND))
    return grid, threshold
