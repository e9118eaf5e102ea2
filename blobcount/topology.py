# topology.py
# 8-connected component labelling (explicit-stack flood fill)

import logging
import numpy as np

from .grid import Grid, FOREGROUND

logger = logging.getLogger(__name__)

NBRS = [(-1,-1),(-1,0),(-1,1),(0,-1),(0,1),(1,-1),(1,0),(1,1)]

def label_components(mask: np.ndarray) -> tuple[np.ndarray,int]:
    h, w = mask.shape
    m = mask.tolist()
    labels = [[0] * w for _ in range(h)]; lid = 0
    for y in range(h):
        for x in range(w):
            if not m[y][x] or labels[y][x] != 0: continue
            # no recursion: a blob can cover the whole image
            lid += 1; stack = [(y,x)]; labels[y][x] = lid
            while stack:
                cy,cx = stack.pop()
                for dy,dx in NBRS:
                    ny,nx = cy+dy, cx+dx
                    if 0<=ny<h and 0<=nx<w and m[ny][nx] and labels[ny][nx]==0:
                        labels[ny][nx]=lid; stack.append((ny,nx))
    return np.array(labels, dtype=np.int32).reshape(h, w), lid

def count_components(grid: Grid) -> int:
    """Number of 8-connected blobs of foreground (value 0). Does not modify the grid."""
    _, n = label_components(grid.pixels == FOREGROUND)
    logger.info("found %d components", n)
    return n
