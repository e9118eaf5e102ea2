# grid.py
# the pixel buffer every stage reads and rewrites

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence
import numpy as np

FOREGROUND = 0    # ink / bean
BACKGROUND = 255  # paper / scanner bed

@dataclass
class Grid:
    pixels: np.ndarray   # int64 (H,W), row-major
    max_val: int = 255

    def __post_init__(self):
        self.pixels = np.ascontiguousarray(self.pixels, dtype=np.int64)
        if self.pixels.ndim != 2:
            raise ValueError(f"grid must be 2-D, got shape {self.pixels.shape}")

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], max_val: int = 255) -> "Grid":
        arr = np.array(rows, dtype=np.int64)
        if arr.size == 0:
            arr = arr.reshape(len(rows), 0)
        return cls(arr, max_val)

    def copy(self) -> "Grid":
        return Grid(self.pixels.copy(), self.max_val)

    def replace_pixels(self, new: np.ndarray) -> None:
        """Swap in a complete new buffer; never a partial update."""
        new = np.ascontiguousarray(new, dtype=np.int64)
        if new.shape != self.pixels.shape:
            raise ValueError(f"shape mismatch: {new.shape} != {self.pixels.shape}")
        self.pixels = new
