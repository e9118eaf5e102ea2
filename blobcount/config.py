# config.py
# tuning constants and output locations

from __future__ import annotations

from dataclasses import dataclass

METHODS = ("sauvola", "otsu")
ORDERS = ("propagate-first", "threshold-first")


@dataclass
class PipelineConfig:
    """Defaults reproduce the historical bean-counter run."""

    # Sauvola binarisation
    window_radius: int = 17  # half-width, window is (2r+1)^2 before clipping
    k: float = 0.920  # sensitivity
    r: float = 128.0  # dynamic range of the standard deviation

    method: str = "sauvola"  # or "otsu" (single global level)

    # "propagate-first" writes marker ids into the raw image and binarises
    # that relabelled image, so the ids shift the Sauvola window statistics
    # and the count. "threshold-first" binarises the raw image, counts, then
    # propagates on a copy. The two orders can give different counts.
    order: str = "propagate-first"

    # Persisted intermediate images; None skips the write
    watershed_path: str | None = "watershed.pgm"
    threshold_path: str | None = "sauvola_thresholded.pgm"

    def validate(self) -> "PipelineConfig":
        if self.method not in METHODS:
            raise ValueError(f"unknown method {self.method!r}, expected one of {METHODS}")
        if self.order not in ORDERS:
            raise ValueError(f"unknown order {self.order!r}, expected one of {ORDERS}")
        return self
