"""Pixel statistics used for alignment and scoring."""
from __future__ import annotations

from typing import Tuple

import numpy as np

from .utils import as_bitmap

__all__ = ["centroid", "foreground_area"]


def centroid(bitmap) -> Tuple[float, float]:
    """Mean ``(x, y)`` of the foreground pixels; ``(0.0, 0.0)`` when empty."""

    ys, xs = np.nonzero(as_bitmap(bitmap))
    if xs.size == 0:
        return 0.0, 0.0
    return float(xs.mean()), float(ys.mean())


def foreground_area(bitmap) -> int:
    return int(np.count_nonzero(as_bitmap(bitmap)))
