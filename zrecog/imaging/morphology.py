"""Morphological helpers: brick filters, thinning and stroke normalization."""
from __future__ import annotations

import numpy as np

from .utils import as_bitmap

__all__ = ["close_brick", "dilate_brick", "erode_brick", "set_stroke_width", "thin"]


def _window_any(bw: np.ndarray, size: int, lead: int, axis: int) -> np.ndarray:
    """True where any pixel in ``[i - lead, i - lead + size)`` along ``axis`` is set."""

    n = bw.shape[axis]
    pad = [(0, 0), (0, 0)]
    pad[axis] = (lead + 1, size - 1 - lead)
    csum = np.pad(bw, pad, mode="constant").cumsum(axis=axis)
    hi = np.arange(n) + size
    lo = np.arange(n)
    if axis == 1:
        win = csum[:, hi] - csum[:, lo]
    else:
        win = csum[hi, :] - csum[lo, :]
    return win > 0


def dilate_brick(bitmap, width: int, height: int) -> np.ndarray:
    """Dilate with a ``width`` x ``height`` brick using running sums.

    An even-sized brick is off-center by one pixel. Pixels outside the
    image count as background.
    """

    wx = max(1, int(width))
    wy = max(1, int(height))
    h = _window_any(as_bitmap(bitmap).astype(np.int32), wx, (wx - 1) // 2, axis=1)
    return _window_any(h.astype(np.int32), wy, (wy - 1) // 2, axis=0)


def erode_brick(bitmap, width: int, height: int) -> np.ndarray:
    """Erode with a brick; pixels outside the image count as foreground.

    The brick is reflected relative to :func:`dilate_brick` so that a closing
    never loses foreground for even sizes.
    """

    wx = max(1, int(width))
    wy = max(1, int(height))
    inv = (~as_bitmap(bitmap)).astype(np.int32)
    h = _window_any(inv, wx, wx // 2, axis=1)
    return ~_window_any(h.astype(np.int32), wy, wy // 2, axis=0)


def close_brick(bitmap, width: int, height: int) -> np.ndarray:
    return erode_brick(dilate_brick(bitmap, width, height), width, height)


def thin(bitmap) -> np.ndarray:
    """Zhang-Suen thinning to an 8-connected skeleton."""

    img = np.pad(as_bitmap(bitmap).astype(np.uint8), 1, mode="constant")
    changed = True
    while changed:
        changed = False
        for step in (0, 1):
            p2 = img[:-2, 1:-1]
            p3 = img[:-2, 2:]
            p4 = img[1:-1, 2:]
            p5 = img[2:, 2:]
            p6 = img[2:, 1:-1]
            p7 = img[2:, :-2]
            p8 = img[1:-1, :-2]
            p9 = img[:-2, :-2]
            ring = [p2, p3, p4, p5, p6, p7, p8, p9, p2]
            count = sum(p.astype(np.int32) for p in ring[:8])
            transitions = sum(
                ((ring[i] == 0) & (ring[i + 1] == 1)).astype(np.int32) for i in range(8)
            )
            cond = (img[1:-1, 1:-1] == 1) & (count >= 2) & (count <= 6) & (transitions == 1)
            if step == 0:
                cond &= ((p2 & p4 & p6) == 0) & ((p4 & p6 & p8) == 0)
            else:
                cond &= ((p2 & p4 & p8) == 0) & ((p2 & p6 & p8) == 0)
            if cond.any():
                img[1:-1, 1:-1][cond] = 0
                changed = True
    return img[1:-1, 1:-1].astype(bool)


def set_stroke_width(bitmap, width: int) -> np.ndarray:
    """Thin to a skeleton, then dilate so every stroke is ``width`` pixels wide."""

    skeleton = thin(bitmap)
    if width <= 1:
        return skeleton
    return dilate_brick(skeleton, width, width)
