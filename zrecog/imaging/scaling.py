"""Bitmap scaling through Pillow's resampling filters."""
from __future__ import annotations

import numpy as np
from PIL import Image

from .utils import as_bitmap

__all__ = ["scale_by", "scale_to_size"]


def _resize(bm: np.ndarray, width: int, height: int) -> np.ndarray:
    width = max(1, int(width))
    height = max(1, int(height))
    if bm.shape == (height, width):
        return bm.copy()
    img = Image.fromarray(bm.astype(np.uint8) * 255)
    out = img.resize((width, height), Image.Resampling.BILINEAR)
    return np.asarray(out) >= 128


def scale_to_size(bitmap, width: int = 0, height: int = 0) -> np.ndarray:
    """Scale to ``width`` x ``height``.

    A zero dimension is derived from the other one so the aspect ratio is
    kept; with both zero the bitmap is returned unscaled.
    """

    bm = as_bitmap(bitmap)
    h, w = bm.shape
    if width <= 0 and height <= 0:
        return bm.copy()
    if width <= 0:
        width = int(round(w * height / float(h)))
    elif height <= 0:
        height = int(round(h * width / float(w)))
    return _resize(bm, width, height)


def scale_by(bitmap, sx: float = 1.0, sy: float = 1.0) -> np.ndarray:
    """Scale each axis by its own factor (anisotropic when ``sx != sy``)."""

    bm = as_bitmap(bitmap)
    h, w = bm.shape
    return _resize(bm, int(round(w * sx)), int(round(h * sy)))
