# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Binarization and cropping helpers."""
from __future__ import annotations

from typing import Optional, Sequence, Union

import numpy as np
from PIL import Image

from ..models import Box
from .utils import as_bitmap

__all__ = [
    "binarize",
    "clip_to_foreground",
    "crop_to_region",
    "foreground_box",
    "is_binary",
]

ImageLike = Union[Image.Image, np.ndarray]

# ITU-R 601 luma weights, the same ones PIL uses for ``convert("L")``.
_LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def _as_box(box: Union[Box, Sequence[int]]) -> Box:
    if isinstance(box, Box):
        return box
    x, y, w, h = (int(v) for v in box)
    return Box(x, y, w, h)


def is_binary(image: ImageLike) -> bool:
    if isinstance(image, Image.Image):
        return image.mode == "1"
    return np.asarray(getattr(image, "bitmap", image)).dtype == bool


def binarize(image: ImageLike, threshold: int = 128) -> np.ndarray:
    """Return a foreground bitmap for ``image``.

    Binary inputs (PIL mode ``"1"`` with black foreground, boolean arrays)
    are passed through. Anything else is reduced to 8-bit gray and pixels
    darker than ``threshold`` become foreground.
    """

    if image is None:
        raise ValueError("image not defined")
    binary = is_binary(image)
    if isinstance(image, Image.Image):
        if binary:
            return ~np.asarray(image, dtype=bool)
        gray = np.asarray(image.convert("L"), dtype=np.uint8)
        return gray < threshold
    arr = np.asarray(getattr(image, "bitmap", image))
    if binary:
        if arr.ndim != 2:
            raise ValueError(f"expected a 2-D bitmap, got shape {arr.shape}")
        return arr.copy()
    if arr.ndim == 3:
        if arr.shape[2] < 3:
            arr = arr[:, :, 0]
        else:
            arr = arr[:, :, :3].astype(np.float32) @ _LUMA
    if arr.ndim != 2:
        raise ValueError(f"cannot binarize array of shape {arr.shape}")
    return arr < threshold


def crop_to_region(image: ImageLike, box: Union[Box, Sequence[int]]) -> ImageLike:
    """Crop ``image`` to ``box`` (clipped to the image bounds)."""

    b = _as_box(box)
    if isinstance(image, Image.Image):
        W, H = image.size
    else:
        image = np.asarray(getattr(image, "bitmap", image))
        H, W = image.shape[:2]
    x0 = max(0, b.x)
    y0 = max(0, b.y)
    x1 = min(W, b.right)
    y1 = min(H, b.bottom)
    if x0 >= x1 or y0 >= y1:
        raise ValueError(f"box {tuple(b)} does not intersect a {W}x{H} image")
    if isinstance(image, Image.Image):
        return image.crop((x0, y0, x1, y1))
    return image[y0:y1, x0:x1].copy()


def foreground_box(bitmap) -> Optional[Box]:
    """Bounding box of the foreground, or ``None`` for an empty bitmap."""

    bm = as_bitmap(bitmap)
    rows = np.flatnonzero(bm.any(axis=1))
    if rows.size == 0:
        return None
    cols = np.flatnonzero(bm.any(axis=0))
    y0, y1 = int(rows[0]), int(rows[-1]) + 1
    x0, x1 = int(cols[0]), int(cols[-1]) + 1
    return Box(x0, y0, x1 - x0, y1 - y0)


def clip_to_foreground(bitmap) -> Optional[np.ndarray]:
    """Crop ``bitmap`` to its foreground; ``None`` when nothing is set."""

    bm = as_bitmap(bitmap)
    box = foreground_box(bm)
    if box is None:
        return None
    return bm[box.y : box.bottom, box.x : box.right].copy()
