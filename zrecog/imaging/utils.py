"""Utility helpers shared by the imaging primitives."""
from __future__ import annotations

from typing import Optional, Tuple, TypeVar

import numpy as np

_T = TypeVar("_T")

Slices = Tuple[slice, slice]


def clamp(x: _T, lo: _T, hi: _T) -> _T:
    """Clamp ``x`` between ``lo`` and ``hi`` while preserving the original type."""

    return lo if x < lo else hi if x > hi else x


def as_bitmap(obj) -> np.ndarray:
    """Return ``obj`` as a 2-D boolean bitmap (nonzero is foreground).

    Accepts numpy arrays and anything exposing a ``bitmap`` attribute, such as
    :class:`zrecog.models.Sample`. Boolean arrays are returned without a copy.
    """

    if obj is None:
        raise ValueError("bitmap not defined")
    arr = np.asarray(getattr(obj, "bitmap", obj))
    if arr.ndim != 2:
        raise ValueError(f"expected a 2-D bitmap, got shape {arr.shape}")
    if arr.dtype != bool:
        arr = arr != 0
    return arr


def overlap_slices(
    dst_shape: Tuple[int, int], src_shape: Tuple[int, int], dx: int, dy: int
) -> Optional[Tuple[Slices, Slices]]:
    """Slices pairing ``dst`` with ``src`` placed at offset ``(dx, dy)``.

    Returns ``None`` when the translated source falls entirely outside the
    destination.
    """

    dh, dw = dst_shape
    sh, sw = src_shape
    x0 = max(0, dx)
    x1 = min(dw, dx + sw)
    y0 = max(0, dy)
    y1 = min(dh, dy + sh)
    if x0 >= x1 or y0 >= y1:
        return None
    dst = (slice(y0, y1), slice(x0, x1))
    src = (slice(y0 - dy, y1 - dy), slice(x0 - dx, x1 - dx))
    return dst, src


__all__ = ["as_bitmap", "clamp", "overlap_slices"]
