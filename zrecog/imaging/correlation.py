# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Correlation score between two bitmaps."""
from __future__ import annotations

import numpy as np

from .utils import as_bitmap, clamp, overlap_slices

__all__ = ["correlation_score"]


def _round_away(value: float) -> int:
    return int(value + 0.5) if value >= 0 else int(value - 0.5)


def correlation_score(
    bitmap1,
    bitmap2,
    area1: int,
    area2: int,
    dx: float,
    dy: float,
    max_diff_w: int,
    max_diff_h: int,
) -> float:
    """Return ``overlap**2 / (area1 * area2)`` in ``[0, 1]``.

    ``bitmap2`` is translated by ``(dx, dy)`` (rounded half away from zero)
    before it is intersected with ``bitmap1``. Pairs whose sizes differ by
    more than ``max_diff_w``/``max_diff_h`` score 0 without being compared,
    as do pairs with an empty foreground.
    """

    b1 = as_bitmap(bitmap1)
    b2 = as_bitmap(bitmap2)
    h1, w1 = b1.shape
    h2, w2 = b2.shape
    if abs(w1 - w2) > max_diff_w or abs(h1 - h2) > max_diff_h:
        return 0.0
    if area1 <= 0 or area2 <= 0:
        return 0.0
    slices = overlap_slices(b1.shape, b2.shape, _round_away(dx), _round_away(dy))
    if slices is None:
        return 0.0
    dst, src = slices
    count = int(np.count_nonzero(b1[dst] & b2[src]))
    return clamp(float(count) * float(count) / (float(area1) * float(area2)), 0.0, 1.0)
