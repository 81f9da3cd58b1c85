# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Image-processing primitives consumed by the recognizer core.

Everything here is a pure function over 2-D boolean bitmaps (``True`` is
foreground); PIL images and gray/RGB arrays only enter through
:func:`binarize` and :func:`crop_to_region`.
"""

from .binarization import binarize, clip_to_foreground, crop_to_region, foreground_box, is_binary
from .components import connected_components, merge_overlapping, select_by_size, sort_left_to_right
from .correlation import correlation_score
from .measure import centroid, foreground_area
from .morphology import close_brick, dilate_brick, erode_brick, set_stroke_width, thin
from .scaling import scale_by, scale_to_size
from .utils import as_bitmap

__all__ = [
    "as_bitmap",
    "binarize",
    "centroid",
    "clip_to_foreground",
    "close_brick",
    "connected_components",
    "correlation_score",
    "crop_to_region",
    "dilate_brick",
    "erode_brick",
    "foreground_area",
    "foreground_box",
    "is_binary",
    "merge_overlapping",
    "scale_by",
    "scale_to_size",
    "select_by_size",
    "set_stroke_width",
    "sort_left_to_right",
    "thin",
]
