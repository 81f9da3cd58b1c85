# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Per-class averaged templates and the size envelopes derived from them."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from ..config import (
    MAX_AVERAGE_SAMPLES,
    MIN_ENVELOPE_SIZE,
    SPLIT_MARGIN,
    SPLIT_MIN_SIZE,
    SPLIT_SKEW_ALLOWANCE,
)
from ..imaging import as_bitmap, centroid, foreground_area
from ..imaging.utils import overlap_slices
from ..models import Sample
from ..utils.log import log_event
from .recognizer import AverageTemplate, Point, Recognizer, SizeRange, SplitWindow
from .training import finish_training

logger = logging.getLogger(__name__)


def accumulate_samples(
    bitmaps: Iterable,
    centroids: Optional[Sequence[Point]] = None,
    cap: int = MAX_AVERAGE_SAMPLES,
) -> Tuple[np.ndarray, float, float]:
    """Sum centroid-aligned bitmaps into an 8-bit saturating accumulator.

    The canvas is the largest width by the largest height of the (at most
    ``cap``) samples. Each sample is shifted by ``int(xave - x)``,
    ``int(yave - y)`` so its centroid lands on the average centroid; pixels
    falling off the canvas are dropped. Returns ``(acc, xave, yave)``.
    """

    bms = [as_bitmap(b) for b in bitmaps][: max(0, int(cap))]
    if not bms:
        raise ValueError("no samples to accumulate")
    if centroids is None:
        cents = [centroid(b) for b in bms]
    else:
        cents = list(centroids)[: len(bms)]
        if len(cents) != len(bms):
            raise ValueError(f"{len(bms)} samples but {len(cents)} centroids")

    xave = float(sum(c[0] for c in cents)) / len(cents)
    yave = float(sum(c[1] for c in cents)) / len(cents)
    height = max(b.shape[0] for b in bms)
    width = max(b.shape[1] for b in bms)

    acc = np.zeros((height, width), dtype=np.uint32)
    for bm, (x, y) in zip(bms, cents):
        placed = overlap_slices(acc.shape, bm.shape, int(xave - x), int(yave - y))
        if placed is None:
            continue
        dst, src = placed
        acc[dst] += bm[src]
    return np.minimum(acc, 255).astype(np.uint8), xave, yave


def _average_collection(samples: List[Sample], stored: List[Point], cap: int) -> AverageTemplate:
    used = samples[:cap]
    if not used:
        return AverageTemplate.placeholder()
    cents: Optional[List[Point]] = stored[: len(used)] if len(stored) >= len(used) else None
    acc, xave, yave = accumulate_samples([s.bitmap for s in used], cents, cap)
    threshold = max(len(used), 2) // 2
    bitmap = acc >= threshold
    return AverageTemplate(bitmap, (xave, yave), foreground_area(bitmap))


def size_envelope(averages: Iterable[Optional[AverageTemplate]]) -> SizeRange:
    """Min/max width and height over averages of at least 5x5."""

    sizes = [
        (a.width, a.height)
        for a in averages
        if a is not None and a.width >= MIN_ENVELOPE_SIZE and a.height >= MIN_ENVELOPE_SIZE
    ]
    if not sizes:
        return SizeRange()
    widths = [w for w, _ in sizes]
    heights = [h for _, h in sizes]
    return SizeRange(min(widths), min(heights), max(widths), max(heights))


def split_window(unscaled: SizeRange) -> SplitWindow:
    return SplitWindow(
        min_width=max(SPLIT_MIN_SIZE, unscaled.min_width - SPLIT_MARGIN),
        min_height=max(SPLIT_MIN_SIZE, unscaled.min_height - SPLIT_MARGIN),
        max_height=unscaled.max_height + SPLIT_SKEW_ALLOWANCE,
    )


def average_samples(
    recog: Recognizer, cap: int = MAX_AVERAGE_SAMPLES, force: bool = False
) -> Recognizer:
    """Compute the unscaled and normalized average of every class.

    A recognizer still collecting samples is finalized first. Classes with
    no samples get a 1x1 placeholder with centroid ``(0, 0)`` and area 0 so
    that downstream scoring never sees a missing template.
    """

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    if recog.averaging_done and not force:
        return recog
    if not recog.training_finished:
        finish_training(recog, modify=True)

    cap = max(1, int(cap))
    for cls in recog.classes:
        cls.average_unscaled = _average_collection(cls.unscaled, cls.unscaled_centroids, cap)
        cls.average = _average_collection(cls.normalized, cls.centroids, cap)
        if cls.average.area == 0 and cls.num_samples:
            log_event(logger, "empty_average", level="warning", label=cls.label, samples=cls.num_samples)

    recog.size_range_unscaled = size_envelope(c.average_unscaled for c in recog.classes)
    recog.size_range = size_envelope(c.average for c in recog.classes)
    recog.split_window = split_window(recog.size_range_unscaled)
    recog.averaging_done = True
    log_event(
        logger,
        "averaging_done",
        level="debug",
        num_classes=recog.num_classes,
        size_range=recog.size_range,
        split_window=recog.split_window,
    )
    return recog


__all__ = ["accumulate_samples", "average_samples", "size_envelope", "split_window"]
