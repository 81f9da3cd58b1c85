# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Remove samples that correlate poorly with their class average."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from ..config import (
    DEFAULT_MIN_FRACTION,
    DEFAULT_MIN_SCORE,
    OUTLIER_MAX_SIZE_DIFF,
    OUTLIER_MAX_Y_SHIFT,
    OUTLIER_SCALE_HEIGHT,
    OUTLIER_THRESHOLD,
)
from ..imaging import correlation_score
from ..models import Sample
from ..utils.log import log_event
from .average import average_samples
from .recognizer import CharClass
from .training import create_from_samples

logger = logging.getLogger(__name__)


@dataclass
class OutlierResult:
    kept: List[Sample] = field(default_factory=list)
    removed: List[Sample] = field(default_factory=list)
    removed_scores: List[float] = field(default_factory=list)
    cutoffs: Dict[str, float] = field(default_factory=dict)


def rank_value(scores: Sequence[float], fraction: float) -> float:
    """Score at ``int((1 - fraction) * (n - 1))`` of the ascending order."""

    if not scores:
        raise ValueError("no scores to rank")
    ordered = sorted(scores)
    index = int((1.0 - fraction) * (len(ordered) - 1))
    return ordered[max(0, min(index, len(ordered) - 1))]


def retention_cutoff(scores: Sequence[float], min_score: float, min_fraction: float) -> float:
    """Lowest score a sample may have and still be kept.

    Taking the minimum with the rank score guarantees that at least
    ``min_fraction`` of the class survives even when every sample scores
    below ``min_score``.
    """

    return min(max(scores), min_score, rank_value(scores, min_fraction))


def _class_scores(cls: CharClass) -> List[float]:
    avg = cls.average
    ax, ay = avg.centroid
    scores = []
    for sample, (x, y), area in zip(cls.normalized, cls.centroids, cls.areas):
        score = correlation_score(
            avg.bitmap,
            sample.bitmap,
            avg.area,
            area,
            ax - x,
            ay - y,
            OUTLIER_MAX_SIZE_DIFF,
            OUTLIER_MAX_SIZE_DIFF,
        )
        if score == 0.0:
            log_event(logger, "zero_score", level="debug", label=cls.label)
        scores.append(score)
    return scores


def remove_outliers(
    samples: Iterable[Sample],
    min_score: float = DEFAULT_MIN_SCORE,
    min_fraction: float = DEFAULT_MIN_FRACTION,
    capture_removed: bool = False,
) -> OutlierResult:
    """Filter ``samples`` class by class against the class average.

    The samples are normalized to a fixed height of 40 in a throwaway
    recognizer; the kept entries are the original, unscaled samples.
    ``min_score`` and ``min_fraction`` are capped at 1 and fall back to the
    defaults when not positive.
    """

    if samples is None:
        raise ValueError("samples not defined")
    min_score = DEFAULT_MIN_SCORE if min_score <= 0 else min(1.0, float(min_score))
    min_fraction = DEFAULT_MIN_FRACTION if min_fraction <= 0 else min(1.0, float(min_fraction))

    recog = create_from_samples(
        samples,
        scale_width=0,
        scale_height=OUTLIER_SCALE_HEIGHT,
        line_width=0,
        threshold=OUTLIER_THRESHOLD,
        max_y_shift=OUTLIER_MAX_Y_SHIFT,
    )
    average_samples(recog)

    result = OutlierResult()
    try:
        for cls in recog.classes:
            if not cls.normalized:
                continue
            scores = _class_scores(cls)
            cutoff = retention_cutoff(scores, min_score, min_fraction)
            result.cutoffs[cls.label] = cutoff
            kept = 0
            for sample, score in zip(cls.unscaled, scores):
                if score >= cutoff:
                    result.kept.append(sample)
                    kept += 1
                elif capture_removed:
                    result.removed.append(sample)
                    result.removed_scores.append(score)
            log_event(
                logger,
                "outliers_filtered",
                level="debug",
                label=cls.label,
                cutoff=cutoff,
                kept=kept,
                total=len(scores),
            )
    finally:
        recog.destroy()

    log_event(
        logger,
        "outlier_removal_done",
        kept=len(result.kept),
        total=recog.num_samples,
        min_score=min_score,
        min_fraction=min_fraction,
    )
    return result


__all__ = ["OutlierResult", "rank_value", "remove_outliers", "retention_cutoff"]
