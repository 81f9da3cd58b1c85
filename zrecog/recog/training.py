# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Training finalization: normalized samples and per-sample statistics."""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

import numpy as np

from ..config import RecogConfig
from ..imaging import centroid, foreground_area, scale_to_size, set_stroke_width
from ..models import Sample
from ..utils.log import log_event
from .ingest import add_samples
from .recognizer import Recognizer

logger = logging.getLogger(__name__)

__all__ = ["create_from_samples", "finish_training", "modify_template"]


def modify_template(recog: Recognizer, bitmap) -> np.ndarray:
    """Scale ``bitmap`` to the configured size, then normalize its strokes.

    Scaling is skipped when every non-zero target dimension already matches;
    stroke normalization only runs for a positive ``line_width``.
    """

    if recog is None:
        raise ValueError("recog not defined")
    if bitmap is None:
        raise ValueError("bitmap not defined")
    cfg = recog.config
    bm = np.asarray(getattr(bitmap, "bitmap", bitmap), dtype=bool)
    h, w = bm.shape
    if (cfg.scale_width == 0 or cfg.scale_width == w) and (cfg.scale_height == 0 or cfg.scale_height == h):
        scaled = bm.copy()
    else:
        scaled = scale_to_size(bm, cfg.scale_width, cfg.scale_height)
    if cfg.line_width <= 0:
        return scaled
    return set_stroke_width(scaled, cfg.line_width)


def finish_training(recog: Recognizer, modify: bool = True) -> Recognizer:
    """Freeze ingestion and derive the normalized sample collections.

    With ``modify`` false the normalized collection reuses the unscaled
    samples unchanged, which is what rehydrating a stored recognizer needs.
    Calling this on a finished recognizer is a no-op.
    """

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    if recog.training_finished:
        return recog

    for cls in recog.classes:
        cls.reset_training()
        for sample in cls.unscaled:
            cls.unscaled_centroids.append(centroid(sample.bitmap))
            cls.unscaled_areas.append(foreground_area(sample.bitmap))
            if modify:
                normalized = Sample(modify_template(recog, sample.bitmap), sample.text)
            else:
                normalized = sample
            cls.normalized.append(normalized)
            cls.centroids.append(centroid(normalized.bitmap))
            cls.areas.append(foreground_area(normalized.bitmap))

    recog.truncate()
    recog.training_finished = True
    recog.averaging_done = False
    log_event(
        logger,
        "training_finished",
        num_classes=recog.num_classes,
        num_samples=recog.num_samples,
        modified=bool(modify),
    )
    if logger.isEnabledFor(logging.DEBUG):
        log_event(logger, "recognizer_content", level="debug", **recog.describe())
    return recog


def create_from_samples(
    samples: Iterable[Sample],
    config: Optional[RecogConfig] = None,
    **overrides: Any,
) -> Recognizer:
    """Build a finished recognizer from labeled ``samples``.

    Raises ``ValueError`` when none of the samples could be ingested.
    """

    if samples is None:
        raise ValueError("samples not defined")
    recog = Recognizer(config, **overrides)
    add_samples(recog, samples)
    if recog.num_samples == 0:
        raise ValueError("no valid labeled samples")
    return finish_training(recog, modify=True)
