# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Pad sparse training sets with bootstrap templates."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..errors import UnsupportedCharsetError
from ..models import CharsetType, Sample
from ..utils.log import log_event
from .bootstrap import BootstrapLibrary, default_library
from .recognizer import Recognizer
from .training import create_from_samples

logger = logging.getLogger(__name__)


def is_padding_needed(recog: Recognizer) -> List[str]:
    """Labels that need bootstrap templates, or ``[]`` when none do.

    Charset labels with no class come first, in charset order, followed by
    existing classes holding fewer than ``min_samples_per_class`` samples.
    """

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    minimum = recog.config.min_samples_per_class
    missing = [label for label in recog.config.charset.labels() if recog.class_index(label) is None]
    sparse = [cls.label for cls in recog.classes if cls.num_samples < minimum]
    needed = missing + sparse
    if needed:
        log_event(logger, "padding_needed", level="debug", missing=missing, sparse=sparse, minimum=minimum)
    return needed


def charset_available(charset_type: CharsetType) -> bool:
    available = CharsetType(charset_type) == CharsetType.ARABIC_NUMERALS
    if not available:
        log_event(logger, "charset_unavailable", charset=CharsetType(charset_type).value)
    return available


def add_pad_templates(
    recog: Recognizer,
    labels: Iterable[str],
    library: Optional[BootstrapLibrary] = None,
) -> List[Sample]:
    """The recognizer's own samples plus every bootstrap template in ``labels``."""

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    charset_type = recog.config.charset.type
    if not charset_available(charset_type):
        raise UnsupportedCharsetError(charset_type)
    wanted = set(labels)
    library = default_library() if library is None else library
    padding = [t for t in library.templates(charset_type) if t.text in wanted]
    log_event(logger, "pad_templates", level="debug", labels=sorted(wanted), templates=len(padding))
    return recog.extract_samples() + padding


def pad_training_set(
    recog: Recognizer,
    scale_height: int,
    line_width: int,
    library: Optional[BootstrapLibrary] = None,
) -> Recognizer:
    """Return a recognizer whose classes are padded with bootstrap templates.

    When nothing needs padding ``recog`` itself is returned. Otherwise a new
    recognizer is trained from the padded samples, normalized to
    ``scale_height`` and ``line_width`` with the remaining settings carried
    over, and ``recog`` is destroyed.
    """

    needed = is_padding_needed(recog)
    if not needed:
        return recog
    samples = add_pad_templates(recog, needed, library)
    config = recog.config.updated(scale_width=0, scale_height=scale_height, line_width=line_width)
    padded = create_from_samples(samples, config)
    log_event(
        logger,
        "training_set_padded",
        labels=needed,
        before=recog.num_samples,
        after=padded.num_samples,
    )
    recog.destroy()
    return padded


__all__ = ["add_pad_templates", "charset_available", "is_padding_needed", "pad_training_set"]
