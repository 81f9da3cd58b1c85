# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Bootstrap template libraries used to pad sparse training sets."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol, Sequence

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from ..config import BOOTSTRAP_THRESHOLD, BOOTSTRAP_WIDTH_FACTORS
from ..errors import UnsupportedCharsetError
from ..imaging import clip_to_foreground, scale_by
from ..models import CharsetType, Sample
from ..utils.log import log_event
from .recognizer import Recognizer
from .training import create_from_samples

logger = logging.getLogger(__name__)

DIGITS = "0123456789"


class BootstrapLibrary(Protocol):
    def templates(self, charset_type: CharsetType) -> List[Sample]:
        ...


def extend_by_scaling(
    samples: Iterable[Sample],
    factors: Sequence[float],
    horizontal: bool = True,
    include_original: bool = True,
) -> List[Sample]:
    """Add a rescaled copy of every sample for each factor.

    The output is grouped per input sample, the original first.
    """

    out: List[Sample] = []
    for sample in samples:
        if include_original:
            out.append(sample)
        for factor in factors:
            if horizontal:
                bitmap = scale_by(sample.bitmap, factor, 1.0)
            else:
                bitmap = scale_by(sample.bitmap, 1.0, factor)
            out.append(Sample(bitmap, sample.text))
    return out


class RenderedDigitLibrary:
    """Digits drawn with Pillow's default font at a few point sizes."""

    def __init__(
        self,
        sizes: Sequence[int] = (24, 32, 40),
        width_factors: Sequence[float] = BOOTSTRAP_WIDTH_FACTORS,
    ) -> None:
        self.sizes = tuple(int(s) for s in sizes)
        self.width_factors = tuple(float(f) for f in width_factors)
        self._cache: Optional[List[Sample]] = None

    def _render(self, ch: str, size: int) -> Optional[np.ndarray]:
        font = ImageFont.load_default(size=size)
        img = Image.new("L", (size * 2, size * 2), 0)
        ImageDraw.Draw(img).text((2, 2), ch, fill=255, font=font)
        return clip_to_foreground(np.asarray(img) >= 128)

    def _build(self) -> List[Sample]:
        rendered: List[Sample] = []
        for size in self.sizes:
            for ch in DIGITS:
                bitmap = self._render(ch, size)
                if bitmap is None:
                    log_event(logger, "glyph_render_empty", level="warning", char=ch, size=size)
                    continue
                rendered.append(Sample(bitmap, ch))
        templates = extend_by_scaling(rendered, self.width_factors)
        log_event(logger, "bootstrap_rendered", level="debug", templates=len(templates), sizes=self.sizes)
        return templates

    def templates(self, charset_type: CharsetType = CharsetType.ARABIC_NUMERALS) -> List[Sample]:
        if CharsetType(charset_type) != CharsetType.ARABIC_NUMERALS:
            raise UnsupportedCharsetError(charset_type)
        if self._cache is None:
            self._cache = self._build()
        return list(self._cache)


_DEFAULT_LIBRARY: Optional[RenderedDigitLibrary] = None


def default_library() -> RenderedDigitLibrary:
    global _DEFAULT_LIBRARY
    if _DEFAULT_LIBRARY is None:
        _DEFAULT_LIBRARY = RenderedDigitLibrary()
    return _DEFAULT_LIBRARY


def make_boot_digit_recog(
    scale_height: int = 40,
    line_width: int = 5,
    max_y_shift: int = 1,
    library: Optional[BootstrapLibrary] = None,
) -> Recognizer:
    """Finished digit recognizer built from the bootstrap templates.

    Templates are scaled to ``scale_height`` (width follows the aspect ratio)
    and binarized at a fixed threshold of 128.
    """

    library = default_library() if library is None else library
    templates = library.templates(CharsetType.ARABIC_NUMERALS)
    recog = create_from_samples(
        templates,
        scale_width=0,
        scale_height=scale_height,
        line_width=line_width,
        threshold=BOOTSTRAP_THRESHOLD,
        max_y_shift=max_y_shift,
    )
    log_event(logger, "boot_recog_created", num_classes=recog.num_classes, num_samples=recog.num_samples)
    return recog


__all__ = [
    "BootstrapLibrary",
    "DIGITS",
    "RenderedDigitLibrary",
    "default_library",
    "extend_by_scaling",
    "make_boot_digit_recog",
]
