# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Sample ingestion and the labeled-image adapters that feed it.

Class membership is resolved by an ingestion request: :class:`ByLabel`
derives the class from each sample's text, :class:`ByClassIndex` forces every
sample of a batch into one class (e.g. one font of a multi-font set).
Samples whose label cannot be converted are skipped and logged; the rest of
the batch is still ingested.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from PIL import Image

from ..config import (
    MULTI_LABEL_CLOSE_HEIGHT,
    MULTI_LABEL_MIN_BLOB_HEIGHT,
    MULTI_LABEL_MIN_BLOB_WIDTH,
)
from ..errors import (
    EmptyImageError,
    InvalidLabelError,
    RecogStateError,
    SegmentationMismatchError,
)
from ..imaging import (
    binarize,
    clip_to_foreground,
    close_brick,
    connected_components,
    crop_to_region,
    merge_overlapping,
    select_by_size,
    sort_left_to_right,
)
from ..models import Box, Sample
from ..utils.log import log_event
from .labels import label_to_key
from .recognizer import Recognizer

logger = logging.getLogger(__name__)

BoxLike = Union[Box, Sequence[int]]


class IngestRequest(Protocol):
    def validate(self, recog: Recognizer) -> None:
        ...

    def resolve(self, recog: Recognizer, sample: Sample) -> int:
        ...


@dataclass(frozen=True)
class ByLabel:
    """Resolve the class from the sample's own text, creating it if unseen."""

    def validate(self, recog: Recognizer) -> None:
        return None

    def resolve(self, recog: Recognizer, sample: Sample) -> int:
        key = label_to_key(sample.text)
        index = recog.index_for_key(key)
        if index is None:
            index = recog.add_class(sample.text, key).index
            log_event(logger, "class_created", index=index, label=sample.text)
        return index


@dataclass(frozen=True)
class ByClassIndex:
    """Put every sample into class ``index``.

    ``index`` may equal the current class count, in which case the class is
    created from the first sample's label.
    """

    index: int

    def validate(self, recog: Recognizer) -> None:
        if self.index < 0 or self.index > recog.num_classes:
            raise ValueError(
                f"class index {self.index} out of range for {recog.num_classes} classes"
            )

    def resolve(self, recog: Recognizer, sample: Sample) -> int:
        if self.index == recog.num_classes:
            try:
                key: Optional[int] = label_to_key(sample.text)
            except InvalidLabelError:
                key = None
            recog.add_class(sample.text or str(self.index), key)
            log_event(logger, "class_created", index=self.index, label=sample.text, forced=True)
        return self.index


def add_samples(
    recog: Recognizer,
    samples: Union[Sample, Iterable[Sample]],
    class_index: Optional[int] = None,
) -> int:
    """Append ``samples`` to their classes' unscaled collections.

    Returns the number of samples ingested. Fails without touching ``recog``
    when it is missing, finished or destroyed, when the batch is empty, or
    when a forced ``class_index`` is out of range.
    """

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    if recog.training_finished:
        raise RecogStateError("training has been completed")
    if samples is None:
        raise ValueError("samples not defined")
    batch = [samples] if isinstance(samples, Sample) else list(samples)
    if not batch:
        raise ValueError("no samples to add")
    for sample in batch:
        if not isinstance(sample, Sample):
            raise TypeError(f"expected Sample, got {type(sample).__name__}")
    request: IngestRequest = ByLabel() if class_index is None else ByClassIndex(class_index)
    request.validate(recog)

    added = 0
    for sample in batch:
        try:
            index = request.resolve(recog, sample)
        except InvalidLabelError as exc:
            log_event(
                logger,
                "sample_rejected",
                level="warning",
                label=sample.text,
                reason=str(exc),
                num_samples=recog.num_samples,
            )
            continue
        recog.classes[index].unscaled.append(sample)
        recog.num_samples += 1
        added += 1
    log_event(logger, "samples_added", level="debug", added=added, batch=len(batch))
    return added


def _resolve_text(image, text: Optional[str]) -> str:
    if text:
        return text
    embedded = getattr(image, "text", None)
    if not embedded and isinstance(image, Image.Image):
        embedded = image.info.get("text")
    if not embedded:
        raise InvalidLabelError(None, "no text given and none embedded in the image")
    return str(embedded)


def _binary_region(image, box: Optional[BoxLike], threshold: int):
    if image is None:
        raise ValueError("image not defined")
    if box is not None:
        image = crop_to_region(image, box)
    return binarize(image, threshold)


def process_single_labeled(
    recog: Recognizer,
    image,
    box: Optional[BoxLike] = None,
    text: Optional[str] = None,
) -> Sample:
    """Crop, binarize and clip one character image to a labeled sample."""

    if recog is None:
        raise ValueError("recog not defined")
    label = _resolve_text(image, text)
    binary = _binary_region(image, box, recog.config.threshold)
    clipped = clip_to_foreground(binary)
    if clipped is None:
        raise EmptyImageError(f"no foreground in image labeled {label!r}")
    return Sample(clipped, label)


def process_multi_labeled(
    recog: Recognizer,
    image,
    box: Optional[BoxLike] = None,
    text: Optional[str] = None,
    debug: bool = False,
) -> List[Sample]:
    """Split a strip of contiguous characters into one sample per character.

    A tall vertical closing pulls each character into a single blob; blobs
    are merged where their boxes overlap and tiny ones are dropped. The call
    fails with :class:`SegmentationMismatchError` unless exactly one blob is
    left per character of the label.
    """

    if recog is None:
        raise ValueError("recog not defined")
    label = _resolve_text(image, text)
    binary = _binary_region(image, box, recog.config.threshold)

    closed = close_brick(binary, 1, MULTI_LABEL_CLOSE_HEIGHT)
    boxes = merge_overlapping(connected_components(closed, connectivity=8))
    boxes = select_by_size(boxes, MULTI_LABEL_MIN_BLOB_WIDTH, MULTI_LABEL_MIN_BLOB_HEIGHT)
    if len(boxes) != len(label):
        payload = {"label": label, "found": len(boxes), "num_samples": recog.num_samples}
        if debug:
            payload["boxes"] = [tuple(b) for b in boxes]
        log_event(logger, "segmentation_mismatch", level="error", **payload)
        raise SegmentationMismatchError(label, boxes)

    samples = []
    for blob, char in zip(sort_left_to_right(boxes), label):
        crop = clip_to_foreground(binary[blob.y : blob.bottom, blob.x : blob.right])
        if crop is None:
            raise EmptyImageError(f"empty component for {char!r} in {label!r}")
        samples.append(Sample(crop, char))
    return samples


def train_labeled(
    recog: Recognizer,
    image,
    box: Optional[BoxLike] = None,
    text: Optional[str] = None,
    multi: bool = False,
    debug: bool = False,
) -> int:
    """Extract labeled samples from ``image`` and ingest them.

    ``multi`` selects the contiguous multi-character adapter. Extraction
    failures propagate before anything is added to ``recog``.
    """

    if recog is None:
        raise ValueError("recog not defined")
    recog.ensure_alive()
    if recog.training_finished:
        raise RecogStateError("training has been completed")
    if multi:
        samples = process_multi_labeled(recog, image, box, text, debug=debug)
    else:
        samples = [process_single_labeled(recog, image, box, text)]
    return add_samples(recog, samples)


__all__ = [
    "ByClassIndex",
    "ByLabel",
    "IngestRequest",
    "add_samples",
    "process_multi_labeled",
    "process_single_labeled",
    "train_labeled",
]
