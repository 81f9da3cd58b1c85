# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Training state of a template recognizer.

A :class:`Recognizer` owns an ordered list of :class:`CharClass` entries,
each holding the samples of one label in two parallel collections: the
``unscaled`` samples as ingested and the ``normalized`` samples derived from
them when training is finished. Ingestion, finalization, averaging and
padding live in the sibling modules and operate on this state.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from ..config import RecogConfig
from ..errors import InvalidLabelError, RecogStateError
from ..models import Sample
from ..utils.json_utils import json_ready
from ..utils.log import log_event
from .labels import label_to_key

logger = logging.getLogger(__name__)

Point = Tuple[float, float]


@dataclass
class AverageTemplate:
    """Centroid-aligned, majority-thresholded average of a class collection."""

    bitmap: np.ndarray
    centroid: Point
    area: int

    @classmethod
    def placeholder(cls) -> "AverageTemplate":
        return cls(np.zeros((1, 1), dtype=bool), (0.0, 0.0), 0)

    @property
    def width(self) -> int:
        return int(self.bitmap.shape[1])

    @property
    def height(self) -> int:
        return int(self.bitmap.shape[0])


@dataclass
class SizeRange:
    min_width: int = 0
    min_height: int = 0
    max_width: int = 0
    max_height: int = 0


@dataclass
class SplitWindow:
    """Character size window handed to segmentation."""

    min_width: int = 0
    min_height: int = 0
    max_height: int = 0


@dataclass(eq=False)
class CharClass:
    index: int
    label: str
    key: Optional[int] = None
    unscaled: List[Sample] = field(default_factory=list)
    normalized: List[Sample] = field(default_factory=list)
    unscaled_centroids: List[Point] = field(default_factory=list)
    unscaled_areas: List[int] = field(default_factory=list)
    centroids: List[Point] = field(default_factory=list)
    areas: List[int] = field(default_factory=list)
    average_unscaled: Optional[AverageTemplate] = None
    average: Optional[AverageTemplate] = None

    @property
    def num_samples(self) -> int:
        return len(self.unscaled)

    def reset_training(self) -> None:
        self.normalized = []
        self.unscaled_centroids = []
        self.unscaled_areas = []
        self.centroids = []
        self.areas = []
        self.average_unscaled = None
        self.average = None


class Recognizer:
    """Classes, label lookup, configuration and lifecycle flags."""

    def __init__(self, config: Optional[RecogConfig] = None, **overrides: Any) -> None:
        if config is None:
            config = RecogConfig(**overrides)
        elif overrides:
            config = config.updated(**overrides)
        self.config = config
        self.classes: List[CharClass] = []
        self._index_by_key: Dict[int, int] = {}
        self.num_samples = 0
        self.training_finished = False
        self.averaging_done = False
        self.destroyed = False
        self.size_range_unscaled = SizeRange()
        self.size_range = SizeRange()
        self.split_window = SplitWindow()

    def __repr__(self) -> str:
        state = "destroyed" if self.destroyed else "finished" if self.training_finished else "collecting"
        return f"Recognizer(classes={self.num_classes}, samples={self.num_samples}, state={state})"

    @property
    def num_classes(self) -> int:
        return len(self.classes)

    @property
    def labels(self) -> List[str]:
        return [cls.label for cls in self.classes]

    def ensure_alive(self) -> None:
        if self.destroyed:
            raise RecogStateError("recognizer has been destroyed")

    def class_index(self, label: str) -> Optional[int]:
        """Index of the class for ``label``, or ``None`` when it has none."""

        try:
            key = label_to_key(label)
        except InvalidLabelError:
            return None
        return self.index_for_key(key)

    def index_for_key(self, key: int) -> Optional[int]:
        return self._index_by_key.get(key)

    def get_class(self, label: str) -> Optional[CharClass]:
        index = self.class_index(label)
        return None if index is None else self.classes[index]

    def add_class(self, label: str, key: Optional[int]) -> CharClass:
        """Append a new, empty class; classes are never inserted out of order."""

        cls = CharClass(index=len(self.classes), label=label, key=key)
        self.classes.append(cls)
        if key is not None and key not in self._index_by_key:
            self._index_by_key[key] = cls.index
        return cls

    def class_counts(self) -> Dict[str, int]:
        return {cls.label: cls.num_samples for cls in self.classes}

    def truncate(self) -> None:
        """Drop trailing classes without samples and rebuild the label lookup."""

        while self.classes and not self.classes[-1].unscaled:
            self.classes.pop()
        self._index_by_key = {}
        for cls in self.classes:
            if cls.key is not None and cls.key not in self._index_by_key:
                self._index_by_key[cls.key] = cls.index

    def extract_samples(self) -> List[Sample]:
        """Flat list of the unscaled samples in class order, labeled by class."""

        out: List[Sample] = []
        for cls in self.classes:
            for sample in cls.unscaled:
                out.append(sample if sample.text == cls.label else sample.with_text(cls.label))
        return out

    def destroy(self) -> None:
        """Release all training state; the instance can no longer be used."""

        self.classes = []
        self._index_by_key = {}
        self.averaging_done = False
        self.destroyed = True
        log_event(logger, "recognizer_destroyed", level="debug", num_samples=self.num_samples)

    def describe(self) -> Dict[str, Any]:
        """JSON-ready summary of the configuration and per-class content."""

        return json_ready(
            {
                "config": self.config.model_dump(mode="json"),
                "num_classes": self.num_classes,
                "num_samples": self.num_samples,
                "training_finished": self.training_finished,
                "averaging_done": self.averaging_done,
                "destroyed": self.destroyed,
                "classes": [
                    {
                        "index": cls.index,
                        "label": cls.label,
                        "unscaled": len(cls.unscaled),
                        "normalized": len(cls.normalized),
                    }
                    for cls in self.classes
                ],
                "size_range_unscaled": self.size_range_unscaled,
                "size_range": self.size_range,
                "split_window": self.split_window,
            }
        )


__all__ = ["AverageTemplate", "CharClass", "Recognizer", "SizeRange", "SplitWindow"]
