# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Recognizer configuration and fixed algorithm parameters."""
from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field

from .models import CharsetSpec, CharsetType

# Averaging only looks at the first MAX_AVERAGE_SAMPLES of a class.
MAX_AVERAGE_SAMPLES = 256

# Averages smaller than this in either dimension are left out of the
# template size envelope (the empty-class placeholder is 1x1).
MIN_ENVELOPE_SIZE = 5
SPLIT_MARGIN = 5
SPLIT_MIN_SIZE = 5
SPLIT_SKEW_ALLOWANCE = 12

DEFAULT_MIN_SCORE = 0.75
DEFAULT_MIN_FRACTION = 0.5
OUTLIER_SCALE_HEIGHT = 40
OUTLIER_THRESHOLD = 128
OUTLIER_MAX_Y_SHIFT = 1
OUTLIER_MAX_SIZE_DIFF = 5

# Vertical closing used to pull each character of a labeled strip into one blob.
MULTI_LABEL_CLOSE_HEIGHT = 70
MULTI_LABEL_MIN_BLOB_WIDTH = 2
MULTI_LABEL_MIN_BLOB_HEIGHT = 8

BOOTSTRAP_WIDTH_FACTORS = (0.9, 1.1, 1.2)
BOOTSTRAP_THRESHOLD = 128


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    raw = raw.strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_charset(name: str, default: CharsetType) -> CharsetType:
    raw = (os.environ.get(name) or "").strip().lower()
    if not raw:
        return default
    try:
        return CharsetType(raw)
    except ValueError:
        return default


class RecogConfig(BaseModel):
    """Parameters a recognizer is created with.

    ``scale_width``/``scale_height`` of 0 leave that axis unscaled, a
    ``line_width`` of 0 keeps the scanned strokes instead of normalizing them.
    """

    scale_width: int = Field(0, ge=0)
    scale_height: int = Field(0, ge=0)
    line_width: int = Field(0, ge=0)
    threshold: int = Field(150, ge=1, le=255)
    max_y_shift: int = Field(1, ge=0, le=2)
    min_samples_per_class: int = Field(3, ge=1)
    charset: CharsetSpec = Field(default_factory=CharsetSpec)

    @classmethod
    def from_env(cls, prefix: str = "ZRECOG_", **overrides: Any) -> "RecogConfig":
        """Build a config from ``<prefix>*`` environment variables.

        Blank or unparsable values fall back to the field defaults; keyword
        ``overrides`` win over the environment.
        """

        base = cls()
        values = {
            "scale_width": _env_int(f"{prefix}SCALE_WIDTH", base.scale_width),
            "scale_height": _env_int(f"{prefix}SCALE_HEIGHT", base.scale_height),
            "line_width": _env_int(f"{prefix}LINE_WIDTH", base.line_width),
            "threshold": _env_int(f"{prefix}THRESHOLD", base.threshold),
            "max_y_shift": _env_int(f"{prefix}MAX_Y_SHIFT", base.max_y_shift),
            "min_samples_per_class": _env_int(
                f"{prefix}MIN_SAMPLES_PER_CLASS", base.min_samples_per_class
            ),
            "charset": CharsetSpec(type=_env_charset(f"{prefix}CHARSET", base.charset.type)),
        }
        values.update(overrides)
        return cls(**values)

    def updated(self, **changes: Any) -> "RecogConfig":
        """Return a validated copy with ``changes`` applied."""

        values = self.model_dump()
        values.update(changes)
        return type(self)(**values)


__all__ = [
    "BOOTSTRAP_THRESHOLD",
    "BOOTSTRAP_WIDTH_FACTORS",
    "DEFAULT_MIN_FRACTION",
    "DEFAULT_MIN_SCORE",
    "MAX_AVERAGE_SAMPLES",
    "MIN_ENVELOPE_SIZE",
    "MULTI_LABEL_CLOSE_HEIGHT",
    "MULTI_LABEL_MIN_BLOB_HEIGHT",
    "MULTI_LABEL_MIN_BLOB_WIDTH",
    "OUTLIER_MAX_SIZE_DIFF",
    "OUTLIER_MAX_Y_SHIFT",
    "OUTLIER_SCALE_HEIGHT",
    "OUTLIER_THRESHOLD",
    "RecogConfig",
    "SPLIT_MARGIN",
    "SPLIT_MIN_SIZE",
    "SPLIT_SKEW_ALLOWANCE",
]
