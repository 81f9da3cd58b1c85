# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Data models shared by the imaging layer and the recognizer core.

Bitmaps are 2-D numpy arrays of ``bool`` where ``True`` marks foreground.
Configuration-like records are pydantic models so they validate on
construction; samples are frozen dataclasses wrapping a read-only bitmap.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple

import numpy as np
from pydantic import BaseModel, Field, model_validator


class Box(NamedTuple):
    """Axis-aligned box in pixel coordinates; ``w``/``h`` are exclusive extents."""

    x: int
    y: int
    w: int
    h: int

    @property
    def right(self) -> int:
        return self.x + self.w

    @property
    def bottom(self) -> int:
        return self.y + self.h

    def overlaps(self, other: "Box") -> bool:
        return (
            self.x < other.right
            and other.x < self.right
            and self.y < other.bottom
            and other.y < self.bottom
        )

    def union(self, other: "Box") -> "Box":
        x0 = min(self.x, other.x)
        y0 = min(self.y, other.y)
        x1 = max(self.right, other.right)
        y1 = max(self.bottom, other.bottom)
        return Box(x0, y0, x1 - x0, y1 - y0)


@dataclass(frozen=True, eq=False)
class Sample:
    """One labeled character bitmap.

    The bitmap is copied to a read-only boolean array on construction.
    """

    bitmap: np.ndarray
    text: str = ""

    def __post_init__(self) -> None:
        arr = np.asarray(self.bitmap)
        if arr.ndim != 2:
            raise ValueError(f"sample bitmap must be 2-D, got shape {arr.shape}")
        arr = np.array(arr, dtype=bool, copy=True)
        arr.setflags(write=False)
        object.__setattr__(self, "bitmap", arr)
        object.__setattr__(self, "text", "" if self.text is None else str(self.text))

    @property
    def width(self) -> int:
        return int(self.bitmap.shape[1])

    @property
    def height(self) -> int:
        return int(self.bitmap.shape[0])

    def with_text(self, text: str) -> "Sample":
        return Sample(self.bitmap, text)

    def __repr__(self) -> str:
        return f"Sample(text={self.text!r}, size={self.width}x{self.height})"


class CharsetType(str, Enum):
    UNKNOWN = "unknown"
    ARABIC_NUMERALS = "arabic_numerals"
    LC_ROMAN_NUMERALS = "lc_roman_numerals"
    UC_ROMAN_NUMERALS = "uc_roman_numerals"
    LC_ALPHA = "lc_alpha"
    UC_ALPHA = "uc_alpha"


_CHARSET_LABELS = {
    CharsetType.UNKNOWN: "",
    CharsetType.ARABIC_NUMERALS: "0123456789",
    CharsetType.LC_ROMAN_NUMERALS: "ivxlcdm",
    CharsetType.UC_ROMAN_NUMERALS: "IVXLCDM",
    CharsetType.LC_ALPHA: "abcdefghijklmnopqrstuvwxyz",
    CharsetType.UC_ALPHA: "ABCDEFGHIJKLMNOPQRSTUVWXYZ",
}


class CharsetSpec(BaseModel):
    """Expected label set of a fully trained recognizer."""

    type: CharsetType = CharsetType.ARABIC_NUMERALS
    size: int = Field(-1, ge=-1)

    @model_validator(mode="after")
    def _default_size(self) -> "CharsetSpec":
        if self.size < 0:
            self.size = len(_CHARSET_LABELS[self.type])
        return self

    def labels(self) -> List[str]:
        """Return the expected labels in charset order (empty when unknown)."""

        return list(_CHARSET_LABELS[self.type])[: self.size]


__all__ = ["Box", "CharsetSpec", "CharsetType", "Sample"]
