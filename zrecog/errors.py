# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Exception types raised by the recognizer training stack."""
from __future__ import annotations

from typing import Sequence

__all__ = [
    "RecogError",
    "RecogStateError",
    "InvalidLabelError",
    "SegmentationMismatchError",
    "EmptyImageError",
    "UnsupportedCharsetError",
]


class RecogError(RuntimeError):
    """Base class for recognizer training failures."""


class RecogStateError(RecogError):
    """Raised when an operation is not allowed in the recognizer's lifecycle state."""


class InvalidLabelError(RecogError, ValueError):
    """Raised when a text label is missing or cannot be mapped to a class key."""

    def __init__(self, label: object, reason: str = "cannot be converted to a class key") -> None:
        self.label = label
        super().__init__(f"invalid label {label!r}: {reason}")


class SegmentationMismatchError(RecogError):
    """Raised when a multi-character strip does not split into one blob per character."""

    def __init__(self, text: str, boxes: Sequence[object]) -> None:
        self.text = text
        self.boxes = list(boxes)
        self.expected = len(text)
        self.found = len(self.boxes)
        super().__init__(
            f"found {self.found} components for {self.expected} characters in {text!r}"
        )


class EmptyImageError(RecogError):
    """Raised when an image has no foreground left after cropping."""


class UnsupportedCharsetError(RecogError):
    """Raised when no bootstrap templates exist for a charset type."""

    def __init__(self, charset_type: object) -> None:
        self.charset_type = charset_type
        value = getattr(charset_type, "value", charset_type)
        super().__init__(f"no bootstrap templates available for charset {value!r}")
