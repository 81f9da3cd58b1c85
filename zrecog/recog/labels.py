# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Mapping between text labels and integer class keys."""
from __future__ import annotations

from ..errors import InvalidLabelError

__all__ = ["label_to_key"]

MAX_LABEL_BYTES = 4


def label_to_key(text: str) -> int:
    """Pack the UTF-8 bytes of ``text`` (1 to 4 of them) into a big-endian int."""

    if text is None or text == "":
        raise InvalidLabelError(text, "empty label")
    data = str(text).encode("utf-8")
    if len(data) > MAX_LABEL_BYTES:
        raise InvalidLabelError(text, f"longer than {MAX_LABEL_BYTES} bytes")
    return int.from_bytes(data, "big")

