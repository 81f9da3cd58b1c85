"""JSON serialization helpers."""

from __future__ import annotations

import dataclasses
import numbers
from enum import Enum
from typing import Any

import numpy as np


def json_ready(obj: Any):
    """Return a JSON-serializable representation of ``obj``.

    Mappings, sequences, dataclasses, pydantic models, enums and numpy
    arrays/scalars are converted recursively. Bitmaps are summarised by their
    shape instead of being dumped pixel by pixel. Unknown values are returned
    as-is so native ``json`` can handle str/int/bool types directly.
    """

    if isinstance(obj, Enum):
        return json_ready(obj.value)

    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj

    if isinstance(obj, dict):
        return {str(k): json_ready(v) for k, v in obj.items()}

    if hasattr(obj, "model_dump"):
        return json_ready(obj.model_dump())

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: json_ready(getattr(obj, f.name)) for f in dataclasses.fields(obj)}

    if isinstance(obj, (list, tuple, set)):
        return [json_ready(v) for v in obj]

    if isinstance(obj, np.generic):
        return obj.item()

    if isinstance(obj, np.ndarray):
        if obj.ndim >= 2:
            return {"shape": list(obj.shape), "dtype": str(obj.dtype)}
        return obj.tolist()

    if isinstance(obj, numbers.Number):
        return float(obj)

    if isinstance(obj, (bytes, bytearray)):
        return obj.decode("utf-8", errors="replace")

    return obj


__all__ = ["json_ready"]
