# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""ZRecog public package surface."""

from __future__ import annotations

from importlib import import_module as _import_module
from typing import Any, Dict

__version__ = "0.1.0"

# Mapping of public attribute -> defining module
_ATTR_TO_MODULE: Dict[str, str] = {
    "Recognizer": ".recog.recognizer",
    "Sample": ".models",
    "Box": ".models",
    "CharsetSpec": ".models",
    "CharsetType": ".models",
    "RecogConfig": ".config",
    "RecogError": ".errors",
    "add_samples": ".recog.ingest",
    "train_labeled": ".recog.ingest",
    "finish_training": ".recog.training",
    "create_from_samples": ".recog.training",
    "average_samples": ".recog.average",
    "remove_outliers": ".recog.outliers",
    "is_padding_needed": ".recog.padding",
    "pad_training_set": ".recog.padding",
    "make_boot_digit_recog": ".recog.bootstrap",
    "configure_logging": ".utils.log",
}

__all__ = sorted(_ATTR_TO_MODULE) + ["__version__"]

_loaded: Dict[str, Any] = {}


def _load(name: str) -> Any:
    if name not in _ATTR_TO_MODULE:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    value = _loaded.get(name)
    if value is None:
        module = _import_module(_ATTR_TO_MODULE[name], __name__)
        value = getattr(module, name)
        _loaded[name] = value
    return value


def __getattr__(name: str) -> Any:
    return _load(name)


def __dir__() -> list[str]:
    return sorted(set(__all__ + list(globals().keys())))
