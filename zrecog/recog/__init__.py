# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Template recognizer training: ingestion, finalization, averaging and padding."""

from .average import accumulate_samples, average_samples
from .bootstrap import (
    BootstrapLibrary,
    RenderedDigitLibrary,
    default_library,
    extend_by_scaling,
    make_boot_digit_recog,
)
from .ingest import (
    ByClassIndex,
    ByLabel,
    add_samples,
    process_multi_labeled,
    process_single_labeled,
    train_labeled,
)
from .labels import label_to_key
from .outliers import OutlierResult, remove_outliers
from .padding import add_pad_templates, charset_available, is_padding_needed, pad_training_set
from .recognizer import AverageTemplate, CharClass, Recognizer, SizeRange, SplitWindow
from .training import create_from_samples, finish_training, modify_template

__all__ = [
    "AverageTemplate",
    "BootstrapLibrary",
    "ByClassIndex",
    "ByLabel",
    "CharClass",
    "OutlierResult",
    "Recognizer",
    "RenderedDigitLibrary",
    "SizeRange",
    "SplitWindow",
    "accumulate_samples",
    "add_pad_templates",
    "add_samples",
    "average_samples",
    "charset_available",
    "create_from_samples",
    "default_library",
    "extend_by_scaling",
    "finish_training",
    "is_padding_needed",
    "label_to_key",
    "make_boot_digit_recog",
    "modify_template",
    "pad_training_set",
    "process_multi_labeled",
    "process_single_labeled",
    "remove_outliers",
    "train_labeled",
]
