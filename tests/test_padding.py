# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

import numpy as np
import pytest

from zrecog.config import RecogConfig
from zrecog.errors import RecogStateError, UnsupportedCharsetError
from zrecog.models import CharsetSpec, CharsetType, Sample
from zrecog.recog import (
    Recognizer,
    add_pad_templates,
    add_samples,
    charset_available,
    is_padding_needed,
    pad_training_set,
)

DIGITS = "0123456789"


class FakeLibrary:
    def __init__(self, per_label=3):
        self.per_label = per_label
        self.calls = 0

    def templates(self, charset_type):
        self.calls += 1
        return [
            Sample(np.ones((12, 7), dtype=bool), ch) for ch in DIGITS for _ in range(self.per_label)
        ]


def _digit_recognizer(make_samples, counts, **overrides):
    recog = Recognizer(**overrides)
    for ch in DIGITS:
        if counts.get(ch, 0):
            add_samples(recog, make_samples(ch, count=counts[ch]))
    return recog


def test_charset_available_only_for_numerals():
    assert charset_available(CharsetType.ARABIC_NUMERALS)
    assert not charset_available(CharsetType.UC_ALPHA)
    assert not charset_available(CharsetType.UNKNOWN)


def test_no_padding_needed_returns_same_recognizer(make_samples):
    recog = _digit_recognizer(make_samples, {ch: 3 for ch in DIGITS})

    assert is_padding_needed(recog) == []
    assert pad_training_set(recog, 40, 0, library=FakeLibrary()) is recog
    assert not recog.destroyed


def test_padding_lists_missing_then_sparse_labels(make_samples):
    recog = _digit_recognizer(make_samples, {"1": 1, "2": 3})

    needed = is_padding_needed(recog)

    assert needed == ["0", "3", "4", "5", "6", "7", "8", "9", "1"]


def test_digit_padding_scenario(make_samples):
    counts = {ch: 5 for ch in DIGITS}
    counts["5"] = 3
    recog = _digit_recognizer(make_samples, counts, min_samples_per_class=5, threshold=140)
    originals = list(recog.get_class("5").unscaled)

    assert is_padding_needed(recog) == ["5"]

    padded = pad_training_set(recog, 40, 0, library=FakeLibrary())

    assert padded is not recog
    assert recog.destroyed
    assert padded.training_finished
    five = padded.get_class("5")
    assert five.num_samples == 6
    assert all(a is b for a, b in zip(five.unscaled[:3], originals))
    assert all(padded.get_class(ch).num_samples == 5 for ch in DIGITS if ch != "5")
    assert padded.config.scale_width == 0
    assert padded.config.scale_height == 40
    assert padded.config.threshold == 140
    assert padded.config.min_samples_per_class == 5
    assert five.normalized[0].bitmap.shape[0] == 40

    with pytest.raises(RecogStateError):
        is_padding_needed(recog)


def test_add_pad_templates_filters_by_label(make_samples):
    recog = _digit_recognizer(make_samples, {"1": 2})

    samples = add_pad_templates(recog, ["1", "7"], library=FakeLibrary(per_label=2))

    assert [s.text for s in samples] == ["1", "1", "1", "1", "7", "7"]


def test_unsupported_charset_leaves_recognizer_alive():
    config = RecogConfig(charset=CharsetSpec(type=CharsetType.LC_ALPHA))
    recog = Recognizer(config)
    add_samples(recog, Sample(np.ones((8, 5), dtype=bool), "a"))
    library = FakeLibrary()

    with pytest.raises(UnsupportedCharsetError):
        pad_training_set(recog, 40, 0, library=library)

    assert not recog.destroyed
    assert library.calls == 0


def test_padding_with_rendered_digits(make_samples):
    from zrecog.recog import RenderedDigitLibrary

    recog = _digit_recognizer(make_samples, {ch: 3 for ch in DIGITS if ch != "0"})

    padded = pad_training_set(recog, 30, 2, library=RenderedDigitLibrary(sizes=(24,)))

    assert padded.labels[-1] == "0"
    assert padded.get_class("0").num_samples == 4
    assert padded.config.line_width == 2
