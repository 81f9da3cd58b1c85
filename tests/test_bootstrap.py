# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

import numpy as np
import pytest

from zrecog.errors import UnsupportedCharsetError
from zrecog.models import CharsetType, Sample
from zrecog.recog.bootstrap import (
    RenderedDigitLibrary,
    default_library,
    extend_by_scaling,
    make_boot_digit_recog,
)


def test_extend_by_scaling_groups_per_sample():
    samples = [Sample(np.ones((10, 10), dtype=bool), "1"), Sample(np.ones((10, 4), dtype=bool), "2")]

    out = extend_by_scaling(samples, (0.5, 2.0))

    assert [s.text for s in out] == ["1", "1", "1", "2", "2", "2"]
    assert out[0] is samples[0]
    assert [s.bitmap.shape for s in out[:3]] == [(10, 10), (10, 5), (10, 20)]

    vertical = extend_by_scaling(samples[:1], (2.0,), horizontal=False, include_original=False)
    assert [s.bitmap.shape for s in vertical] == [(20, 10)]


def test_rendered_digit_library():
    library = RenderedDigitLibrary(sizes=(24,))

    templates = library.templates(CharsetType.ARABIC_NUMERALS)

    assert len(templates) == 40
    assert {t.text for t in templates} == set("0123456789")
    assert all(t.bitmap.any() for t in templates)
    group = templates[:4]
    assert {t.text for t in group} == {"0"}
    assert group[2].width > group[0].width > group[1].width

    again = library.templates(CharsetType.ARABIC_NUMERALS)
    assert again is not templates
    assert all(a is b for a, b in zip(again, templates))


def test_rendered_library_rejects_other_charsets():
    with pytest.raises(UnsupportedCharsetError):
        RenderedDigitLibrary(sizes=(24,)).templates(CharsetType.UC_ROMAN_NUMERALS)


def test_default_library_is_shared():
    assert default_library() is default_library()


def test_make_boot_digit_recog():
    recog = make_boot_digit_recog(scale_height=30, line_width=3, library=RenderedDigitLibrary(sizes=(24,)))

    assert recog.training_finished
    assert recog.labels == list("0123456789")
    assert recog.config.threshold == 128
    assert recog.config.scale_width == 0
    assert recog.config.line_width == 3
    for cls in recog.classes:
        assert cls.num_samples == 4
        assert all(s.height == 30 for s in cls.normalized)
