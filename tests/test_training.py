# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

import logging

import numpy as np
import pytest

from zrecog.errors import RecogStateError
from zrecog.models import Sample
from zrecog.recog import (
    Recognizer,
    add_samples,
    create_from_samples,
    finish_training,
    label_to_key,
    modify_template,
)


def test_finish_training_keeps_collections_parallel(make_samples):
    recog = Recognizer(scale_height=20)
    add_samples(recog, make_samples("12", count=3))

    finish_training(recog)

    assert recog.training_finished
    assert not recog.averaging_done
    for cls in recog.classes:
        n = cls.num_samples
        assert len(cls.normalized) == n
        assert len(cls.unscaled_centroids) == len(cls.unscaled_areas) == n
        assert len(cls.centroids) == len(cls.areas) == n
        assert cls.normalized[0].bitmap.shape == (20, 12)
        assert cls.unscaled_areas[0] == 60
        assert cls.unscaled_centroids[0] == (2.5, 4.5)


def test_finish_training_without_modification_reuses_samples(make_samples):
    recog = Recognizer(scale_height=20)
    add_samples(recog, make_samples("5", count=2))

    finish_training(recog, modify=False)

    cls = recog.get_class("5")
    assert all(a is b for a, b in zip(cls.normalized, cls.unscaled))


def test_finish_training_is_idempotent_and_locks_ingestion(make_samples):
    recog = Recognizer()
    add_samples(recog, make_samples("8"))
    finish_training(recog)
    first = recog.get_class("8").normalized[0]

    assert finish_training(recog) is recog
    assert recog.get_class("8").normalized[0] is first
    with pytest.raises(RecogStateError):
        add_samples(recog, make_samples("8"))


def test_finish_training_drops_trailing_empty_classes(make_samples):
    recog = Recognizer()
    recog.add_class("0", label_to_key("0"))
    add_samples(recog, make_samples("1"))
    recog.add_class("2", label_to_key("2"))

    finish_training(recog)

    assert recog.labels == ["0", "1"]
    assert recog.class_index("2") is None
    assert recog.class_index("1") == 1


def test_modify_template_scales_and_normalizes_strokes():
    recog = Recognizer(scale_width=10, scale_height=20)
    bm = np.ones((10, 5), dtype=bool)
    assert modify_template(recog, bm).shape == (20, 10)

    unchanged = Recognizer(scale_height=10)
    assert modify_template(unchanged, bm).shape == (10, 5)

    stroked = Recognizer(scale_height=10, line_width=1)
    out = modify_template(stroked, bm)
    assert out.shape == (10, 5)
    assert out.sum() < bm.sum()


def test_create_from_samples(make_samples):
    samples = make_samples("34", count=2)

    recog = create_from_samples(samples, scale_height=30)

    assert recog.training_finished
    assert recog.config.scale_height == 30
    assert recog.num_samples == 4
    assert recog.extract_samples() == samples

    with pytest.raises(ValueError):
        create_from_samples([Sample(np.ones((3, 3)), "")])


def test_extract_samples_relabels_forced_members(make_samples):
    recog = Recognizer()
    add_samples(recog, make_samples("a"))
    add_samples(recog, make_samples("b"), class_index=0)

    extracted = recog.extract_samples()

    assert [s.text for s in extracted] == ["a", "a"]
    assert np.array_equal(extracted[1].bitmap, np.ones((10, 6), dtype=bool))


def test_content_summary_only_built_for_debug_logging(make_samples, monkeypatch, caplog):
    calls = []
    original = Recognizer.describe

    def counting_describe(self):
        calls.append(self)
        return original(self)

    monkeypatch.setattr(Recognizer, "describe", counting_describe)

    quiet = Recognizer()
    add_samples(quiet, make_samples("1"))
    with caplog.at_level(logging.INFO, logger="zrecog"):
        finish_training(quiet)
    assert calls == []

    verbose = Recognizer()
    add_samples(verbose, make_samples("1"))
    with caplog.at_level(logging.DEBUG, logger="zrecog"):
        finish_training(verbose)
    assert calls == [verbose]
    assert any("recognizer_content" in r.getMessage() for r in caplog.records)
