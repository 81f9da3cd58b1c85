# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

import json
import logging

import pytest
from pydantic import ValidationError

from zrecog.config import RecogConfig
from zrecog.models import CharsetSpec, CharsetType
from zrecog.recog import Recognizer, add_samples
from zrecog.utils import configure_logging, json_ready, log_event
from zrecog.utils import log as log_mod


def test_defaults():
    cfg = RecogConfig()

    assert (cfg.scale_width, cfg.scale_height, cfg.line_width) == (0, 0, 0)
    assert cfg.threshold == 150
    assert cfg.max_y_shift == 1
    assert cfg.min_samples_per_class == 3
    assert cfg.charset.type == CharsetType.ARABIC_NUMERALS
    assert cfg.charset.size == 10


def test_validation_rejects_out_of_range_values():
    with pytest.raises(ValidationError):
        RecogConfig(threshold=0)
    with pytest.raises(ValidationError):
        RecogConfig(max_y_shift=3)
    with pytest.raises(ValidationError):
        RecogConfig(scale_height=-1)


def test_charset_labels():
    assert CharsetSpec().labels() == list("0123456789")
    assert CharsetSpec(type=CharsetType.UC_ROMAN_NUMERALS, size=3).labels() == ["I", "V", "X"]
    assert CharsetSpec(type=CharsetType.UNKNOWN).labels() == []


def test_from_env(monkeypatch):
    monkeypatch.setenv("ZRECOG_SCALE_HEIGHT", "40")
    monkeypatch.setenv("ZRECOG_THRESHOLD", "not-a-number")
    monkeypatch.setenv("ZRECOG_LINE_WIDTH", " ")
    monkeypatch.setenv("ZRECOG_CHARSET", "LC_ALPHA")

    cfg = RecogConfig.from_env(min_samples_per_class=7)

    assert cfg.scale_height == 40
    assert cfg.threshold == 150
    assert cfg.line_width == 0
    assert cfg.charset.type == CharsetType.LC_ALPHA
    assert cfg.charset.size == 26
    assert cfg.min_samples_per_class == 7


def test_updated_returns_validated_copy():
    cfg = RecogConfig(threshold=120)

    new = cfg.updated(scale_height=40)

    assert new.scale_height == 40
    assert new.threshold == 120
    assert cfg.scale_height == 0
    with pytest.raises(ValidationError):
        cfg.updated(threshold=300)


def test_log_event_renders_json(caplog):
    logger = logging.getLogger("zrecog.test")

    with caplog.at_level(logging.INFO, logger="zrecog"):
        log_event(logger, "sample_event", count=3, charset=CharsetType.ARABIC_NUMERALS)
        log_event(logger, "hidden", level="debug")

    assert len(caplog.records) == 1
    record = json.loads(caplog.records[0].getMessage())
    assert record["event"] == "sample_event"
    assert record["count"] == 3
    assert record["charset"] == "arabic_numerals"
    assert "ts" in record


def test_configure_logging(monkeypatch):
    logger = logging.getLogger("zrecog")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    monkeypatch.setattr(log_mod, "_format_override", None)
    monkeypatch.setenv("ZRECOG_LOG_LEVEL", "debug")
    try:
        configured = configure_logging(fmt="text")
        assert configured is logger
        assert logger.level == logging.DEBUG
        assert logger.handlers
        assert log_mod.format_event("evt", {"a": 1}).split(" ", 1)[1] == "evt {'a': 1}"
    finally:
        logger.handlers[:] = saved[0]
        logger.setLevel(saved[1])
        logger.propagate = saved[2]


def test_describe_is_json_ready(make_samples):
    recog = Recognizer(scale_height=20)
    add_samples(recog, make_samples("12"))

    summary = recog.describe()

    assert json.loads(json.dumps(summary)) == summary
    assert [c["label"] for c in summary["classes"]] == ["1", "2"]
    assert summary["config"]["scale_height"] == 20
    assert json_ready(CharsetType.LC_ALPHA) == "lc_alpha"


def test_package_surface_resolves_lazily():
    import zrecog

    assert zrecog.Recognizer is Recognizer
    assert zrecog.RecogConfig is RecogConfig
    assert "pad_training_set" in dir(zrecog)
    with pytest.raises(AttributeError):
        zrecog.not_a_thing
