# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Pytest configuration shared across the suite."""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from zrecog.models import Sample  # noqa: E402


def block(height: int, width: int) -> np.ndarray:
    return np.ones((height, width), dtype=bool)


@pytest.fixture
def make_block():
    return block


@pytest.fixture
def make_samples():
    """Build ``count`` solid-block samples per label."""

    def _make(labels, count=1, height=10, width=6):
        return [Sample(block(height, width), label) for label in labels for _ in range(count)]

    return _make
