# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Utility helpers shared across the ZRecog package."""

from .json_utils import json_ready
from .log import configure_logging, log_event

__all__ = ["configure_logging", "json_ready", "log_event"]
