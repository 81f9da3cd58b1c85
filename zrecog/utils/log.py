# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (C) 2024 ZRecog contributors

"""Structured logging helpers for the recognizer training stack."""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Optional

from .json_utils import json_ready

ROOT_LOGGER = "zrecog"

_FORMATS = {"json", "text"}
_format_override: Optional[str] = None


def _log_format() -> str:
    fmt = (_format_override or os.environ.get("ZRECOG_LOG_FORMAT") or "json").strip().lower()
    return fmt if fmt in _FORMATS else "json"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def configure_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> logging.Logger:
    """Attach a stdout handler to the ``zrecog`` logger.

    ``level`` defaults to ``ZRECOG_LOG_LEVEL`` (``INFO``). ``fmt`` selects the
    event rendering used by :func:`log_event` and defaults to
    ``ZRECOG_LOG_FORMAT``.
    """

    global _format_override

    logger = logging.getLogger(ROOT_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    level_name = (level or os.environ.get("ZRECOG_LOG_LEVEL") or "INFO").strip().upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))
    logger.propagate = False
    if fmt is not None:
        _format_override = fmt.strip().lower()
    return logger


def format_event(event: str, payload: dict) -> str:
    record = {"ts": _utc_now_iso(), "event": event, **payload}
    if _log_format() == "json":
        return json.dumps(json_ready(record), ensure_ascii=False)
    return f"{record['ts']} {event} {json_ready(payload)}"


def log_event(logger: logging.Logger, event: str, *, level: str = "info", **payload: Any) -> None:
    """Emit ``event`` with ``payload`` on ``logger`` at ``level``."""

    fn = getattr(logger, level, logger.info)
    if not logger.isEnabledFor(getattr(logging, level.upper(), logging.INFO)):
        return
    fn(format_event(event, payload))


__all__ = ["ROOT_LOGGER", "configure_logging", "format_event", "log_event"]
