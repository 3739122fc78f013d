"""Structured event emission for the core services.

Services stay quiet by default: events are logged at DEBUG and, when a hook
is supplied, forwarded to it as ``(event_name, fields)``.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from utils.logging_utils import EventHook


class EventEmitter:
    """Send events to a tagged logger and an optional hook."""

    def __init__(self, logger: logging.LoggerAdapter, hook: Optional[EventHook] = None) -> None:
        self.logger = logger
        self.hook = hook

    def __call__(self, event: str, **fields: Any) -> None:
        self.logger.debug(event, extra={"event_fields": fields})
        if self.hook is None:
            return
        try:
            self.hook(event, fields)
        except Exception:
            # a broken hook must not turn a best-effort value into an error
            self.logger.exception("Event hook raised", extra={"event": event})
