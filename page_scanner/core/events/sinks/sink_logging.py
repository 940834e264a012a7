"""
Logging event sink.
"""
from __future__ import annotations

import logging
from typing import Any

from page_scanner.core.events.events import PageProbeEvent, PageReadEvent


class LoggingEventSink:
    """Logs scan events using the standard logging module."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def on_event(self, event: Any) -> None:
        # Probes and page reads are high-volume; keep them at DEBUG.
        if isinstance(event, (PageProbeEvent, PageReadEvent)):
            self._logger.debug("scan_event", extra={"event": event})
        else:
            self._logger.info("scan_event", extra={"event": event})
