"""
Event sink interface.

Sinks consume scan events emitted by the scanner and the runner.
"""
from __future__ import annotations

from typing import Any, Protocol


class EventSink(Protocol):
    def on_event(self, event: Any) -> None:
        """Consume a scan event."""
