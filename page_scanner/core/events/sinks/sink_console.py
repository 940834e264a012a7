"""
Console diagnostic sink.

Reports every probed page path, and for every page read the byte found at
the probe offset.
"""
from __future__ import annotations

import sys
from typing import Any, TextIO

from page_scanner.core.domain.types import display_path
from page_scanner.core.events.events import PageProbeEvent, PageReadEvent


class ConsoleDiagnosticSink:
    """Prints probe paths and probe bytes to a text stream (stdout by default)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def on_event(self, event: Any) -> None:
        stream = self._stream if self._stream is not None else sys.stdout

        if isinstance(event, PageProbeEvent):
            print(display_path(event.path), file=stream)
        elif isinstance(event, PageReadEvent):
            print(_format_probe_byte(event.probe_byte), file=stream)


def _format_probe_byte(value: int | None) -> str:
    if value is None:
        return "-"
    char = chr(value)
    if char.isprintable():
        return char
    return f"\\x{value:02x}"
