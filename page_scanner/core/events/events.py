"""
Domain event models.

These events represent immutable facts observed while scanning page
sequences. They are consumed by loggers, recorders, and diagnostic output.
"""
from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class PageProbeEvent:
    folder: str
    stem: str
    index: int
    path: str


@dataclass(frozen=True, slots=True)
class PageReadEvent:
    """
    One successfully read page.

    ``payload`` holds the bytes returned by a single read request of
    ``page_size`` bytes. ``probe_byte`` is the byte at the configured probe
    offset, or None when the page is shorter than that.
    """

    folder: str
    stem: str
    index: int
    path: str

    size: int
    short_read: bool
    probe_byte: int | None
    digest: str

    payload: bytes = field(repr=False)


@dataclass(frozen=True, slots=True)
class RecordScannedEvent:
    folder: str
    stem: str

    pages_read: int
    bytes_read: int

    # "exhausted" | "io_error"
    status: str
    error: str | None = None
