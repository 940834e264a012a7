"""
Page sequence scanner.

For one manifest record, probes ``<root>/<folder>/<stem>_1``, ``_2``, ... in
order and reads a fixed-size payload from each page that opens. The first
page that does not exist ends the sequence; gaps are never bridged.

State machine per record:

    Scanning(n) --open ok--> Reading(n) --> Scanning(n + 1)
    Scanning(n) --absent---> Done
"""
from __future__ import annotations

import hashlib
import logging
import os
from typing import Iterator

from page_scanner.core.domain.errors import PageIOError, ShortPageError
from page_scanner.core.domain.types import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_PROBE_OFFSET,
    ManifestRecord,
    page_path,
)
from page_scanner.core.events.event_bus import EventBus
from page_scanner.core.events.events import PageProbeEvent, PageReadEvent
from page_scanner.core.events.sinks.null_event_bus import NullEventBus

LOGGER = logging.getLogger(__name__)

# Open failures that mean "this page does not exist".
_ABSENT_ERRORS = (FileNotFoundError, NotADirectoryError)


class PageSequenceScanner:
    """
    Scans the numbered page sequence of manifest records.

    Short read policy:
    - "accept": a page shorter than ``page_size`` is still counted and
      reported with ``short_read=True``.
    - "reject": a short page raises ShortPageError.
    """

    def __init__(
        self,
        *,
        root: str | os.PathLike[str] = ".",
        page_size: int = DEFAULT_PAGE_SIZE,
        probe_offset: int = DEFAULT_PROBE_OFFSET,
        short_read_policy: str = "accept",
        event_bus: EventBus | None = None,
    ) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        if probe_offset < 0:
            raise ValueError("probe_offset must be >= 0")
        if short_read_policy not in ("accept", "reject"):
            raise ValueError(f"Unknown short_read_policy: {short_read_policy!r}")

        self._root = root
        self._page_size = page_size
        self._probe_offset = probe_offset
        self._short_read_policy = short_read_policy
        self._event_bus = event_bus if event_bus is not None else NullEventBus()

    def scan(self, record: ManifestRecord) -> Iterator[PageReadEvent]:
        """
        Yield one PageReadEvent per page of ``record`` until the first absent page.

        Raises PageIOError when an existing page cannot be opened or read.
        Every event is also emitted on the event bus before it is yielded.
        """
        index = 1
        while True:
            path = page_path(self._root, record, index)

            self._event_bus.emit(
                PageProbeEvent(
                    folder=record.folder,
                    stem=record.stem,
                    index=index,
                    path=path,
                )
            )

            payload = self._read_page(path, index)
            if payload is None:
                LOGGER.debug(
                    "Page sequence exhausted",
                    extra={"path": path, "pages_read": index - 1},
                )
                return

            event = self._build_event(record, index, path, payload)
            self._event_bus.emit(event)
            yield event

            index += 1

    # ------------------------------------------------------------------

    def _read_page(self, path: str, index: int) -> bytes | None:
        """
        Open ``path`` and issue a single read request of ``page_size`` bytes.

        Returns None when the page does not exist. The file handle is closed
        before returning on every path.
        """
        try:
            fh = open(path, "rb")
        except _ABSENT_ERRORS:
            return None
        except OSError as exc:
            raise PageIOError(path, index, exc.strerror or str(exc)) from exc

        with fh:
            try:
                # Fresh buffer per page: nothing survives from the previous one.
                payload = fh.read(self._page_size)
            except OSError as exc:
                raise PageIOError(path, index, exc.strerror or str(exc)) from exc

        if len(payload) < self._page_size:
            if self._short_read_policy == "reject":
                raise ShortPageError(path, index, len(payload), self._page_size)
            LOGGER.warning(
                "Short page read",
                extra={
                    "path": path,
                    "size": len(payload),
                    "page_size": self._page_size,
                },
            )

        return payload

    def _build_event(
        self,
        record: ManifestRecord,
        index: int,
        path: str,
        payload: bytes,
    ) -> PageReadEvent:
        probe_byte = (
            payload[self._probe_offset]
            if self._probe_offset < len(payload)
            else None
        )

        return PageReadEvent(
            folder=record.folder,
            stem=record.stem,
            index=index,
            path=path,
            size=len(payload),
            short_read=len(payload) < self._page_size,
            probe_byte=probe_byte,
            digest=hashlib.sha256(payload).hexdigest(),
            payload=payload,
        )
