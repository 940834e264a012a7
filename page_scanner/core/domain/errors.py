"""
Error taxonomy for page scanning.

Absence of the next page file is NOT an error: it is the normal end of a
record's page sequence and is expressed by the scan generator returning.
Likewise an incomplete trailing manifest record simply ends iteration.
"""
from __future__ import annotations


class PageScanError(Exception):
    """Base class for all page scanning errors."""


class ManifestUnavailable(PageScanError):
    """The manifest source cannot be opened. Fatal to the whole run."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Manifest unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason


class InvalidRecordError(PageScanError, ValueError):
    """A manifest record field is empty."""


class PageIOError(PageScanError):
    """
    An existing page file failed to open or read.

    Local to one record: the runner stops that record's sequence and
    continues with the next one.
    """

    def __init__(self, path: str, index: int, reason: str) -> None:
        super().__init__(f"Page I/O error at {path} (page {index}): {reason}")
        self.path = path
        self.index = index
        self.reason = reason


class ShortPageError(PageIOError):
    """A page returned fewer bytes than the page size under the reject policy."""

    def __init__(self, path: str, index: int, size: int, page_size: int) -> None:
        super().__init__(path, index, f"short read ({size} of {page_size} bytes)")
        self.size = size
        self.page_size = page_size


class EventOutputUnavailable(PageScanError):
    """The event recording file cannot be created or opened."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Event output unavailable: {path} ({reason})")
        self.path = path
        self.reason = reason
