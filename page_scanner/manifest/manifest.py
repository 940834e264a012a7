"""
Manifest source definitions.

A manifest source yields ordered (folder, stem) records and signals the end
of input by ending iteration.
"""

from __future__ import annotations

from typing import Iterator, Protocol

from page_scanner.core.domain.types import ManifestRecord


class ManifestSource(Protocol):
    """
    Protocol describing a manifest source.

    Any iterable of ManifestRecord satisfies it, including a plain list.
    """

    def __iter__(self) -> Iterator[ManifestRecord]:
        """
        Iterate over manifest records in source order.
        """
