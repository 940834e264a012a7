"""
Whitespace-tokenized text manifest.

The manifest is a sequence of whitespace-separated ``folder stem`` token
pairs. Line boundaries carry no meaning: a pair may span two lines and one
line may hold several pairs. There is no delimiter or quote handling.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, Iterator, TextIO

from page_scanner.core.domain.errors import ManifestUnavailable
from page_scanner.core.domain.types import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_MAX_TOKEN_BYTES,
    ManifestRecord,
)

LOGGER = logging.getLogger(__name__)


def open_manifest(path: str | Path) -> TextIO:
    """
    Open a manifest file for reading.

    Raises ManifestUnavailable if the file cannot be opened at all.
    """
    try:
        return open(path, "r", encoding="utf-8", errors="surrogateescape")
    except OSError as exc:
        raise ManifestUnavailable(str(path), exc.strerror or str(exc)) from exc


def _iter_tokens(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield from line.split()


class ManifestReader:
    """
    Lazy iterator of ManifestRecord over a whitespace-tokenized stream.

    Semantics:
    - Each pair of tokens is one record, in stream order.
    - A trailing single token is an incomplete record and ends iteration.
    - At most ``max_records`` records are produced (None disables the cap);
      once the cap is reached no further input is consumed.
    - Records with a token longer than ``max_token_bytes`` (UTF-8) are skipped
      and kept in ``rejected``; they do not count toward the cap.

    Not restartable: the reader advances the position of the source.
    """

    def __init__(
        self,
        stream: Iterable[str],
        *,
        max_records: int | None = DEFAULT_MAX_RECORDS,
        max_token_bytes: int | None = DEFAULT_MAX_TOKEN_BYTES,
    ) -> None:
        if max_records is not None and max_records < 0:
            raise ValueError("max_records must be >= 0 or None")

        self._tokens = _iter_tokens(stream)
        self._max_records = max_records
        self._max_token_bytes = max_token_bytes
        self._produced = 0
        self.rejected: list[tuple[str, str]] = []

    def __iter__(self) -> ManifestReader:
        return self

    def __next__(self) -> ManifestRecord:
        while True:
            if self._max_records is not None and self._produced >= self._max_records:
                raise StopIteration

            folder = next(self._tokens, None)
            if folder is None:
                raise StopIteration

            stem = next(self._tokens, None)
            if stem is None:
                LOGGER.warning(
                    "Incomplete manifest record ignored",
                    extra={"token": folder},
                )
                raise StopIteration

            if self._is_oversized(folder) or self._is_oversized(stem):
                LOGGER.warning(
                    "Oversized manifest record rejected",
                    extra={
                        "folder": folder,
                        "stem": stem,
                        "max_token_bytes": self._max_token_bytes,
                    },
                )
                self.rejected.append((folder, stem))
                continue

            self._produced += 1
            return ManifestRecord(folder=folder, stem=stem)

    def _is_oversized(self, token: str) -> bool:
        if self._max_token_bytes is None:
            return False
        return len(os.fsencode(token)) > self._max_token_bytes
