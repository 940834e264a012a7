"""
Core data model shared by the manifest reader and the page scanner.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from page_scanner.core.domain.errors import InvalidRecordError

DEFAULT_PAGE_SIZE = 8192
DEFAULT_MAX_RECORDS = 400
DEFAULT_MAX_TOKEN_BYTES = 99
DEFAULT_PROBE_OFFSET = 3


@dataclass(frozen=True, slots=True)
class ManifestRecord:
    """
    One (folder, stem) pair read from the manifest.
    """

    folder: str
    stem: str

    def __post_init__(self) -> None:
        if not self.folder:
            raise InvalidRecordError("ManifestRecord.folder must be non-empty")
        if not self.stem:
            raise InvalidRecordError("ManifestRecord.stem must be non-empty")


def page_path(root: str | os.PathLike[str], record: ManifestRecord, index: int) -> str:
    """
    Build the filename of page ``index`` (1-based) for ``record``.

    With root ``"."`` this yields ``./<folder>/<stem>_<index>``. The parts are
    concatenated, never joined: an absolute folder stays under ``root``.
    """
    if index < 1:
        raise ValueError(f"page index must be >= 1, got {index}")
    return f"{os.fspath(root)}/{record.folder}/{record.stem}_{index}"


def display_path(path: str) -> str:
    """
    Render a path for text output.

    Undecodable filename bytes (carried as surrogate escapes) are shown as
    ``\\xNN`` instead of failing the write.
    """
    return os.fsencode(path).decode("utf-8", errors="backslashreplace")
