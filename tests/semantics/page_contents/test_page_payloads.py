"""
Semantic test: page payloads match the source files.

Invariants:
- Each payload equals the first page_size bytes of its page file.
- Short pages are accepted and flagged by default, rejected under "reject".
- The reported probe byte equals the byte at the probe offset of the file.
- A short page never carries bytes from a previous page.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

import pytest

from page_scanner.core.domain.errors import PageIOError, ShortPageError
from page_scanner.core.domain.types import ManifestRecord
from page_scanner.scanner.page_scanner import PageSequenceScanner

PAGE_SIZE = 8192
RECORD = ManifestRecord("data", "alpha")


def _page_file(root: Path, index: int) -> Path:
    directory = root / "data"
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"alpha_{index}"


def test_payload_is_first_page_size_bytes(tmp_path: Path) -> None:
    content = os.urandom(PAGE_SIZE + 1000)
    _page_file(tmp_path, 1).write_bytes(content)

    (event,) = list(PageSequenceScanner(root=tmp_path).scan(RECORD))

    assert event.payload == content[:PAGE_SIZE]
    assert event.size == PAGE_SIZE
    assert event.short_read is False
    assert event.digest == hashlib.sha256(content[:PAGE_SIZE]).hexdigest()


def test_probe_byte_matches_source_file(tmp_path: Path) -> None:
    contents = [os.urandom(PAGE_SIZE) for _ in range(3)]
    for i, content in enumerate(contents, start=1):
        _page_file(tmp_path, i).write_bytes(content)

    events = list(PageSequenceScanner(root=tmp_path).scan(RECORD))

    assert [e.probe_byte for e in events] == [c[3] for c in contents]


def test_probe_offset_is_configurable(tmp_path: Path) -> None:
    content = bytes(range(256)) * (PAGE_SIZE // 256)
    _page_file(tmp_path, 1).write_bytes(content)

    scanner = PageSequenceScanner(root=tmp_path, probe_offset=200)
    (event,) = list(scanner.scan(RECORD))

    assert event.probe_byte == 200


def test_short_page_is_accepted_by_default(tmp_path: Path) -> None:
    _page_file(tmp_path, 1).write_bytes(b"A" * PAGE_SIZE)
    _page_file(tmp_path, 2).write_bytes(b"tail")

    events = list(PageSequenceScanner(root=tmp_path).scan(RECORD))

    assert [e.size for e in events] == [PAGE_SIZE, 4]
    assert events[1].short_read is True
    assert events[1].payload == b"tail"
    # Fresh buffer per page: no stale "A" bytes after the short content.
    assert b"A" not in events[1].payload


def test_page_shorter_than_probe_offset_reports_no_probe_byte(tmp_path: Path) -> None:
    _page_file(tmp_path, 1).write_bytes(b"ab")

    (event,) = list(PageSequenceScanner(root=tmp_path).scan(RECORD))

    assert event.probe_byte is None


def test_empty_page_counts_as_short_read(tmp_path: Path) -> None:
    _page_file(tmp_path, 1).write_bytes(b"")
    _page_file(tmp_path, 2).write_bytes(b"B" * PAGE_SIZE)

    events = list(PageSequenceScanner(root=tmp_path).scan(RECORD))

    assert [e.size for e in events] == [0, PAGE_SIZE]
    assert events[0].short_read is True


def test_short_page_is_rejected_under_reject_policy(tmp_path: Path) -> None:
    _page_file(tmp_path, 1).write_bytes(b"A" * PAGE_SIZE)
    _page_file(tmp_path, 2).write_bytes(b"tail")

    scanner = PageSequenceScanner(root=tmp_path, short_read_policy="reject")
    scan = scanner.scan(RECORD)

    first = next(scan)
    assert first.index == 1

    with pytest.raises(ShortPageError) as exc_info:
        next(scan)

    assert isinstance(exc_info.value, PageIOError)
    assert exc_info.value.index == 2
    assert exc_info.value.size == 4
    assert exc_info.value.page_size == PAGE_SIZE


def test_custom_page_size(tmp_path: Path) -> None:
    _page_file(tmp_path, 1).write_bytes(b"0123456789")

    scanner = PageSequenceScanner(root=tmp_path, page_size=4)
    (event,) = list(scanner.scan(RECORD))

    assert event.payload == b"0123"
    assert event.short_read is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"page_size": 0},
        {"probe_offset": -1},
        {"short_read_policy": "ignore"},
    ],
)
def test_invalid_scanner_arguments(kwargs: dict) -> None:
    with pytest.raises(ValueError):
        PageSequenceScanner(**kwargs)
