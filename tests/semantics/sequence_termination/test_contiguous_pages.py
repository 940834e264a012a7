"""
Semantic test: a record's page sequence ends at the first missing page.

Invariants:
- Pages numbered 1..k with no page k+1 yield exactly k reads.
- No page 1 yields zero reads.
- Gaps are never bridged: pages 1, 2, 4 yield exactly 2 reads.
- Files whose names do not match the numbering are ignored.
"""

from __future__ import annotations

from pathlib import Path

from page_scanner.core.domain.types import ManifestRecord, page_path
from page_scanner.scanner.page_scanner import PageSequenceScanner

PAGE_SIZE = 8192


def _write_pages(root: Path, folder: str, stem: str, numbers: list[int]) -> None:
    directory = root / folder
    directory.mkdir(parents=True, exist_ok=True)
    for n in numbers:
        (directory / f"{stem}_{n}").write_bytes(bytes([n % 256]) * PAGE_SIZE)


def test_contiguous_pages_are_all_read(tmp_path: Path) -> None:
    _write_pages(tmp_path, "data", "alpha", [1, 2, 3])
    scanner = PageSequenceScanner(root=tmp_path)

    events = list(scanner.scan(ManifestRecord("data", "alpha")))

    assert [e.index for e in events] == [1, 2, 3]
    assert all(e.size == PAGE_SIZE for e in events)
    assert not any(e.short_read for e in events)


def test_missing_first_page_yields_nothing(tmp_path: Path) -> None:
    _write_pages(tmp_path, "other", "beta", [2, 3])
    scanner = PageSequenceScanner(root=tmp_path)

    assert list(scanner.scan(ManifestRecord("other", "beta"))) == []


def test_missing_folder_yields_nothing(tmp_path: Path) -> None:
    scanner = PageSequenceScanner(root=tmp_path)

    assert len(list(scanner.scan(ManifestRecord("nowhere", "beta")))) == 0


def test_gap_is_not_bridged(tmp_path: Path) -> None:
    _write_pages(tmp_path, "data", "alpha", [1, 2, 4])
    scanner = PageSequenceScanner(root=tmp_path)

    events = list(scanner.scan(ManifestRecord("data", "alpha")))

    assert [e.index for e in events] == [1, 2]


def test_non_matching_names_are_ignored(tmp_path: Path) -> None:
    _write_pages(tmp_path, "data", "alpha", [1, 2])
    directory = tmp_path / "data"
    # Zero padding, other stems and suffixes never match the sequence.
    (directory / "alpha_03").write_bytes(b"x" * PAGE_SIZE)
    (directory / "alpha_3.bak").write_bytes(b"x" * PAGE_SIZE)
    (directory / "alphabet_3").write_bytes(b"x" * PAGE_SIZE)
    (directory / "alpha_10").write_bytes(b"x" * PAGE_SIZE)

    scanner = PageSequenceScanner(root=tmp_path)

    assert len(list(scanner.scan(ManifestRecord("data", "alpha")))) == 2


def test_page_numbers_are_not_zero_padded(tmp_path: Path) -> None:
    numbers = list(range(1, 12))
    _write_pages(tmp_path, "data", "alpha", numbers)
    scanner = PageSequenceScanner(root=tmp_path)

    events = list(scanner.scan(ManifestRecord("data", "alpha")))

    assert [e.index for e in events] == numbers
    assert events[-1].path.endswith("alpha_11")


def test_each_record_restarts_at_page_one(tmp_path: Path) -> None:
    _write_pages(tmp_path, "data", "alpha", [1, 2, 3])
    _write_pages(tmp_path, "data", "beta", [1])
    scanner = PageSequenceScanner(root=tmp_path)

    assert len(list(scanner.scan(ManifestRecord("data", "alpha")))) == 3
    assert len(list(scanner.scan(ManifestRecord("data", "beta")))) == 1
    assert len(list(scanner.scan(ManifestRecord("data", "alpha")))) == 3


def test_page_path_format() -> None:
    record = ManifestRecord("data", "alpha")

    assert page_path(".", record, 1) == "./data/alpha_1"
    assert page_path(".", record, 42) == "./data/alpha_42"
    assert page_path("/srv/pages", record, 3) == "/srv/pages/data/alpha_3"
    assert page_path(Path("store"), record, 2) == "store/data/alpha_2"


def test_absolute_folder_stays_under_root() -> None:
    """Names are concatenated: an absolute folder token never escapes the root."""

    record = ManifestRecord("/etc", "passwd")

    assert page_path(".", record, 1) == ".//etc/passwd_1"
    assert page_path("/srv/pages", record, 1) == "/srv/pages//etc/passwd_1"


def test_slash_inside_stem_is_kept_verbatim(tmp_path: Path) -> None:
    record = ManifestRecord("data", "sub/alpha")

    assert page_path(".", record, 1) == "./data/sub/alpha_1"

    _write_pages(tmp_path, "data/sub", "alpha", [1, 2])
    scanner = PageSequenceScanner(root=tmp_path)

    assert [e.index for e in scanner.scan(record)] == [1, 2]


def test_absolute_folder_is_resolved_against_root(tmp_path: Path) -> None:
    _write_pages(tmp_path, "abs", "alpha", [1])
    scanner = PageSequenceScanner(root=tmp_path)

    events = list(scanner.scan(ManifestRecord("/abs", "alpha")))

    assert [e.index for e in events] == [1]
    assert events[0].path == f"{tmp_path}//abs/alpha_1"
