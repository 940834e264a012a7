from __future__ import annotations

from dataclasses import dataclass
from typing import List, TextIO

from page_scanner.core.domain.types import display_path

# ---------------------------------------------------------------------------
# Data models
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class RecordSummary:
    folder: str
    stem: str
    pages_read: int
    bytes_read: int
    short_pages: int
    status: str  # "exhausted" | "io_error"
    error: str | None = None


@dataclass(frozen=True, slots=True)
class RunSummary:
    manifest_path: str
    record_count: int
    pages_read: int
    bytes_read: int
    short_pages: int
    io_errors: int
    rejected_records: int
    duration_seconds: float
    records: List[RecordSummary]
    warnings: List[str]

    @property
    def ok(self) -> bool:
        return self.io_errors == 0


# ---------------------------------------------------------------------------
# Summary builder
# ---------------------------------------------------------------------------

def summarize_run(
    *,
    manifest_path: str,
    records: list[RecordSummary],
    rejected_records: int,
    duration_seconds: float,
) -> RunSummary:
    warnings: list[str] = []

    if not records:
        warnings.append("Manifest contained no records")

    empty = [r for r in records if r.pages_read == 0 and r.status == "exhausted"]
    if records and len(empty) == len(records):
        warnings.append("No pages found for any record")

    if rejected_records:
        warnings.append(f"{rejected_records} oversized manifest record(s) skipped")

    short_pages = sum(r.short_pages for r in records)
    if short_pages:
        warnings.append(f"{short_pages} page(s) shorter than the page size")

    io_errors = 0
    for r in records:
        if r.status == "io_error":
            io_errors += 1
            warnings.append(display_path(f"{r.folder}/{r.stem}: {r.error}"))

    return RunSummary(
        manifest_path=manifest_path,
        record_count=len(records),
        pages_read=sum(r.pages_read for r in records),
        bytes_read=sum(r.bytes_read for r in records),
        short_pages=short_pages,
        io_errors=io_errors,
        rejected_records=rejected_records,
        duration_seconds=duration_seconds,
        records=records,
        warnings=warnings,
    )


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def print_run_summary(summary: RunSummary, file: TextIO | None = None) -> None:
    print(f"Manifest: {display_path(summary.manifest_path)}", file=file)
    print(f"Records: {summary.record_count}", file=file)
    print(f"Pages read: {summary.pages_read}", file=file)
    print(f"Bytes read: {summary.bytes_read}", file=file)
    print(f"Duration: {summary.duration_seconds:.3f} s", file=file)
    print(file=file)

    if summary.warnings:
        print("Warnings:", file=file)
        for w in summary.warnings:
            print(f"  - {w}", file=file)
        print(file=file)

    print("Records:", file=file)
    for r in summary.records:
        print(
            f"  - {display_path(r.folder)}/{display_path(r.stem)}: "
            f"{r.pages_read} pages | "
            f"{r.bytes_read} bytes | "
            f"{r.status}",
            file=file,
        )
