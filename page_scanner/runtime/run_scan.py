from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Any, Sequence

from pydantic import ValidationError

from page_scanner.core.config.scan_config import ScanConfig
from page_scanner.core.domain.errors import (
    EventOutputUnavailable,
    ManifestUnavailable,
    PageIOError,
)
from page_scanner.core.domain.types import ManifestRecord
from page_scanner.core.events.event_bus import EventBus
from page_scanner.core.events.events import RecordScannedEvent
from page_scanner.core.events.sinks.file_recorder import FileRecorderSink
from page_scanner.core.events.sinks.sink_console import ConsoleDiagnosticSink
from page_scanner.core.events.sinks.sink_logging import LoggingEventSink
from page_scanner.manifest.manifest import ManifestSource
from page_scanner.manifest.text_manifest import ManifestReader, open_manifest
from page_scanner.runtime.prometheus_metrics import PrometheusMetricsClient
from page_scanner.runtime.summary import (
    RecordSummary,
    RunSummary,
    print_run_summary,
    summarize_run,
)
from page_scanner.scanner.page_scanner import PageSequenceScanner

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 2
EXIT_MANIFEST_UNAVAILABLE = 3
EXIT_PAGE_IO_ERROR = 4


class PageScanRunner:
    """
    Drives the page scanner over every record of a manifest source.

    Records are processed strictly one at a time; each record's page
    sequence is scanned to exhaustion before the next record is requested.
    A PageIOError ends only the record it occurred in.
    """

    def __init__(
        self,
        *,
        scanner: PageSequenceScanner,
        event_bus: EventBus,
    ) -> None:
        self._scanner = scanner
        self._event_bus = event_bus

    def run(self, source: ManifestSource) -> list[RecordSummary]:
        results: list[RecordSummary] = []
        for record in source:
            results.append(self.scan_record(record))
        return results

    def scan_record(self, record: ManifestRecord) -> RecordSummary:
        pages_read = 0
        bytes_read = 0
        short_pages = 0
        status = "exhausted"
        error: str | None = None

        try:
            for event in self._scanner.scan(record):
                pages_read += 1
                bytes_read += event.size
                if event.short_read:
                    short_pages += 1
        except PageIOError as exc:
            LOGGER.error(
                "Page sequence aborted by I/O error",
                extra={"path": exc.path, "index": exc.index, "reason": exc.reason},
            )
            status = "io_error"
            error = str(exc)

        self._event_bus.emit(
            RecordScannedEvent(
                folder=record.folder,
                stem=record.stem,
                pages_read=pages_read,
                bytes_read=bytes_read,
                status=status,
                error=error,
            )
        )

        return RecordSummary(
            folder=record.folder,
            stem=record.stem,
            pages_read=pages_read,
            bytes_read=bytes_read,
            short_pages=short_pages,
            status=status,
            error=error,
        )


# ---------------------------------------------------------------------------
# Run assembly
# ---------------------------------------------------------------------------

def _build_event_bus(config: ScanConfig) -> EventBus:
    bus = EventBus()
    bus.register(LoggingEventSink(logging.getLogger("page_scanner.events")))
    if config.diagnostics:
        bus.register(ConsoleDiagnosticSink())
    if config.events_path is not None:
        try:
            recorder = FileRecorderSink(config.events_path)
        except OSError as exc:
            bus.close()
            raise EventOutputUnavailable(
                str(config.events_path), exc.strerror or str(exc)
            ) from exc
        bus.register(recorder)
    return bus


def run_scan(config: ScanConfig) -> RunSummary:
    """
    Execute one complete scan run.

    Raises ManifestUnavailable before any page is probed if the manifest
    cannot be opened.
    Raises EventOutputUnavailable, also before any probe, if the event
    recording file cannot be opened.
    """
    started = time.monotonic()

    with open_manifest(config.manifest_path) as stream:
        reader = ManifestReader(
            stream,
            max_records=config.max_records,
            max_token_bytes=config.max_token_bytes,
        )

        with _build_event_bus(config) as bus:
            scanner = PageSequenceScanner(
                root=config.root_dir,
                page_size=config.page_size,
                probe_offset=config.probe_offset,
                short_read_policy=config.short_read_policy,
                event_bus=bus,
            )
            records = PageScanRunner(scanner=scanner, event_bus=bus).run(reader)

    summary = summarize_run(
        manifest_path=str(config.manifest_path),
        records=records,
        rejected_records=len(reader.rejected),
        duration_seconds=time.monotonic() - started,
    )

    LOGGER.info(
        "Scan run finished",
        extra={
            "records": summary.record_count,
            "pages": summary.pages_read,
            "io_errors": summary.io_errors,
        },
    )

    _push_metrics(summary)
    return summary


def _push_metrics(summary: RunSummary) -> None:
    metrics = PrometheusMetricsClient()
    if not metrics.is_enabled():
        return

    try:
        metrics.record_run(summary)
        metrics.push_all(job="page_scan")
    except Exception:
        LOGGER.exception("Prometheus push failed")


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _load_json(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object: {path}")
    return data


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="page-scan",
        description="Read the numbered page sequence of every manifest record",
    )

    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a JSON scan config. Flags below override its values.",
    )

    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help="Manifest of 'folder stem' pairs (default: ./trace_map.csv).",
    )

    parser.add_argument(
        "--root",
        type=Path,
        default=None,
        help="Directory page paths are resolved against (default: .).",
    )

    parser.add_argument(
        "--max-records",
        type=int,
        default=None,
        help="Safety cap on manifest records (default: 400, 0 disables).",
    )

    parser.add_argument("--page-size", type=int, default=None)
    parser.add_argument("--probe-offset", type=int, default=None)

    parser.add_argument(
        "--short-read",
        choices=("accept", "reject"),
        default=None,
        help="Policy for pages shorter than the page size.",
    )

    parser.add_argument(
        "--events-out",
        type=Path,
        default=None,
        help="Append every scan event as a JSON line to this file.",
    )

    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress per-page diagnostic output and the run summary.",
    )

    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=("DEBUG", "INFO", "WARNING", "ERROR"),
    )

    return parser


def _config_from_args(args: argparse.Namespace) -> ScanConfig:
    raw: dict[str, Any] = _load_json(args.config) if args.config is not None else {}

    overrides = {
        "manifest_path": args.manifest,
        "root_dir": args.root,
        "page_size": args.page_size,
        "probe_offset": args.probe_offset,
        "short_read_policy": args.short_read,
        "events_path": args.events_out,
    }
    raw.update({k: v for k, v in overrides.items() if v is not None})

    if args.max_records is not None:
        raw["max_records"] = args.max_records or None

    if args.quiet:
        raw["diagnostics"] = False

    return ScanConfig.from_json_obj(raw)


def main(argv: Sequence[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _config_from_args(args)
    except (OSError, ValueError, ValidationError) as exc:
        print(f"Error: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_USAGE

    try:
        summary = run_scan(config)
    except ManifestUnavailable as exc:
        LOGGER.error("Manifest unavailable", extra={"path": exc.path})
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_MANIFEST_UNAVAILABLE
    except EventOutputUnavailable as exc:
        LOGGER.error("Event output unavailable", extra={"path": exc.path})
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_USAGE

    if config.diagnostics:
        print()
        print_run_summary(summary)

    if not summary.ok:
        return EXIT_PAGE_IO_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
