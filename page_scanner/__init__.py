"""Public API for the page_scanner package.

Only symbols imported here are considered part of the stable,
supported external interface.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

# ----------------------------------------------------------------------
# Config API
# ----------------------------------------------------------------------
from page_scanner.core.config.scan_config import ScanConfig

# ----------------------------------------------------------------------
# Errors
# ----------------------------------------------------------------------
from page_scanner.core.domain.errors import (
    EventOutputUnavailable,
    InvalidRecordError,
    ManifestUnavailable,
    PageIOError,
    PageScanError,
    ShortPageError,
)

# ----------------------------------------------------------------------
# Domain Types
# ----------------------------------------------------------------------
from page_scanner.core.domain.types import ManifestRecord, page_path
from page_scanner.core.events.event_bus import EventBus
from page_scanner.core.events.events import (
    PageProbeEvent,
    PageReadEvent,
    RecordScannedEvent,
)

# ----------------------------------------------------------------------
# Manifest + scanner
# ----------------------------------------------------------------------
from page_scanner.manifest.text_manifest import ManifestReader, open_manifest
from page_scanner.runtime.run_scan import PageScanRunner, run_scan
from page_scanner.runtime.summary import RecordSummary, RunSummary
from page_scanner.scanner.page_scanner import PageSequenceScanner

# ----------------------------------------------------------------------
# Public API definition
# ----------------------------------------------------------------------

__all__ = [
    # Config
    "ScanConfig",

    # Errors
    "PageScanError",
    "ManifestUnavailable",
    "EventOutputUnavailable",
    "InvalidRecordError",
    "PageIOError",
    "ShortPageError",

    # Domain
    "ManifestRecord",
    "page_path",
    "EventBus",
    "PageProbeEvent",
    "PageReadEvent",
    "RecordScannedEvent",

    # Reading
    "ManifestReader",
    "open_manifest",
    "PageSequenceScanner",
    "PageScanRunner",
    "run_scan",
    "RecordSummary",
    "RunSummary",

    # Version
    "__version__",
]

# ----------------------------------------------------------------------
# Package version
# ----------------------------------------------------------------------

try:
    __version__ = version("page-scanner")
except PackageNotFoundError:
    __version__ = "0.0.0"
