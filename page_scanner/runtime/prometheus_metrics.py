from __future__ import annotations

import json
import logging
import os
from typing import TYPE_CHECKING

from prometheus_client import CollectorRegistry, Gauge, push_to_gateway

if TYPE_CHECKING:
    from page_scanner.runtime.summary import RunSummary

LOGGER = logging.getLogger(__name__)

_RUN_GAUGES: dict[str, str] = {
    "page_scan_records": "Manifest records scanned",
    "page_scan_pages": "Pages read across all records",
    "page_scan_bytes": "Payload bytes read across all records",
    "page_scan_io_errors": "Records whose page sequence ended with an I/O error",
    "page_scan_rejected_records": "Oversized manifest records skipped",
    "page_scan_duration_seconds": "Wall-clock duration of the scan run",
}


class PrometheusMetricsClient:
    """Prometheus Pushgateway client for one-shot scan runs.

    Expected environment:
    - PROMETHEUS_PUSHGATEWAY_URL: URL to the Pushgateway.
      Example: http://pushgateway.monitoring.svc.cluster.local:9091

    Optional:
    - PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON: JSON object used as grouping key.
      Without it, runs from different hosts overwrite each other.

      Example:
        {"instance": "scanner-01"}

    Pushing is a side effect: callers log delivery failures and carry on.
    """

    def __init__(self) -> None:
        self._pushgateway_url = os.environ.get("PROMETHEUS_PUSHGATEWAY_URL")
        self._grouping_key = self._load_grouping_key()
        self._registry = CollectorRegistry()
        self._gauges: dict[str, Gauge] = {}

    def is_enabled(self) -> bool:
        return self._pushgateway_url is not None

    @staticmethod
    def _load_grouping_key() -> dict[str, str]:
        raw = os.environ.get("PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON")
        if not raw:
            return {}

        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            LOGGER.warning(
                "Invalid PROMETHEUS_PUSHGATEWAY_GROUPING_KEY_JSON; ignoring"
            )
            return {}

        if not isinstance(data, dict):
            return {}

        return {
            key: value
            for key, value in data.items()
            if isinstance(key, str) and isinstance(value, str)
        }

    def record_run(self, summary: RunSummary) -> None:
        """Set one gauge per run counter, labelled by manifest and outcome."""
        labels = {
            "manifest": summary.manifest_path,
            "status": "ok" if summary.ok else "io_error",
        }

        values = {
            "page_scan_records": summary.record_count,
            "page_scan_pages": summary.pages_read,
            "page_scan_bytes": summary.bytes_read,
            "page_scan_io_errors": summary.io_errors,
            "page_scan_rejected_records": summary.rejected_records,
            "page_scan_duration_seconds": summary.duration_seconds,
        }

        for name, value in values.items():
            self._gauge(name, list(labels)).labels(**labels).set(float(value))

    def _gauge(self, name: str, labelnames: list[str]) -> Gauge:
        gauge = self._gauges.get(name)
        if gauge is None:
            gauge = Gauge(
                name,
                documentation=_RUN_GAUGES.get(name, name),
                labelnames=labelnames,
                registry=self._registry,
            )
            self._gauges[name] = gauge
        return gauge

    def push_all(self, *, job: str) -> None:
        if not self._pushgateway_url:
            return

        push_to_gateway(
            gateway=self._pushgateway_url,
            job=job,
            registry=self._registry,
            grouping_key=self._grouping_key,
        )

        LOGGER.info(
            "Prometheus metrics pushed",
            extra={"job": job, "grouping_key": self._grouping_key},
        )
