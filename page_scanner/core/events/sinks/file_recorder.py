"""
Append-only file recorder sink.
"""
from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Any


def _event_record(event: Any) -> dict[str, Any]:
    if dataclasses.is_dataclass(event) and not isinstance(event, type):
        fields = {
            f.name: getattr(event, f.name)
            for f in dataclasses.fields(event)
        }
    elif hasattr(event, "__dict__"):
        fields = dict(event.__dict__)
    else:
        return {"event": str(event)}

    # Page payloads are never persisted; the digest identifies the content.
    record: dict[str, Any] = {"event_type": type(event).__name__}
    record.update(
        {k: v for k, v in fields.items() if not isinstance(v, (bytes, bytearray))}
    )
    return record


class FileRecorderSink:
    """Writes each event as a JSON line to a file."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = self._path.open("a", encoding="utf-8")
        self._closed = False

    def on_event(self, event: Any) -> None:
        self._fh.write(json.dumps(_event_record(event)) + "\n")
        self._fh.flush()

    def close(self) -> None:
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
