"""Scan configuration model for the page-scan runtime."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from page_scanner.core.domain.types import (
    DEFAULT_MAX_RECORDS,
    DEFAULT_MAX_TOKEN_BYTES,
    DEFAULT_PAGE_SIZE,
    DEFAULT_PROBE_OFFSET,
)

ShortReadPolicy = Literal["accept", "reject"]


class ScanConfig(BaseModel):
    """Structured scan configuration.

    JSON example:
        {
          "manifest_path": "./trace_map.csv",
          "root_dir": ".",
          "max_records": 400,
          "short_read_policy": "accept"
        }

    ``max_records`` and ``max_token_bytes`` accept null to disable the limit.
    """

    manifest_path: Path = Path("./trace_map.csv")
    root_dir: Path = Path(".")

    page_size: int = Field(default=DEFAULT_PAGE_SIZE, gt=0)
    probe_offset: int = Field(default=DEFAULT_PROBE_OFFSET, ge=0)
    short_read_policy: ShortReadPolicy = "accept"

    # Safety caps; end of input is the primary termination.
    max_records: int | None = Field(default=DEFAULT_MAX_RECORDS, gt=0)
    max_token_bytes: int | None = Field(default=DEFAULT_MAX_TOKEN_BYTES, gt=0)

    events_path: Path | None = None
    diagnostics: bool = True

    model_config = ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_json_obj(cls, obj: dict[str, Any]) -> ScanConfig:
        """Create a ScanConfig instance from a JSON-compatible object."""
        return cls.model_validate(obj)

    @model_validator(mode="after")
    def validate_consistency(self) -> ScanConfig:
        """Validate internal consistency of the scan configuration."""
        if self.probe_offset >= self.page_size:
            raise ValueError(
                f"probe_offset ({self.probe_offset}) must be smaller than "
                f"page_size ({self.page_size})"
            )
        return self
