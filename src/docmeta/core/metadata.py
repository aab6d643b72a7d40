#!/usr/bin/env python3
"""
Purpose:
    Models attached to processed records: the `_metadata` processing
    envelope and the `FieldIssue` entries collected as errors/warnings.
"""

from dataclasses import dataclass
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, field_validator

from docmeta.core.constants import PROCESSOR_VERSION
from docmeta.core.utils import is_strict_semver, utc_now_iso


@dataclass(frozen=True)
class FieldIssue:
    """One error or warning raised while handling a single field."""
    field: str
    message: str

    def to_dict(self) -> Dict[str, str]:
        return {"field": self.field, "message": self.message}

    def to_error_dict(self) -> Dict[str, str]:
        """Shape used for processing errors: `{field, error}`."""
        return {"field": self.field, "error": self.message}


class ProcessingInfo(BaseModel):
    """
    Envelope stored under `_metadata` on every record produced by
    `MetadataProcessor.create_metadata`.

    Example
    -------
    >>> info = ProcessingInfo(has_errors=False, has_warnings=True)
    >>> info.processor_version
    '1.0.0'
    >>> sorted(info.to_record())
    ['has_errors', 'has_warnings', 'processed_at', 'processor_version']
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    processed_at: str = Field(
        default_factory=utc_now_iso,
        description="UTC ISO-8601 timestamp of processing.",
    )
    processor_version: str = Field(
        default=PROCESSOR_VERSION,
        description="Version of the processor that produced the record (strict semver).",
    )
    has_errors: bool = Field(default=False, description="True if any field errored.")
    has_warnings: bool = Field(default=False, description="True if any field produced a warning.")

    @field_validator("processor_version", mode="before")
    @classmethod
    def _validate_processor_version(cls, v: Any) -> str:
        s = str(v).strip()
        if not is_strict_semver(s):
            raise ValueError(f"Invalid processor version: {v!r}")
        return s

    def to_record(self) -> Dict[str, Any]:
        """Plain-dict form stored in (and exported with) the record."""
        return self.model_dump()
