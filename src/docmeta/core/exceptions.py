#!/usr/bin/env python3
"""
Purpose:
    Exception hierarchy for docmeta. Every error raised by the engine
    derives from `MetadataError`; builtin bases are mixed in where callers
    would naturally catch them (`TypeError`, `ValueError`, `IndexError`).
"""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from docmeta.core.validation import ValidationResult


class MetadataError(Exception):
    """Base class for all docmeta errors."""


class SchemaError(MetadataError, ValueError):
    """A schema or declarative schema file is malformed."""


# --- Field-level --- #

class FieldProcessingError(MetadataError):
    """A single field failed during processing."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class FieldTypeError(FieldProcessingError, TypeError):
    """The runtime type of a value does not match the rule's declared types."""


class FieldValidationError(FieldProcessingError, ValueError):
    """A rule's validator rejected the (normalized) value."""


class MissingFieldError(FieldProcessingError, ValueError):
    """A required field has neither a value, an inference, nor a default."""


# --- Record-level --- #

class MetadataValidationError(MetadataError, ValueError):
    """
    A record failed validation at the manager boundary.

    The message is `<prefix>: <msg1>, <msg2>, ...`; the full result is kept
    on `result` for callers that need per-field detail.
    """

    def __init__(self, prefix: str, result: "ValidationResult"):
        super().__init__(f"{prefix}: {result.summary()}")
        self.result = result

    @property
    def errors(self):
        return list(self.result)


class InvalidIndexError(MetadataError, IndexError):
    """A positional index is outside the store."""

    def __init__(self, index: int, size: int):
        super().__init__(f"Invalid metadata index: {index} (store has {size} entries)")
        self.index = index
        self.size = size
