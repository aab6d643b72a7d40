#!/usr/bin/env python3
"""
Purpose:
    Implements the MetadataProcessor: a schema-driven engine that resolves
    raw input (plus optional context) into a complete record by applying
    defaulting, inference, type checking, normalization and validation per
    field. It also validates and normalizes already-resolved records.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from docmeta.core.constants import ENVELOPE_KEY, PROCESSOR_VERSION
from docmeta.core.exceptions import (
    FieldTypeError,
    FieldValidationError,
    MissingFieldError,
)
from docmeta.core.metadata import FieldIssue, ProcessingInfo
from docmeta.core.schema.field_rule import FieldRule
from docmeta.core.schema.schema import DEFAULT_SCHEMA, MetadataSchema
from docmeta.core.validation import ValidationResult

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

# Sentinel for "field omitted from the record"
_OMIT = object()


class MetadataProcessor:
    """
    Stateless (per call) metadata engine bound to one schema.

    Errors and warnings are call-scoped: both lists are reset at the start
    of every `create_metadata` call, so read them via `get_errors()` /
    `get_warnings()` before the next call.
    """

    def __init__(self, schema: MetadataSchema = DEFAULT_SCHEMA, processor_version: str = PROCESSOR_VERSION):
        self._schema = schema
        self._processor_version = processor_version
        self._errors: List[FieldIssue] = []
        self._warnings: List[FieldIssue] = []

    @property
    def schema(self) -> MetadataSchema:
        return self._schema

    @property
    def processor_version(self) -> str:
        return self._processor_version

    # --- Creation --- #

    def create_metadata(self, data: Optional[Mapping[str, Any]] = None,
                        context: Optional[Mapping[str, Any]] = None) -> Record:
        """
        Resolve `data` into a full record, field by field in schema order.

        Per-field failures never escape: they are recorded as errors and, for
        required fields, replaced by the rule's default (with a warning).
        Optional fields that fail are left out of the record.
        """
        self._errors = []
        self._warnings = []
        data = data or {}
        record: Record = {}

        for rule in self._schema:
            try:
                value = self.process_field(rule, data.get(rule.name), context)
            except Exception as e:
                self._errors.append(FieldIssue(rule.name, str(e)))
                logger.warning("Field %r failed processing: %s", rule.name, e)
                fallback = rule.default_value() if rule.required else None
                if fallback is not None:
                    record[rule.name] = fallback
                    self._warn(rule.name, f"Used default value due to error: {e}")
                else:
                    logger.debug("Field %r left out of the record", rule.name)
                continue
            if value is not _OMIT:
                record[rule.name] = value

        record[ENVELOPE_KEY] = ProcessingInfo(
            processor_version=self._processor_version,
            has_errors=bool(self._errors),
            has_warnings=bool(self._warnings),
        ).to_record()
        return record

    def process_field(self, rule: FieldRule, value: Any, context: Optional[Mapping[str, Any]]) -> Any:
        """
        Resolve one field value. Returns `_OMIT` for an absent optional field.

        Raises:
            FieldTypeError: value type does not match the rule.
            FieldValidationError: the rule's validator rejected the value.
            MissingFieldError: required field with nothing to fall back on.
        """
        if value is None:
            value = self._resolve_missing(rule, context)
            if value is _OMIT:
                return _OMIT

        if not rule.accepts(value):
            raise FieldTypeError(rule.name, self._type_message(rule, value))

        value = rule.normalize(value)

        if not rule.is_valid(value):
            raise FieldValidationError(rule.name, f"Validation failed for {rule.name}")

        return value

    def _resolve_missing(self, rule: FieldRule, context: Optional[Mapping[str, Any]]) -> Any:
        if rule.can_infer and context is not None:
            value = rule.infer(context)
            self._warn(rule.name, "Value inferred from context")
            return value
        if rule.required:
            value = rule.default_value()
            if value is None:
                raise MissingFieldError(rule.name, f"Required field {rule.name} is missing and has no default")
            self._warn(rule.name, "Required field missing, using default")
            return value
        if rule.auto_default and rule.has_default:
            return rule.default_value()
        return _OMIT

    # --- Inspection --- #

    def validate(self, record: Mapping[str, Any]) -> ValidationResult:
        """
        Check a record against the schema without modifying it.

        Required fields must be present; present fields must match their
        types and pass their validators. Absent optional fields are skipped.
        """
        result = ValidationResult()
        for rule in self._schema:
            value = record.get(rule.name)
            if value is None:
                if rule.required:
                    result.add(rule.name, "Required field is missing")
                continue

            if not rule.accepts(value):
                result.add(rule.name, f"Invalid type. {self._type_message(rule, value)}")
            if not self._passes(rule, value):
                result.add(rule.name, "Custom validation failed")
        return result

    def normalize(self, record: Mapping[str, Any]) -> Record:
        """
        Apply each field's normalizer to the keys present in `record`.
        Unknown keys, values of the wrong type and values the normalizer
        rejects pass through unchanged.
        """
        normalized: Record = {}
        for key, value in record.items():
            rule = self._schema.get(key)
            normalized[key] = value
            if rule is None or rule.normalizer is None or not rule.accepts(value):
                continue
            try:
                normalized[key] = rule.normalize(value)
            except (TypeError, ValueError) as e:
                # left as-is; validate() reports the field
                logger.debug("Could not normalize %r: %s", key, e)
        return normalized

    def get_errors(self) -> List[Dict[str, str]]:
        """Errors of the last `create_metadata` call as `{field, error}` dicts."""
        return [e.to_error_dict() for e in self._errors]

    def get_warnings(self) -> List[Dict[str, str]]:
        """Warnings of the last `create_metadata` call as `{field, message}` dicts."""
        return [w.to_dict() for w in self._warnings]

    # --- Internals --- #

    def _warn(self, field: str, message: str) -> None:
        self._warnings.append(FieldIssue(field, message))
        logger.debug("%s: %s", field, message)

    @staticmethod
    def _passes(rule: FieldRule, value: Any) -> bool:
        # A raising validator counts as a failed check.
        try:
            return rule.is_valid(value)
        except Exception:
            return False

    @staticmethod
    def _type_message(rule: FieldRule, value: Any) -> str:
        return f"Invalid type for {rule.name}. Expected {rule.type_label()}, got {type(value).__name__}"
