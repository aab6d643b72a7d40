#!/usr/bin/env python3
"""
Purpose:
    Defines the FieldType enumeration for docmeta schemas, along with
    helpers for parsing declared types and matching runtime values.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable


class FieldType(str, Enum):
    """
    Supported value types for a metadata field.

    - string  : scalar text (`str`)
    - array   : ordered sequence (`list` only)
    - invalid : unrecognized/unsupported type (returned by `parse`)
    """

    STRING = "string"
    ARRAY = "array"
    INVALID = "invalid"

    # --- Parsing helpers --- #

    @classmethod
    def parse(cls, value: str | FieldType | None) -> FieldType:
        """
        Coerce arbitrary input to a `FieldType`.

        - `FieldType` instance → returned as-is
        - `None` or unknown strings → `FieldType.INVALID`
        - strings are trimmed and lowercased before lookup

        Examples
        --------
        >>> FieldType.parse(" String ")
        <FieldType.STRING: 'string'>
        >>> FieldType.parse("list")
        <FieldType.INVALID: 'invalid'>
        """
        if isinstance(value, FieldType):
            return value
        if value is None:
            return cls.INVALID
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.INVALID

    @classmethod
    def parse_many(cls, value: str | FieldType | Iterable[str | FieldType] | None) -> frozenset[FieldType]:
        """
        Parse one tag or a collection of tags into a non-empty set.

        Raises:
            ValueError: if empty or any tag is unknown.
        """
        raw = [value] if isinstance(value, (str, FieldType)) or value is None else list(value)
        parsed = [cls.parse(v) for v in raw]
        if not parsed:
            raise ValueError("At least one field type is required")
        bad = [r for r, p in zip(raw, parsed) if p is cls.INVALID]
        if bad:
            raise ValueError(f"Unknown field type(s) {bad!r}; valid types are: string, array")
        return frozenset(parsed)

    # --- Matching --- #

    def matches(self, value: Any) -> bool:
        """True if the runtime value is of this type."""
        if self is FieldType.STRING:
            return isinstance(value, str)
        if self is FieldType.ARRAY:
            return isinstance(value, list)
        return False

    @staticmethod
    def describe(types: Iterable[FieldType]) -> str:
        """Stable, human-readable form of a set of types ('array|string')."""
        return "|".join(sorted(t.value for t in types))
