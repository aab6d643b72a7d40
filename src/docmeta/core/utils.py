#!/usr/bin/env python3
"""
Purpose:
    Provides common utility functions such as semantic version checks,
    ISO-8601 timestamp handling, dictionary merge, and file I/O utilities
    for docmeta.
"""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Hashable, Iterable, List

from docmeta.core.constants import (
    STRICT_SEMVER_RE, FIELDNAME_ALLOWED_RE, DEFAULT_TEXT_ENCODING
)


# --- Validation Helpers --- #

def is_strict_semver(version: str) -> bool:
    """Return True if the version string is strict SemVer (e.g., 'x.y.z')."""
    return bool(STRICT_SEMVER_RE.fullmatch(version))


def is_valid_fieldname_pattern(name: str) -> bool:
    """Return True if the field name fully matches the allowed pattern."""
    return bool(FIELDNAME_ALLOWED_RE.fullmatch(name))


# --- Timestamp Utilities --- #

def parse_timestamp(value: str) -> datetime:
    """
    Parse an ISO-8601 string into an aware UTC datetime.

    A trailing 'Z' is accepted; naive values are taken as UTC.

    Raises:
        ValueError: If the string is not ISO-8601 or falls outside the
            representable UTC range.
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    dt = datetime.fromisoformat(text)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    try:
        return dt.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {value!r}") from e


def format_timestamp(dt: datetime) -> str:
    """Format a datetime as UTC 'YYYY-MM-DDTHH:MM:SS.mmmZ'."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    utc = dt.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def utc_now_iso() -> str:
    """Current time as a UTC ISO-8601 string with millisecond precision."""
    return format_timestamp(datetime.now(timezone.utc))


# --- Generic Utilities --- #

def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merge two dictionaries (values from 'override' take precedence).
    Non-dict values are overwritten; dict values are merged depth-first.
    """
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = merge_dicts(result[k], v)
        else:
            result[k] = v
    return result


def unique_in_order(items: Iterable[Hashable]) -> List[Any]:
    """Drop repeated items, keeping the first occurrence of each."""
    return list(dict.fromkeys(items))


# --- File I/O Helpers --- #

def load_json_file(path: Path) -> Dict[str, Any]:
    """
    Load a JSON file from 'path'. Returns an empty dict if the file is missing.

    Raises:
        ValueError: if the file exists but contains invalid JSON.
    """
    if not path.exists():
        return {}
    try:
        with path.open("r", encoding=DEFAULT_TEXT_ENCODING) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(
            f"Invalid JSON in {str(path)!r}: {e.msg} (line {e.lineno}, col {e.colno})"
        ) from e
