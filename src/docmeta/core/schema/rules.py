#!/usr/bin/env python3
"""
Purpose:
    Built-in behaviors (normalizers, validators, inferrers, default
    factories) used by the default schema, plus name registries so that
    declarative schema files can reference them by string.
"""
from __future__ import annotations

import re
from typing import Any, Callable, Dict, Mapping, Optional

from docmeta.core.constants import DEFAULT_ZONE
from docmeta.core.utils import (
    format_timestamp,
    is_strict_semver,
    parse_timestamp,
    unique_in_order,
    utc_now_iso,
)

Normalizer = Callable[[Any], Any]
Validator = Callable[[Any], bool]
Inferrer = Callable[[Mapping[str, Any]], Any]
DefaultFactory = Callable[[], Any]


# --- Normalizers --- #

def trim(value: str) -> str:
    """Strip surrounding whitespace."""
    return value.strip()


def lowercase(value: str) -> str:
    """Strip surrounding whitespace and lowercase."""
    return value.strip().lower()


def normalize_authors(value: Any) -> Any:
    """
    Polymorphic author normalization:
    - string → trimmed
    - list   → each element trimmed, empties dropped, duplicates removed
               (first occurrence wins)
    - other  → returned unchanged
    """
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, list):
        trimmed = []
        for item in value:
            if not isinstance(item, str):
                raise TypeError(f"Author entries must be strings, got {type(item).__name__}: {item!r}")
            trimmed.append(item.strip())
        return unique_in_order(a for a in trimmed if a)
    return value


def normalize_timestamp(value: str) -> str:
    """Re-emit an ISO-8601 timestamp as UTC 'YYYY-MM-DDTHH:MM:SS.mmmZ'."""
    return format_timestamp(parse_timestamp(value))


# --- Validators --- #

def is_non_empty_text(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_valid_authors(value: Any) -> bool:
    """A non-empty string, or a non-empty list of non-empty strings."""
    if isinstance(value, str):
        return value.strip() != ""
    if isinstance(value, list):
        return bool(value) and all(is_non_empty_text(a) for a in value)
    return False


def is_timestamp(value: Any) -> bool:
    if not isinstance(value, str):
        return False
    try:
        parse_timestamp(value)
    except ValueError:
        return False
    return True


def is_semver(value: Any) -> bool:
    return isinstance(value, str) and is_strict_semver(value)


def pattern_validator(pattern: str) -> Validator:
    """Build a validator requiring a full regex match on string values."""
    compiled = re.compile(pattern)

    def _check(value: Any) -> bool:
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    _check.__name__ = f"matches_{pattern!r}"
    return _check


# --- Inferrers --- #

def infer_zone(context: Mapping[str, Any]) -> str:
    """
    Derive a zone from context: `category`, then the first of `tags`,
    then the default zone. Result is lowercased.
    """
    category = context.get("category")
    if category:
        return str(category).lower()
    tags = context.get("tags")
    if tags:
        return str(tags[0]).lower()
    return DEFAULT_ZONE


# --- Default factories --- #

def now_timestamp() -> str:
    return utc_now_iso()


# --- Name registries (for declarative schema files) --- #

NORMALIZERS: Dict[str, Normalizer] = {
    "trim": trim,
    "lowercase": lowercase,
    "authors": normalize_authors,
    "timestamp": normalize_timestamp,
}

VALIDATORS: Dict[str, Validator] = {
    "non_empty": is_non_empty_text,
    "authors": is_valid_authors,
    "timestamp": is_timestamp,
    "semver": is_semver,
}

INFERRERS: Dict[str, Inferrer] = {
    "zone": infer_zone,
}

DEFAULT_FACTORIES: Dict[str, DefaultFactory] = {
    "now": now_timestamp,
}


def lookup(registry: Mapping[str, Callable], name: Optional[str], kind: str) -> Optional[Callable]:
    """Resolve a registered behavior by name; None passes through."""
    if name is None:
        return None
    key = str(name).strip().lower()
    if key not in registry:
        raise ValueError(f"Unknown {kind} {name!r}; expected one of {sorted(registry)}")
    return registry[key]
