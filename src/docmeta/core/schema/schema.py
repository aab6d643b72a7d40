#!/usr/bin/env python3
"""
Purpose:
    Defines the MetadataSchema model for docmeta: an immutable, ordered
    collection of FieldRules. Also builds the default schema and loads
    declarative schema extension files (YAML or JSON).
"""

from __future__ import annotations

import json
import re
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from docmeta.core import constants as C
from docmeta.core.exceptions import SchemaError
from docmeta.core.schema import rules as R
from docmeta.core.schema.field_rule import FieldRule
from docmeta.core.schema.field_type import FieldType


# Keys accepted on one entry of a declarative schema file
DECLARATIVE_KEYS = frozenset({
    "name", "type", "required", "description", "default", "default_factory",
    "auto_default", "normalize", "validate", "pattern", "infer",
})


# --- Model --- #

class MetadataSchema(BaseModel):
    """
    Ordered set of FieldRules keyed by field name.

    Insertion order defines processing order. The schema is immutable;
    extension happens by constructing a new schema with `extend()` or
    `without()`.

    Example
    -------
    >>> schema = build_default_schema()
    >>> schema.names()[:3]
    ['title', 'author', 'zone']
    >>> extended = schema.extend(FieldRule(name="isbn"))
    >>> "isbn" in extended, "isbn" in schema
    (True, False)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    rules: tuple[FieldRule, ...] = Field(default_factory=tuple)

    # --- Validation --- #

    @model_validator(mode="after")
    def _check_no_duplicates(self) -> "MetadataSchema":
        details = self._dup_details(r.name for r in self.rules)
        if details:
            raise ValueError(f"Duplicate field names: {details}")
        return self

    @staticmethod
    def _dup_details(names: Iterable[str]) -> str | None:
        counts = Counter(names)
        dups = [(n, c) for n, c in sorted(counts.items()) if c > 1]
        if not dups:
            return None
        return ", ".join(f"{n} ×{c}" for n, c in dups)

    # --- Query API --- #

    def get(self, name: str) -> Optional[FieldRule]:
        """Return the rule for `name`, or None."""
        for rule in self.rules:
            if rule.name == name:
                return rule
        return None

    def require(self, name: str) -> FieldRule:
        """Return the rule for `name` or raise LookupError."""
        rule = self.get(name)
        if rule is None:
            raise LookupError(f"Field {name!r} is not defined in the schema")
        return rule

    def names(self) -> List[str]:
        return [r.name for r in self.rules]

    def required_names(self) -> List[str]:
        return [r.name for r in self.rules if r.required]

    def __iter__(self) -> Iterator[FieldRule]:  # type: ignore[override]
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def __contains__(self, name: object) -> bool:
        return any(r.name == name for r in self.rules)

    # --- Extension --- #

    def extend(self, *rules: FieldRule) -> "MetadataSchema":
        """
        Return a new schema with `rules` added. A rule whose name already
        exists replaces the existing rule in place; new names are appended.
        """
        current = list(self.rules)
        positions = {r.name: i for i, r in enumerate(current)}
        for rule in rules:
            if rule.name in positions:
                current[positions[rule.name]] = rule
            else:
                positions[rule.name] = len(current)
                current.append(rule)
        return MetadataSchema(rules=tuple(current))

    def without(self, *names: str) -> "MetadataSchema":
        """Return a new schema with the named rules removed (unknown names are ignored)."""
        drop = set(names)
        return MetadataSchema(rules=tuple(r for r in self.rules if r.name not in drop))

    def describe(self) -> List[Dict[str, Any]]:
        """JSON-safe summary of every rule, in processing order."""
        return [r.model_dump(exclude_none=True) for r in self.rules]

    # --- Declarative loading --- #

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional["MetadataSchema"] = None) -> "MetadataSchema":
        """
        Build a schema from a declarative mapping `{"fields": [...]}`.

        With `base`, the declared rules extend (or override) the base schema;
        otherwise the result contains only the declared rules.

        Raises:
            SchemaError: if the payload shape or any entry is invalid.
        """
        if not isinstance(data, Mapping):
            raise SchemaError("Schema definition must be a mapping with a 'fields' list")
        entries = data.get("fields")
        if not isinstance(entries, list):
            raise SchemaError("Schema definition requires a 'fields' list")

        declared = [rule_from_declaration(entry, index=i) for i, entry in enumerate(entries)]
        try:
            if base is None:
                return cls(rules=tuple(declared))
            return base.extend(*declared)
        except ValidationError as e:
            raise SchemaError("; ".join(_error_lines(e))) from e

    @classmethod
    def from_file(cls, path: Union[str, Path], base: Optional["MetadataSchema"] = None) -> "MetadataSchema":
        """
        Load a declarative schema from a YAML or JSON file.

        Raises:
            FileNotFoundError: if the file does not exist
            ValueError: if the file extension is not supported
            SchemaError: if the payload is not a valid schema definition
        """
        p = Path(path)
        if not p.exists():
            raise FileNotFoundError(f"The file {str(p)!r} does not exist")
        suffix = p.suffix.lower()
        if suffix not in C.SUPPORTED_SCHEMA_EXT:
            raise ValueError(
                f"Invalid schema file extension for {p.name!r}; expected one of {sorted(C.SUPPORTED_SCHEMA_EXT)}"
            )
        text = p.read_text(encoding=C.DEFAULT_TEXT_ENCODING)
        try:
            data = json.loads(text) if suffix == ".json" else yaml.safe_load(text)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise SchemaError(f"Failed to parse {p.name!r}: {e}") from e
        return cls.from_dict(data or {}, base=base)


# --- Declarative helpers --- #

def rule_from_declaration(entry: Any, index: int = 0) -> FieldRule:
    """
    Turn one declarative entry into a FieldRule, resolving behavior names
    through the registries in `docmeta.core.schema.rules`.
    """
    if not isinstance(entry, Mapping):
        raise SchemaError(f"fields[{index}]: entry must be a mapping")
    stray = set(entry) - DECLARATIVE_KEYS
    if stray:
        raise SchemaError(f"fields[{index}]: unexpected key(s) {sorted(stray)}")
    if entry.get("validate") is not None and entry.get("pattern") is not None:
        raise SchemaError(f"fields[{index}]: provide either 'validate' or 'pattern', not both")

    try:
        validator = (
            R.pattern_validator(entry["pattern"]) if entry.get("pattern") is not None
            else R.lookup(R.VALIDATORS, entry.get("validate"), "validator")
        )
        return FieldRule(
            name=entry.get("name"),
            types=entry.get("type", FieldType.STRING.value),
            required=bool(entry.get("required", False)),
            description=entry.get("description"),
            default=entry.get("default"),
            default_factory=R.lookup(R.DEFAULT_FACTORIES, entry.get("default_factory"), "default factory"),
            auto_default=bool(entry.get("auto_default", False)),
            normalizer=R.lookup(R.NORMALIZERS, entry.get("normalize"), "normalizer"),
            validator=validator,
            inferrer=R.lookup(R.INFERRERS, entry.get("infer"), "inferrer"),
        )
    except ValidationError as e:
        msgs = _error_lines(e)
        raise SchemaError(f"fields[{index}]: " + "; ".join(msgs)) from e
    except (ValueError, re.error) as e:
        raise SchemaError(f"fields[{index}]: {e}") from e


def _error_lines(exc: ValidationError) -> List[str]:
    """One `path: message` line per pydantic error, list indices shown as `[i]`."""
    lines = []
    for err in exc.errors():
        path = ""
        for seg in err.get("loc", ()):
            if isinstance(seg, int):
                path += f"[{seg}]"
            else:
                path += f".{seg}" if path else str(seg)
        lines.append(f"{path or '<root>'}: {err.get('msg', 'Validation error')}")
    return lines


# --- Default schema --- #

def build_default_schema() -> MetadataSchema:
    """
    Construct the core document metadata schema:
    title, author, zone, created_at, updated_at, version.
    """
    return MetadataSchema(rules=(
        FieldRule(
            name="title",
            types=FieldType.STRING,
            required=True,
            default=C.DEFAULT_TITLE,
            normalizer=R.trim,
            validator=R.is_non_empty_text,
            description="Document title.",
        ),
        FieldRule(
            name="author",
            types=[FieldType.STRING, FieldType.ARRAY],
            required=True,
            default=C.DEFAULT_AUTHOR,
            normalizer=R.normalize_authors,
            validator=R.is_valid_authors,
            description="Single author or list of authors (deduplicated).",
        ),
        FieldRule(
            name="zone",
            types=FieldType.STRING,
            required=True,
            default=C.DEFAULT_ZONE,
            normalizer=R.lowercase,
            validator=R.is_non_empty_text,
            inferrer=R.infer_zone,
            description="Lowercased zone; inferable from context category/tags.",
        ),
        FieldRule(
            name="created_at",
            types=FieldType.STRING,
            default_factory=R.now_timestamp,
            auto_default=True,
            normalizer=R.normalize_timestamp,
            validator=R.is_timestamp,
            description="Creation time (ISO-8601, UTC).",
        ),
        FieldRule(
            name="updated_at",
            types=FieldType.STRING,
            default_factory=R.now_timestamp,
            auto_default=True,
            normalizer=R.normalize_timestamp,
            validator=R.is_timestamp,
            description="Last update time (ISO-8601, UTC).",
        ),
        FieldRule(
            name="version",
            types=FieldType.STRING,
            default=C.DEFAULT_VERSION,
            auto_default=True,
            normalizer=R.trim,
            validator=R.is_semver,
            description="Semantic version X.Y.Z.",
        ),
    ))


DEFAULT_SCHEMA: MetadataSchema = build_default_schema()
