#!/usr/bin/env python3
"""
Purpose:
    Implements the FieldRule model for docmeta schemas: the declarative
    descriptor of one metadata field (accepted types, requiredness, default,
    normalization, validation and inference behaviors).
"""
from __future__ import annotations

import copy
from typing import Any, Callable, Mapping, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
    model_validator,
)

from docmeta.core import constants as C
from docmeta.core.schema.field_type import FieldType
from docmeta.core.utils import is_valid_fieldname_pattern


# --- Model --- #

class FieldRule(BaseModel):
    """
    One field in a docmeta schema.

    Behaviors are plain callables captured when the schema is built:
      - normalizer: value -> normalized value (applied before validation)
      - validator:  normalized value -> bool
      - inferrer:   context mapping -> value (used when the input value is absent)
      - default_factory: () -> value (alternative to a literal `default`)

    `types` accepts a single tag or a list of tags (`"string"`,
    `["string", "array"]`); a value is accepted if it matches any of them.

    Example
    -------
    >>> rule = FieldRule(name="title", types="string", default="Untitled", normalizer=str.strip)
    >>> rule.accepts("  x ")
    True
    >>> rule.normalize("  x ")
    'x'
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    # Common
    name: str = Field(..., description="Name of the field.")
    types: frozenset[FieldType] = Field(
        default=frozenset({FieldType.STRING}),
        description="Accepted value types.",
    )
    required: bool = Field(default=False, description="Whether this field is required.")
    description: Optional[str] = Field(default=None, description="Human-readable description.")

    # Defaults
    default: Any = Field(default=None, description="Static default value.")
    default_factory: Optional[Callable[[], Any]] = Field(
        default=None,
        description="Zero-argument callable producing the default value.",
    )
    auto_default: bool = Field(
        default=False,
        description="Fill the default silently when an optional value is absent.",
    )

    # Behaviors
    normalizer: Optional[Callable[[Any], Any]] = Field(default=None, description="Value normalizer.")
    validator: Optional[Callable[[Any], bool]] = Field(default=None, description="Value predicate.")
    inferrer: Optional[Callable[[Mapping[str, Any]], Any]] = Field(
        default=None,
        description="Derives a value from context when none was supplied.",
    )

    # --- Validators --- #

    @field_validator("name", mode="before")
    @classmethod
    def _normalize_and_validate_name(cls, v: Any) -> str:
        """
        Strip whitespace, reject reserved names, and enforce FIELDNAME_ALLOWED_RE.
        """
        s = "" if v is None else str(v).strip()
        if not s:
            raise ValueError("The field 'name' is not set")
        if s in C.RESERVED_FIELDNAMES:
            raise ValueError(f"{s!r} is a reserved name and cannot be used")
        if not is_valid_fieldname_pattern(s):
            raise ValueError(
                f"The field name {s!r} must match the pattern {C.FIELDNAME_ALLOWED_RE.pattern!r}"
            )
        return s

    @field_validator("types", mode="before")
    @classmethod
    def _parse_types(cls, v: Any) -> frozenset[FieldType]:
        """Coerce one tag or a list of tags to a non-empty set of FieldType."""
        return FieldType.parse_many(v)

    @model_validator(mode="after")
    def _post(self) -> "FieldRule":
        if self.default is not None and self.default_factory is not None:
            raise ValueError("Provide either 'default' or 'default_factory', not both")
        return self

    @field_serializer("types")
    def _dump_types(self, types: frozenset[FieldType]) -> list[str]:
        return sorted(t.value for t in types)

    @field_serializer("default_factory", "normalizer", "validator", "inferrer")
    def _dump_callable(self, fn: Optional[Callable]) -> Optional[str]:
        return None if fn is None else getattr(fn, "__name__", repr(fn))

    # --- Behavior --- #

    @property
    def can_infer(self) -> bool:
        return self.inferrer is not None

    @property
    def has_default(self) -> bool:
        return self.default is not None or self.default_factory is not None

    def accepts(self, value: Any) -> bool:
        """True if the value's runtime type matches any accepted type."""
        return any(t.matches(value) for t in self.types)

    def default_value(self) -> Any:
        """Produce the default (invoking the factory when one is set)."""
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default)

    def normalize(self, value: Any) -> Any:
        return self.normalizer(value) if self.normalizer else value

    def is_valid(self, value: Any) -> bool:
        return bool(self.validator(value)) if self.validator else True

    def infer(self, context: Mapping[str, Any]) -> Any:
        if self.inferrer is None:
            raise ValueError(f"Field {self.name!r} has no inferrer")
        return self.inferrer(context)

    def type_label(self) -> str:
        return FieldType.describe(self.types)
