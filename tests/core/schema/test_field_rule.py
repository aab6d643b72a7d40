#!/usr/bin/env python3
import pytest
from pydantic import ValidationError

from docmeta.core.schema.field_rule import FieldRule
from docmeta.core.schema.field_type import FieldType


# --- Construction --- #

def test_minimal_rule_defaults():
    rule = FieldRule(name=" isbn ")
    assert rule.name == "isbn"
    assert rule.types == frozenset({FieldType.STRING})
    assert rule.required is False
    assert rule.auto_default is False
    assert not rule.has_default and not rule.can_infer


@pytest.mark.parametrize("bad", [None, "", "   "])
def test_name_missing_or_blank_raises(bad):
    with pytest.raises(ValidationError, match="The field 'name' is not set"):
        FieldRule(name=bad)  # type: ignore[arg-type]


def test_reserved_name_raises():
    with pytest.raises(ValidationError, match="reserved name"):
        FieldRule(name="_metadata")


@pytest.mark.parametrize("bad", ["bad name", "9lives", "a-b"])
def test_name_pattern_violation_raises(bad):
    with pytest.raises(ValidationError, match="must match the pattern"):
        FieldRule(name=bad)


def test_types_accept_single_or_many():
    rule = FieldRule(name="author", types=["string", "array"])
    assert rule.types == frozenset({FieldType.STRING, FieldType.ARRAY})
    assert rule.type_label() == "array|string"


def test_unknown_type_raises():
    with pytest.raises(ValidationError, match="Unknown field type"):
        FieldRule(name="x", types="number")


def test_default_and_factory_are_exclusive():
    with pytest.raises(ValidationError, match="either 'default' or 'default_factory'"):
        FieldRule(name="x", default="a", default_factory=lambda: "b")


def test_rule_is_frozen():
    rule = FieldRule(name="x")
    with pytest.raises(ValidationError):
        rule.required = True


# --- Behavior --- #

def test_accepts_any_declared_type():
    rule = FieldRule(name="author", types=["string", "array"])
    assert rule.accepts("a")
    assert rule.accepts(["a"])
    assert not rule.accepts(3)
    assert not rule.accepts(("a",))


def test_default_value_literal_is_copied():
    rule = FieldRule(name="tags", types="array", default=["x"])
    first = rule.default_value()
    first.append("y")
    assert rule.default_value() == ["x"]


def test_default_value_factory_called_each_time():
    counter = iter(range(10))
    rule = FieldRule(name="seq", default_factory=lambda: str(next(counter)))
    assert rule.default_value() == "0"
    assert rule.default_value() == "1"


def test_normalize_validate_infer():
    rule = FieldRule(
        name="code",
        normalizer=str.upper,
        validator=lambda v: v.isalpha(),
        inferrer=lambda ctx: ctx["code"],
    )
    assert rule.normalize("ab") == "AB"
    assert rule.is_valid("AB") is True
    assert rule.is_valid("A1") is False
    assert rule.infer({"code": "zz"}) == "zz"


def test_without_behaviors_is_passthrough():
    rule = FieldRule(name="x")
    assert rule.normalize(" v ") == " v "
    assert rule.is_valid(" v ") is True
    with pytest.raises(ValueError, match="has no inferrer"):
        rule.infer({})


def test_model_dump_names_callables():
    def shout(v):
        return v.upper()

    dumped = FieldRule(name="x", types=["array", "string"], normalizer=shout).model_dump(exclude_none=True)
    assert dumped["types"] == ["array", "string"]
    assert dumped["normalizer"] == "shout"
    assert "validator" not in dumped
