#!/usr/bin/env python3
import pytest

from docmeta.core.schema import rules as R


# --- Normalizers --- #

@pytest.mark.parametrize("raw,expected", [
    ("  Jane Doe ", "Jane Doe"),
    (["A", "A", "B"], ["A", "B"]),
    ([" A", "A ", "  ", "B", ""], ["A", "B"]),
    (["b", "a", "b"], ["b", "a"]),
    (42, 42),
])
def test_normalize_authors(raw, expected):
    assert R.normalize_authors(raw) == expected


def test_normalize_authors_rejects_non_string_entries():
    with pytest.raises(TypeError, match="Author entries must be strings"):
        R.normalize_authors(["A", 3])


def test_trim_and_lowercase():
    assert R.trim("  x  ") == "x"
    assert R.lowercase("  TECH  ") == "tech"


def test_normalize_timestamp_is_idempotent():
    once = R.normalize_timestamp("2024-06-01T12:00:00+01:00")
    assert once == "2024-06-01T11:00:00.000Z"
    assert R.normalize_timestamp(once) == once


def test_normalize_timestamp_accepts_fractional_seconds():
    assert R.normalize_timestamp("2024-01-01T10:00:00.5Z") == "2024-01-01T10:00:00.500Z"


@pytest.mark.parametrize("value", ["0001-01-01T00:00:00+01:00", "9999-12-31T23:59:59-01:00"])
def test_normalize_timestamp_out_of_range_raises_value_error(value):
    with pytest.raises(ValueError, match="Timestamp out of range"):
        R.normalize_timestamp(value)


# --- Validators --- #

@pytest.mark.parametrize("value,expected", [
    ("x", True),
    ("   ", False),
    ("", False),
    (None, False),
    (3, False),
])
def test_is_non_empty_text(value, expected):
    assert R.is_non_empty_text(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("A", True),
    (" ", False),
    (["A", "B"], True),
    ([], False),
    (["A", " "], False),
    (["A", 1], False),
    (7, False),
])
def test_is_valid_authors(value, expected):
    assert R.is_valid_authors(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("2024-01-01T00:00:00.000Z", True),
    ("2024-01-01", True),
    ("2024-01-01T10:00:00.5Z", True),
    ("0001-01-01T00:00:00+01:00", False),
    ("9999-12-31T23:59:59-01:00", False),
    ("yesterday", False),
    (20240101, False),
])
def test_is_timestamp(value, expected):
    assert R.is_timestamp(value) is expected


@pytest.mark.parametrize("value,expected", [
    ("1.0.0", True),
    ("invalid-version", False),
    ("1.0", False),
    (None, False),
])
def test_is_semver(value, expected):
    assert R.is_semver(value) is expected


def test_pattern_validator_full_match():
    check = R.pattern_validator(r"\d{3}")
    assert check("123")
    assert not check("1234")
    assert not check(123)


# --- Inference --- #

@pytest.mark.parametrize("context,expected", [
    ({"category": "AI-Research", "tags": ["ml"]}, "ai-research"),
    ({"tags": ["Machine-Learning", "ai"]}, "machine-learning"),
    ({"category": "", "tags": []}, "general"),
    ({}, "general"),
])
def test_infer_zone_fallback_chain(context, expected):
    assert R.infer_zone(context) == expected


# --- Registries --- #

def test_lookup_resolves_case_insensitively():
    assert R.lookup(R.NORMALIZERS, " Trim ", "normalizer") is R.trim
    assert R.lookup(R.VALIDATORS, None, "validator") is None


def test_lookup_unknown_name_raises():
    with pytest.raises(ValueError, match="Unknown inferrer 'mood'"):
        R.lookup(R.INFERRERS, "mood", "inferrer")


def test_now_factory_produces_timestamp():
    assert R.is_timestamp(R.DEFAULT_FACTORIES["now"]())
