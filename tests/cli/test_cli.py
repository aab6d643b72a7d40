#!/usr/bin/env python3
import copy
import json
from pathlib import Path

import pytest

from docmeta.cli import __main__ as cli
from docmeta.core.app_context import build_context
from docmeta.core.config import DEFAULT_CONFIG


@pytest.fixture(autouse=True)
def _isolated_context(monkeypatch):
    """Run every command against the default schema and built-in config."""
    ctx = build_context(config=copy.deepcopy(DEFAULT_CONFIG), schema_roots=[])
    monkeypatch.setattr(cli, "get_context", lambda: ctx)
    return ctx


def _write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def records_file(tmp_path: Path) -> Path:
    return _write_json(tmp_path / "records.json", [
        {"title": "A", "author": ["Jane", "John"], "zone": "tech", "version": "1.0.0"},
        {"title": "B", "author": "Jane", "zone": "finance", "version": "1.0.0"},
        {"title": "A", "author": ["Jane", "John"], "zone": "legal", "version": "1.0.0"},
    ])


# --- General --- #

def test_no_command_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage: docmeta" in capsys.readouterr().out


# --- create --- #

def test_create_prints_record(tmp_path: Path, capsys):
    data = _write_json(tmp_path / "in.json", {"title": " Report ", "author": ["A", "A"]})
    ctx_file = _write_json(tmp_path / "ctx.json", {"category": "Research"})

    assert cli.main(["create", "-i", str(data), "-c", str(ctx_file)]) == 0
    captured = capsys.readouterr()
    record = json.loads(captured.out)
    assert record["title"] == "Report"
    assert record["author"] == ["A"]
    assert record["zone"] == "research"
    assert "warning: zone: Value inferred from context" in captured.err


def test_create_without_input_uses_defaults(capsys):
    assert cli.main(["create", "--compact"]) == 0
    out = capsys.readouterr().out
    assert "\n" not in out.strip()
    assert json.loads(out)["title"] == "Untitled Document"


def test_create_writes_out_file(tmp_path: Path):
    out = tmp_path / "record.json"
    assert cli.main(["create", "-o", str(out)]) == 0
    assert json.loads(out.read_text(encoding="utf-8"))["zone"] == "general"


def test_create_rejects_non_object_input(tmp_path: Path, capsys):
    data = _write_json(tmp_path / "in.json", ["not", "an", "object"])
    assert cli.main(["create", "-i", str(data)]) == 1
    assert "must be JSON objects" in capsys.readouterr().err


def test_create_reports_unreadable_input(tmp_path: Path, capsys):
    assert cli.main(["create", "-i", str(tmp_path / "missing.json")]) == 1
    assert "Failed to read input" in capsys.readouterr().err


# --- validate --- #

def test_validate_summary(records_file: Path, tmp_path: Path, capsys):
    bad = _write_json(tmp_path / "bad.json", [{"title": "x", "author": "A", "zone": "z", "version": "nope"}])
    assert cli.main(["validate", str(records_file), str(bad)]) == 1
    out = capsys.readouterr().out
    assert f"{bad}[0]: Validation Failed" in out
    assert "  - version: Custom validation failed" in out
    assert "Validation complete: 3/4 passed." in out


def test_validate_all_pass(records_file: Path, capsys):
    assert cli.main(["validate", str(records_file)]) == 0
    assert "Validation complete: 3/3 passed." in capsys.readouterr().out


def test_validate_non_array_file(tmp_path: Path, capsys):
    bad = _write_json(tmp_path / "obj.json", {"title": "x"})
    assert cli.main(["validate", str(bad)]) == 1
    assert "must contain an array" in capsys.readouterr().out


# --- normalize / dedupe --- #

def test_normalize_outputs_normalized_records(tmp_path: Path, capsys):
    src = _write_json(tmp_path / "r.json", [{"title": " T ", "author": ["A", "A"], "zone": "TECH"}])
    assert cli.main(["normalize", str(src)]) == 0
    assert json.loads(capsys.readouterr().out) == [{"title": "T", "author": ["A"], "zone": "tech"}]


def test_dedupe_drops_repeats(records_file: Path, capsys):
    assert cli.main(["dedupe", str(records_file)]) == 0
    captured = capsys.readouterr()
    kept = json.loads(captured.out)
    assert [r["zone"] for r in kept] == ["tech", "finance"]
    assert "Removed 1 duplicate(s); 2 remain." in captured.err


def test_dedupe_reports_import_failure(tmp_path: Path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("{ nope", encoding="utf-8")
    assert cli.main(["dedupe", str(bad)]) == 1
    assert "Import failed" in capsys.readouterr().err


# --- search / zone --- #

def test_search_by_array_membership(records_file: Path, capsys):
    assert cli.main(["search", str(records_file), "author", "John"]) == 0
    assert [r["zone"] for r in json.loads(capsys.readouterr().out)] == ["tech", "legal"]


def test_search_no_match_returns_one(records_file: Path, capsys):
    assert cli.main(["search", str(records_file), "title", "Z"]) == 1
    assert json.loads(capsys.readouterr().out) == []


def test_zone_is_case_insensitive(records_file: Path, capsys):
    assert cli.main(["zone", str(records_file), "FINANCE"]) == 0
    assert [r["title"] for r in json.loads(capsys.readouterr().out)] == ["B"]


# --- schema / config --- #

def test_schema_show_lists_default_fields(capsys):
    assert cli.main(["schema", "show"]) == 0
    described = json.loads(capsys.readouterr().out)
    assert [f["name"] for f in described] == ["title", "author", "zone", "created_at", "updated_at", "version"]


def test_schema_show_with_extra_file(tmp_path: Path, capsys):
    extra = tmp_path / "extra.yaml"
    extra.write_text("fields:\n  - name: isbn\n    pattern: '\\d{13}'\n", encoding="utf-8")
    assert cli.main(["schema", "show", "--schema-file", str(extra)]) == 0
    assert json.loads(capsys.readouterr().out)[-1]["name"] == "isbn"


def test_schema_validate(tmp_path: Path, capsys):
    good = _write_json(tmp_path / "good.json", {"fields": [{"name": "publisher", "validate": "non_empty"}]})
    assert cli.main(["schema", "validate", str(good)]) == 0
    assert "1 fields: publisher" in capsys.readouterr().out

    bad = _write_json(tmp_path / "bad.json", {"fields": [{"name": "x", "normalize": "shout"}]})
    assert cli.main(["schema", "validate", str(bad)]) == 1
    assert "Unknown normalizer" in capsys.readouterr().out


def test_schema_without_subcommand_prints_help(capsys):
    assert cli.main(["schema"]) == 1
    assert "usage:" in capsys.readouterr().out


def test_config_show(capsys):
    assert cli.main(["config", "show"]) == 0
    assert json.loads(capsys.readouterr().out)["logging"]["format"] == "text"
