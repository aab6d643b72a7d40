#!/usr/bin/env python3
"""
Record commands: create, validate, normalize, dedupe, search, zone.

All file and stdin/stdout handling lives here; the core engine only sees
in-memory mappings and JSON strings.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from docmeta.core.app_context import AppContext
from docmeta.core.constants import DEFAULT_TEXT_ENCODING, PRETTY_JSON_INDENT
from docmeta.core.exceptions import MetadataValidationError
from docmeta.core.manager import MetadataManager


def register(subparsers):
    cp = subparsers.add_parser("create", help="Create one metadata record from JSON input.")
    cp.add_argument("--input", "-i", default=None, help="JSON object file ('-' for stdin). Defaults to {}.")
    cp.add_argument("--context", "-c", default=None, help="JSON object file used for inference.")
    _add_output_args(cp)
    cp.set_defaults(func=create)

    vp = subparsers.add_parser("validate", help="Validate records in JSON array files.")
    vp.add_argument("files", nargs="+", help="JSON files holding an array of records.")
    vp.set_defaults(func=validate)

    np = subparsers.add_parser("normalize", help="Normalize every record of a JSON array file.")
    np.add_argument("file", help="JSON file holding an array of records ('-' for stdin).")
    _add_output_args(np)
    np.set_defaults(func=normalize)

    dp = subparsers.add_parser("dedupe", help="Drop records sharing title and author.")
    dp.add_argument("file", help="JSON file holding an array of records ('-' for stdin).")
    _add_output_args(dp)
    dp.set_defaults(func=dedupe)

    sp = subparsers.add_parser("search", help="Find records where FIELD equals or contains VALUE.")
    sp.add_argument("file", help="JSON file holding an array of records ('-' for stdin).")
    sp.add_argument("field")
    sp.add_argument("value")
    _add_output_args(sp)
    sp.set_defaults(func=search)

    zp = subparsers.add_parser("zone", help="Find records in a zone (case-insensitive).")
    zp.add_argument("file", help="JSON file holding an array of records ('-' for stdin).")
    zp.add_argument("zone")
    _add_output_args(zp)
    zp.set_defaults(func=zone)


def _add_output_args(parser) -> None:
    parser.add_argument("--out", "-o", default=None, help="Write output to this file instead of stdout.")
    parser.add_argument("--compact", action="store_true", help="Emit compact JSON.")


# --- Commands --- #

def create(args, ctx: AppContext) -> int:
    try:
        data = _read_json(args.input) if args.input else {}
        context = _read_json(args.context) if args.context else None
    except (OSError, ValueError) as e:
        print(f"Failed to read input: {e}", file=sys.stderr)
        return 1
    if not isinstance(data, dict) or (context is not None and not isinstance(context, dict)):
        print("Input and context must be JSON objects.", file=sys.stderr)
        return 1

    manager = ctx.new_manager()
    try:
        record = manager.add_metadata(data, context)
    except MetadataValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        _print_issues(manager)

    _emit(_dumps(record, _pretty(args, ctx)), args.out)
    return 0


def validate(args, ctx: AppContext) -> int:
    processor = ctx.new_processor()
    total = passed = 0
    for path in args.files:
        records = _load_records(path)
        if records is None:
            total += 1
            continue
        for i, record in enumerate(records):
            total += 1
            if not isinstance(record, dict):
                print(f"{path}[{i}]: not a JSON object")
                continue
            result = processor.validate(record)
            if result.valid:
                passed += 1
                continue
            print(f"{path}[{i}]: Validation Failed")
            for issue in result:
                print(f"  - {issue.field}: {issue.message}")

    print(f"\nValidation complete: {passed}/{total} passed.")
    return 0 if passed == total else 1


def normalize(args, ctx: AppContext) -> int:
    manager = _manager_from_file(args.file, ctx)
    if manager is None:
        return 1
    processor = manager.processor
    normalized = [processor.normalize(r) if isinstance(r, dict) else r for r in manager.get_all_metadata()]
    _emit(_dumps(normalized, _pretty(args, ctx)), args.out)
    return 0


def dedupe(args, ctx: AppContext) -> int:
    manager = _manager_from_file(args.file, ctx)
    if manager is None:
        return 1
    removed = manager.deduplicate()
    print(f"Removed {removed} duplicate(s); {len(manager)} remain.", file=sys.stderr)
    _emit(manager.export_json(pretty=_pretty(args, ctx)), args.out)
    return 0


def search(args, ctx: AppContext) -> int:
    manager = _manager_from_file(args.file, ctx)
    if manager is None:
        return 1
    matches = manager.search(args.field, args.value)
    _emit(_dumps(matches, _pretty(args, ctx)), args.out)
    return 0 if matches else 1


def zone(args, ctx: AppContext) -> int:
    manager = _manager_from_file(args.file, ctx)
    if manager is None:
        return 1
    matches = manager.get_by_zone(args.zone)
    _emit(_dumps(matches, _pretty(args, ctx)), args.out)
    return 0 if matches else 1


# --- Helpers --- #

def _read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding=DEFAULT_TEXT_ENCODING)


def _read_json(path: str) -> Any:
    return json.loads(_read_text(path))


def _load_records(path: str) -> Optional[List[Any]]:
    """Read a JSON array of records, reporting problems; None on failure."""
    try:
        data = _read_json(path)
    except (OSError, ValueError) as e:
        print(f"{path}: Failed to read JSON ({e})")
        return None
    if not isinstance(data, list):
        print(f"{path}: JSON must contain an array of metadata objects")
        return None
    return data


def _manager_from_file(path: str, ctx: AppContext) -> Optional[MetadataManager]:
    try:
        text = _read_text(path)
    except OSError as e:
        print(f"{path}: {e}", file=sys.stderr)
        return None
    manager = ctx.new_manager()
    if not manager.import_json(text):
        print(f"{path}: Import failed (expected a JSON array of records)", file=sys.stderr)
        return None
    return manager


def _print_issues(manager: MetadataManager) -> None:
    for w in manager.processor.get_warnings():
        print(f"warning: {w['field']}: {w['message']}", file=sys.stderr)
    for e in manager.processor.get_errors():
        print(f"error: {e['field']}: {e['error']}", file=sys.stderr)


def _pretty(args, ctx: AppContext) -> bool:
    if args.compact:
        return False
    return bool(ctx.config.get("export", {}).get("pretty", True))


def _dumps(payload: Any, pretty: bool) -> str:
    if pretty:
        return json.dumps(payload, indent=PRETTY_JSON_INDENT, ensure_ascii=False)
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def _emit(text: str, out: Optional[str]) -> None:
    if out:
        Path(out).write_text(text + "\n", encoding=DEFAULT_TEXT_ENCODING)
    else:
        print(text)
