#!/usr/bin/env python3

import json
from pathlib import Path

from docmeta.core.app_context import AppContext
from docmeta.core.exceptions import SchemaError
from docmeta.core.schema.schema import MetadataSchema


def register(subparsers):
    sp = subparsers.add_parser("schema", help="Schema utilities")
    sps = sp.add_subparsers(dest="schema_cmd")

    # default when user runs: `docmeta schema`
    def schema_default(args, ctx: AppContext) -> int:
        sp.print_help()
        return 1
    sp.set_defaults(func=schema_default)

    ssp = sps.add_parser("show", help="Show the effective schema as JSON")
    ssp.add_argument("--schema-file", action="append", default=None,
                     help="Extend the effective schema with this file (can be used multiple times).")
    ssp.set_defaults(func=show_schema)

    vsp = sps.add_parser("validate", help="Validate a declarative schema file")
    vsp.add_argument("file", help="Path to a .yml/.yaml/.json schema file")
    vsp.set_defaults(func=validate_schema)


def show_schema(args, ctx: AppContext) -> int:
    try:
        schema = extend_schema(ctx.schema, args.schema_file)
    except (OSError, ValueError) as e:
        print(f"Failed to load schema: {e}")
        return 1

    if ctx.schema_files:
        print("Loaded schema files:", ", ".join(str(p) for p in ctx.schema_files))
    print(json.dumps(schema.describe(), indent=2, default=str))
    return 0


def validate_schema(args, ctx: AppContext) -> int:
    p = Path(args.file)
    try:
        schema = MetadataSchema.from_file(p)
    except FileNotFoundError as e:
        print(str(e))
        return 1
    except SchemaError as e:
        print(f"Schema file invalid: {p}\n{e}")
        return 1
    except ValueError as e:
        print(str(e))
        return 1

    print(f"Valid schema file: {p} ({len(schema)} fields: {', '.join(schema.names())})")
    return 0


def extend_schema(schema: MetadataSchema, files) -> MetadataSchema:
    """Apply extra schema files (in order) on top of `schema`."""
    for f in files or []:
        schema = MetadataSchema.from_file(f, base=schema)
    return schema
