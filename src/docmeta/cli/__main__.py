#!/usr/bin/env python3

import argparse
import sys

from docmeta.core.app_context import get_context
from docmeta.core.log import setup_logging
from docmeta.cli import config, records, schema


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="docmeta", description="Document metadata toolkit")
    parser.add_argument("--log-level", default=None, help="Override the configured log level.")
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands (they should accept ctx)
    records.register(subparsers)
    schema.register(subparsers)
    config.register(subparsers)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    ctx = get_context()  # built once
    log_cfg = ctx.config.get("logging", {})
    setup_logging(args.log_level or log_cfg.get("level"), fmt=log_cfg.get("format", "text"))
    return args.func(args, ctx)


if __name__ == "__main__":
    sys.exit(main())
