#!/usr/bin/env python3
"""
Purpose:
    Wires together the docmeta application context by merging configuration,
    building the effective schema (default schema extended by any schema
    files under the configured paths), and creating processors/managers
    bound to it. `get_context()` caches one context per process.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from docmeta.core.config import load_config
from docmeta.core.constants import PROCESSOR_VERSION, SUPPORTED_SCHEMA_EXT
from docmeta.core.manager import MetadataManager
from docmeta.core.processor import MetadataProcessor
from docmeta.core.schema.schema import DEFAULT_SCHEMA, MetadataSchema

logger = logging.getLogger(__name__)


# --- Data model --- #

@dataclass(frozen=True)
class AppContext:
    """Immutable container for configuration and the effective schema."""
    config: Dict[str, Any]
    schema: MetadataSchema
    schema_files: tuple[Path, ...] = ()

    @property
    def processor_version(self) -> str:
        return str(self.config.get("processor_version", PROCESSOR_VERSION))

    def new_processor(self) -> MetadataProcessor:
        return MetadataProcessor(self.schema, processor_version=self.processor_version)

    def new_manager(self) -> MetadataManager:
        return MetadataManager(self.new_processor())


# --- Factory --- #

def build_context(
    *,
    config: Optional[Dict[str, Any]] = None,
    schema_roots: Optional[Iterable[Path]] = None,
) -> AppContext:
    """
    Build an `AppContext`.

    Args:
        config:
            Pre-merged configuration. If omitted, `load_config()` is used.
        schema_roots:
            Optional override for schema search paths. Defaults to `config['schema_paths']`.

    Returns:
        AppContext: immutable bundle of config and schema.

    Raises:
        SchemaError: if any discovered schema file is invalid.
    """
    cfg = config if config is not None else load_config()

    roots = [Path(p) for p in (schema_roots if schema_roots is not None else cfg.get("schema_paths", []))]
    files = find_schema_files(roots)

    schema = DEFAULT_SCHEMA
    for path in files:
        schema = MetadataSchema.from_file(path, base=schema)
        logger.debug("Extended schema from %s", path)

    return AppContext(config=cfg, schema=schema, schema_files=tuple(files))


def find_schema_files(roots: Iterable[Path]) -> List[Path]:
    """Schema files under `roots` (files or directories), sorted and de-duplicated."""
    found: set[Path] = set()
    for root in roots:
        if root.is_file() and root.suffix.lower() in SUPPORTED_SCHEMA_EXT:
            found.add(root)
            continue
        if not root.is_dir():
            logger.debug("Schema root %s does not exist; skipping", root)
            continue
        for p in root.rglob("*"):
            if p.is_file() and p.suffix.lower() in SUPPORTED_SCHEMA_EXT:
                found.add(p)
    return sorted(found)


# --- Process-wide accessor --- #

_CTX: Optional[AppContext] = None


def get_context(*, force_reload: bool = False) -> AppContext:
    """Context built from `load_config()` on first use; rebuilt when `force_reload`."""
    global _CTX
    if _CTX is None or force_reload:
        _CTX = build_context()
    return _CTX
