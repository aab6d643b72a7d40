#!/usr/bin/env python3
"""
Purpose:
    Implements the MetadataManager: an ordered, in-memory collection of
    processed records built on top of a MetadataProcessor. Supports adding,
    updating, deduplicating, searching, and JSON export/import.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Iterator, List, Mapping, Optional, Tuple

from docmeta.core.constants import PRETTY_JSON_INDENT
from docmeta.core.exceptions import InvalidIndexError, MetadataValidationError
from docmeta.core.processor import MetadataProcessor, Record
from docmeta.core.utils import utc_now_iso

logger = logging.getLogger(__name__)


class MetadataManager:
    """
    Stateful store of records addressed by position.

    Insertion order is preserved and duplicates are kept until
    `deduplicate()` is called. Not thread-safe: callers sharing a manager
    across threads must guard it with their own lock.
    """

    def __init__(self, processor: Optional[MetadataProcessor] = None):
        self.processor = processor if processor is not None else MetadataProcessor()
        self._store: List[Record] = []

    # --- Mutation --- #

    def add_metadata(self, data: Optional[Mapping[str, Any]] = None,
                     context: Optional[Mapping[str, Any]] = None) -> Record:
        """
        Create a record from `data` (and `context`), validate it, and append it.

        Raises:
            MetadataValidationError: if the created record is still invalid;
                the store is left unchanged.
        """
        record = self.processor.create_metadata(data, context)
        result = self.processor.validate(record)
        if not result.valid:
            logger.error("Metadata validation failed: %s", result.to_dict()["errors"])
            raise MetadataValidationError("Invalid metadata", result)

        self._store.append(record)
        logger.info("Added metadata entry %d (%r)", len(self._store) - 1, record.get("title"))
        return record

    def update_metadata(self, index: int, updates: Mapping[str, Any]) -> Record:
        """
        Merge `updates` onto the record at `index`, refresh `updated_at`,
        then normalize and validate. The stored record is only replaced once
        validation passes.

        Raises:
            InvalidIndexError: if `index` is outside the store.
            MetadataValidationError: if the merged record is invalid.
        """
        existing = self._at(index)
        merged = {**existing, **updates}
        if "updated_at" in self.processor.schema:
            merged["updated_at"] = utc_now_iso()

        normalized = self.processor.normalize(merged)
        result = self.processor.validate(normalized)
        if not result.valid:
            raise MetadataValidationError("Update validation failed", result)

        self._store[index] = normalized
        logger.info("Updated metadata entry %d", index)
        return normalized

    def deduplicate(self) -> int:
        """
        Drop records repeating an earlier record's title and author.
        Keeps the first occurrence in original order; returns the number removed.
        """
        seen = set()
        kept: List[Record] = []
        for record in self._store:
            if not isinstance(record, Mapping):
                kept.append(record)
                continue
            key = self._dedup_key(record)
            if key in seen:
                continue
            seen.add(key)
            kept.append(record)

        removed = len(self._store) - len(kept)
        self._store = kept
        logger.info("Deduplicated metadata: removed %d of %d entries", removed, removed + len(kept))
        return removed

    def clear(self) -> None:
        self._store = []

    # --- Serialization --- #

    def export_json(self, pretty: bool = True) -> str:
        """Serialize the whole store as a JSON array (2-space indent when `pretty`)."""
        if pretty:
            return json.dumps(self._store, indent=PRETTY_JSON_INDENT, ensure_ascii=False)
        return json.dumps(self._store, separators=(",", ":"), ensure_ascii=False)

    def import_json(self, text: str) -> bool:
        """
        Replace the store with the records in a JSON array string.

        Entries that fail validation are logged but still imported. Returns
        False (store untouched) if the text is not JSON or not an array.
        """
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error("Import failed: %s", e)
            return False

        if not isinstance(data, list):
            logger.error("Import failed: JSON must contain an array of metadata objects")
            return False

        for i, item in enumerate(data):
            if not isinstance(item, Mapping):
                logger.warning("Invalid metadata entry %d: expected an object, got %s", i, type(item).__name__)
                continue
            result = self.processor.validate(item)
            if not result.valid:
                logger.warning("Invalid metadata entry %d: %s", i, result.to_dict()["errors"])

        self._store = data
        logger.info("Imported %d metadata entries", len(data))
        return True

    # --- Queries --- #

    def get(self, index: int) -> Record:
        return self._at(index)

    def get_all_metadata(self) -> Tuple[Record, ...]:
        """Read-only view of the store, in insertion order."""
        return tuple(self._store)

    def search(self, field: str, value: Any) -> List[Record]:
        """
        Records whose `field` equals `value`, or whose `field` is a list
        containing `value`.
        """
        matches = []
        for record in self._store:
            if not isinstance(record, Mapping):
                continue
            current = record.get(field)
            if isinstance(current, list):
                if value in current:
                    matches.append(record)
            elif field in record and current == value:
                matches.append(record)
        return matches

    def get_by_zone(self, zone: str) -> List[Record]:
        return self.search("zone", zone.lower())

    def __len__(self) -> int:
        return len(self._store)

    def __iter__(self) -> Iterator[Record]:
        return iter(tuple(self._store))

    # --- Internals --- #

    def _at(self, index: int) -> Record:
        if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(self._store):
            raise InvalidIndexError(index, len(self._store))
        return self._store[index]

    @staticmethod
    def _dedup_key(record: Mapping[str, Any]) -> Tuple[str, str]:
        return str(record.get("title")), json.dumps(record.get("author"), ensure_ascii=False)
