#!/usr/bin/env python3
"""
Core constants used across docmeta.

- Versioning: current processor version stamped into every record envelope.
- Reserved identifiers: keys that cannot be used as schema field names.
- File handling: supported schema file extensions and default text encoding.
- Regular expressions: compiled patterns used by validators and normalizers.
"""

import re
from typing import Final

# --- docmeta constants --- #

# Version written to `_metadata.processor_version` of each processed record
PROCESSOR_VERSION: Final[str] = "1.0.0"

# Key of the processing envelope attached to every record
ENVELOPE_KEY: Final[str] = "_metadata"

# Field names that are not allowed in schemas
RESERVED_FIELDNAMES: Final[frozenset[str]] = frozenset({ENVELOPE_KEY})

# Supported declarative schema file extensions
SUPPORTED_SCHEMA_EXT: Final[frozenset[str]] = frozenset({".json", ".yml", ".yaml"})

# Default text encoding
DEFAULT_TEXT_ENCODING: Final[str] = "utf-8"

# Indentation used by pretty JSON export
PRETTY_JSON_INDENT: Final[int] = 2

# --- Core field defaults --- #

DEFAULT_TITLE: Final[str] = "Untitled Document"
DEFAULT_AUTHOR: Final[str] = "Unknown Author"
DEFAULT_ZONE: Final[str] = "general"
DEFAULT_VERSION: Final[str] = "1.0.0"


# --- Regular Expressions --- #
# Matches strict SemVer strings (e.g., 1.2.3 only)
STRICT_SEMVER_RE: re.Pattern[str] = re.compile(r"^\d+\.\d+\.\d+$")

# Matches valid field names: leading letter, then letters/numbers/underscores
FIELDNAME_ALLOWED_RE: re.Pattern[str] = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")


# --- Runtime guard --- #
def validate_constants():
    """
    Ensure constants are valid at runtime.
    """
    for name, value in (("PROCESSOR_VERSION", PROCESSOR_VERSION), ("DEFAULT_VERSION", DEFAULT_VERSION)):
        if not STRICT_SEMVER_RE.fullmatch(value):
            raise RuntimeError(f"{name} must be strict semver (x.y.z), got {value!r}")

validate_constants()
