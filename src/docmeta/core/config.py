#!/usr/bin/env python3
"""
docmeta configuration loader.
"""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Final, List

from docmeta.core.constants import PROCESSOR_VERSION
from docmeta.core.utils import merge_dicts, load_json_file

# --- Defaults & locations --- #

DEFAULT_CONFIG: Final[Dict[str, Any]] = {
    "schema_paths": [],
    "processor_version": PROCESSOR_VERSION,
    "export": {"pretty": True},
    "logging": {"level": "INFO", "format": "text"},
}

GLOBAL_CONFIG_PATH: Final[Path] = Path.home() / ".config" / "docmeta" / "config.json"

PROJECT_CONFIG_NAME: Final[str] = "docmeta.json"


# --- Public API --- #

def load_config() -> Dict[str, Any]:
    """
    Load docmeta configuration with layered precedence.

    Order:
        1. Built-in defaults
        2. Global config (~/.config/docmeta/config.json)
        3. Project config (./docmeta.json)
        4. Environment overrides:
           - DOCMETA_SCHEMA_PATHS (pathsep-separated list)
           - DOCMETA_LOG_LEVEL
           - DOCMETA_LOG_FORMAT

    Returns:
        A merged configuration dictionary.
    """
    # 1) start with defaults
    config = copy.deepcopy(DEFAULT_CONFIG)

    # 2) global config
    config = merge_dicts(config, load_json_file(GLOBAL_CONFIG_PATH))

    # 3) project config
    config = merge_dicts(config, load_json_file(Path.cwd() / PROJECT_CONFIG_NAME))

    # 4) environment overrides
    schema_paths_env = os.getenv("DOCMETA_SCHEMA_PATHS")
    if schema_paths_env:
        config["schema_paths"] = _split_paths_env(schema_paths_env)

    log_level_env = os.getenv("DOCMETA_LOG_LEVEL")
    if log_level_env:
        config.setdefault("logging", {})["level"] = log_level_env

    log_format_env = os.getenv("DOCMETA_LOG_FORMAT")
    if log_format_env:
        config.setdefault("logging", {})["format"] = log_format_env.strip().lower()

    return config


# --- Internals --- #

def _split_paths_env(value: str) -> List[str]:
    """
    Split a path-list env var on os.pathsep, trimming empties and expanding '~'.

    Example:
        "a:~/b:/tmp" on Unix  -> ["a", "/home/user/b", "/tmp"] (no resolve here)
    """
    parts = [p.strip() for p in value.split(os.pathsep)]
    return [str(Path(p).expanduser()) for p in parts if p]
