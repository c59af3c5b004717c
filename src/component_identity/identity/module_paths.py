"""Module path maps supplied by the analysis report metadata."""

import json
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from ..exceptions import ConfigurationError, InvalidConfigError

METADATA_SECTION = "modules_project_relative_path_by_key"


def module_paths_from_metadata(metadata: Mapping[str, Any]) -> dict[str, str]:
    """Return the module key -> project-relative path map of a report.

    Reports produced without modules have no such section; that yields an
    empty map.

    Raises:
        InvalidConfigError: If the section or one of its entries is malformed
    """
    section = metadata.get(METADATA_SECTION)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise InvalidConfigError(METADATA_SECTION, section, "expected a key -> path mapping")

    module_paths: dict[str, str] = {}
    for key, path in section.items():
        if not isinstance(key, str) or not key:
            raise InvalidConfigError(METADATA_SECTION, key, "module keys must be non-empty strings")
        if not isinstance(path, str):
            raise InvalidConfigError(key, path, "module paths must be strings")
        module_paths[key] = path
    return module_paths


def load_module_paths(path: Path) -> dict[str, str]:
    """Read the module path map from a JSON report metadata file.

    Raises:
        ConfigurationError: If the file is missing or not valid JSON
        InvalidConfigError: If the map is malformed
    """
    try:
        with open(path, encoding="utf-8") as f:
            metadata = json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Report metadata not found: {path}")
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid report metadata '{path}': {e}")

    if not isinstance(metadata, dict):
        raise ConfigurationError(f"Invalid report metadata '{path}': expected a JSON object")
    return module_paths_from_metadata(metadata)
