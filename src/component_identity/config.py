"""Configuration loading and management for component identity resolution.

Configuration sources are merged in priority order:
    1. Defaults (defined in ResolverConfig)
    2. Global config (~/.component-identity.toml)
    3. Project config (./component-identity.toml)
    4. Explicit config file
    5. Environment variables (COMPONENT_IDENTITY_* prefix)
    6. Keyword overrides

Example:
    >>> config = load_config(verbose=True, thread_safe=False)
    >>> config.verbosity
    'verbose'
    >>> config.thread_safe
    False
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ConfigurationError, InvalidConfigError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "COMPONENT_IDENTITY_"
GLOBAL_CONFIG_NAME = ".component-identity.toml"
PROJECT_CONFIG_NAME = "component-identity.toml"


@dataclass(frozen=True)
class ResolverConfig:
    """Configuration for a resolver run and its component database.

    Attributes:
        Report keys:
            key_separator: Delimiter between the project key and the component part
            path_separator: Delimiter between path segments inside the component part

        Concurrency:
            thread_safe: Serialize cache check-and-store so concurrent workers
                never mint two uuids for the same key

        Storage:
            db_dirname: Directory (under the project root) holding the database
            db_filename: SQLite file name inside ``db_dirname``

        Output control:
            verbosity: Logging verbosity level
    """

    key_separator: str = ":"
    path_separator: str = "/"

    thread_safe: bool = True

    db_dirname: str = ".component-identity"
    db_filename: str = "components.db"

    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.key_separator:
            raise InvalidConfigError("key_separator", self.key_separator, "must not be empty")
        if not self.path_separator:
            raise InvalidConfigError("path_separator", self.path_separator, "must not be empty")
        if self.key_separator == self.path_separator:
            raise InvalidConfigError(
                "path_separator", self.path_separator, "must differ from key_separator"
            )

        if not self.db_dirname:
            raise InvalidConfigError("db_dirname", self.db_dirname, "must not be empty")
        if not self.db_filename:
            raise InvalidConfigError("db_filename", self.db_filename, "must not be empty")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError(
                "verbosity", self.verbosity, "expected quiet, normal or verbose"
            )


DEFAULT_CONFIG = ResolverConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> ResolverConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides; ``verbose``/``quiet`` booleans are
            translated to ``verbosity``

    Returns:
        Validated ResolverConfig instance

    Raises:
        ConfigurationError: If a config file is missing or cannot be parsed
        InvalidConfigError: If a value is out of range or of the wrong type
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        merged.update(_read_config_file(global_config, "global"))

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        merged.update(_read_config_file(project_config, "project"))

    if config_file is not None:
        if not config_file.exists():
            raise ConfigurationError(f"Config file not found: {config_file}")
        merged.update(_read_config_file(config_file, "explicit"))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return ResolverConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ConfigurationError(f"Invalid configuration: {e}")


def _read_config_file(path: Path, kind: str) -> dict:
    try:
        return _load_toml_file(path)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(f"Invalid {kind} config '{path}': {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from COMPONENT_IDENTITY_* environment variables.

    Supported environment variables:
        COMPONENT_IDENTITY_KEY_SEPARATOR: str
        COMPONENT_IDENTITY_PATH_SEPARATOR: str
        COMPONENT_IDENTITY_THREAD_SAFE: bool (true/false/1/0)
        COMPONENT_IDENTITY_DB_DIRNAME: str
        COMPONENT_IDENTITY_DB_FILENAME: str
        COMPONENT_IDENTITY_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(ResolverConfig)

    result: dict[str, Any] = {}

    for field_name in ResolverConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(field_name, env_value, f"{env_key}: {e}")
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        ConfigurationError: If no TOML parser is available
        Exception: If TOML parsing fails
    """
    try:
        # Python 3.11+ has tomllib in stdlib
        import tomllib
    except ModuleNotFoundError:
        try:
            import tomli as tomllib  # type: ignore
        except ImportError:
            raise ConfigurationError(
                "TOML support requires Python 3.11+ or 'tomli' package. "
                "Install with: pip install tomli"
            )

    with open(path, "rb") as f:
        return tomllib.load(f)
