"""
Component Identity - stable uuids for analysis report components

Maps the report keys of an analysis (project, modules, directories, files) to
the persistent uuids used by storage, history and differential comparisons,
migrating components stored under the retired module key format.
"""

__version__ = "0.1.0"

from .api import open_resolver
from .config import ResolverConfig, load_config
from .identity import ComponentUuidResolver, LegacyKey, derive_legacy_key
from .persistence import ComponentDB, InMemoryComponentStore, SqliteComponentStore

__all__ = [
    "open_resolver",  # Main entry point
    "ComponentUuidResolver",
    "LegacyKey",
    "derive_legacy_key",
    "ComponentDB",
    "SqliteComponentStore",
    "InMemoryComponentStore",
    "ResolverConfig",
    "load_config",
]
