"""Report key -> component uuid resolution with legacy module key migration."""

from .cache import IdentifierCache
from .generator import new_uuid
from .legacy import LegacyKey, derive_legacy_key, is_migration_active
from .lookup import ComponentLookup
from .module_paths import load_module_paths, module_paths_from_metadata
from .resolver import ComponentUuidResolver

__all__ = [
    "ComponentUuidResolver",
    "ComponentLookup",
    "IdentifierCache",
    "LegacyKey",
    "derive_legacy_key",
    "is_migration_active",
    "new_uuid",
    "load_module_paths",
    "module_paths_from_metadata",
]
