"""Report key -> component uuid resolution for one ingestion run.

Resolution order for a key seen for the first time in the run:

    1. Direct match on the stored key. For projects whose report still ships
       module paths (migration active) a stored row only matches when it is
       already in the current format: owned by the root, with the project key
       plus its path as key. Legacy module rows and keys containing a module
       key belong to whatever component now has the *migrated* key.
    2. Legacy match: derive the legacy key from the module path map and find
       the component through its module's stored uuid chain.
    3. Root match: the component at the key's path directly under the root,
       for root components and for modules never stored.
    4. Mint a new random uuid.

Whatever comes out is cached for the rest of the run and never changes, even
if the store changes underneath.

Usage:
    with ComponentDB(project_dir) as db:
        with ComponentUuidResolver(SqliteComponentStore(db.conn), "project",
                                   {"project:module1": "module1_path"}) as resolver:
            uuid = resolver.resolve("project:module1_path/src/Foo.java")
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..exceptions import InvalidReportKeyError, ResolverClosedError
from ..keys import has_empty_segment, relative_part
from ..logging_config import get_logger
from ..persistence.models import Component
from ..persistence.store import ComponentStore
from .cache import IdentifierCache
from .generator import UuidFactory, new_uuid
from .legacy import derive_legacy_key, is_migration_active
from .lookup import ComponentLookup

logger = get_logger(__name__)


class ComponentUuidResolver:
    """Resolves report keys of one project to stable component uuids.

    Attributes:
        root_key:      Key of the project root
        module_paths:  Module key -> project-relative path, from the report
        config:        Separators and thread-safety settings
    """

    def __init__(
        self,
        store: ComponentStore,
        root_key: str,
        module_paths: Optional[Mapping[str, str]] = None,
        config: Optional[ResolverConfig] = None,
        uuid_factory: Optional[UuidFactory] = None,
    ) -> None:
        _check_key(root_key)
        self.root_key = root_key
        self.module_paths: dict[str, str] = dict(module_paths or {})
        self.config = config or DEFAULT_CONFIG
        self._uuid_factory: UuidFactory = uuid_factory or new_uuid
        self._lookup = ComponentLookup(store, root_key)
        self._cache = IdentifierCache(thread_safe=self.config.thread_safe)
        self._migration_active = is_migration_active(self.module_paths, root_key)
        self._closed = False

        if self._migration_active:
            logger.info(
                "Project %s ships %d module paths, resolving legacy module keys",
                root_key,
                len(self.module_paths),
            )

    @property
    def migration_active(self) -> bool:
        return self._migration_active

    @property
    def resolved(self) -> dict[str, str]:
        """Copy of every key -> uuid resolved so far in this run."""
        return self._cache.snapshot()

    # ── resolution ────────────────────────────────────────────────

    def resolve(self, key: str) -> str:
        """Return the uuid of ``key``, resolving it on first use.

        Raises:
            InvalidReportKeyError: If ``key`` is not a non-empty string
            ResolverClosedError: If the run has ended
            AmbiguousComponentError: If the legacy lookup is ambiguous
            ComponentStoreError: If the store fails
        """
        _check_key(key)
        if self._closed:
            raise ResolverClosedError(self.root_key)
        return self._cache.get_or_create(key, self._resolve_uncached)

    get_or_create_for_key = resolve

    def _resolve_uncached(self, key: str) -> str:
        if key == self.root_key or not self._migration_active:
            component = self._lookup.find_by_key(key)
            how = "key"
        else:
            component, how = self._find_migrated(key)

        if component is not None:
            logger.debug("Resolved %s by %s to %s (%s)", key, how, component.uuid, component.key)
            return component.uuid

        uuid = self._uuid_factory()
        logger.debug("No persisted component for %s, generated %s", key, uuid)
        return uuid

    def _find_migrated(self, key: str) -> tuple[Optional[Component], str]:
        key_separator = self.config.key_separator
        path_separator = self.config.path_separator

        current = self._lookup.find_by_current_key(key, key_separator)
        if current is not None:
            return current, "key"

        legacy = derive_legacy_key(
            key, self.module_paths, self.root_key, key_separator, path_separator
        )
        if legacy is not None:
            component = self._lookup.find_by_legacy_key(key, legacy)
            if component is not None:
                return component, f"legacy key {legacy.key}"

        relative = relative_part(self.root_key, key, key_separator)
        if relative is None or has_empty_segment(relative, path_separator):
            return None, "nothing"
        return self._lookup.find_at_root(key, relative), "root path"

    # ── lifecycle ─────────────────────────────────────────────────

    def close(self) -> None:
        """End the run: drop the cache and refuse further resolutions."""
        if not self._closed:
            logger.debug("Resolver for %s closed after %d keys", self.root_key, len(self._cache))
        self._closed = True
        self._cache.clear()

    def __enter__(self) -> "ComponentUuidResolver":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def _check_key(key: object) -> None:
    if not isinstance(key, str):
        raise InvalidReportKeyError(key, "report keys must be strings")
    if not key:
        raise InvalidReportKeyError(key, "report keys must not be empty")
