"""Persistent lookups behind a resolver.

Four ways to find an already persisted component for a report key:

    by key          the stored key equals the report key
    current key     as by key, but only rows owned by the root whose key is
                    in the current format, i.e. the project key plus the
                    row path (components already migrated by earlier runs)
    by legacy key   the module named by a derived LegacyKey, or the
                    directory/file at the LegacyKey's path inside it,
                    addressed by the module's stored uuid chain
    at root         the directory/file at the key's path directly under the
                    project root (root components of a migrating project)

Path lookups match exactly one row or miss; several rows is a data integrity
problem reported as :class:`AmbiguousComponentError`.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..exceptions import AmbiguousComponentError
from ..keys import KEY_SEPARATOR, create_effective_key
from ..logging_config import get_logger
from ..persistence.models import Component
from ..persistence.store import ComponentStore
from .legacy import LegacyKey

logger = get_logger(__name__)

_UNSET = object()


class ComponentLookup:
    """Read-only queries against the store, scoped to one project root."""

    def __init__(self, store: ComponentStore, root_key: str) -> None:
        self.store = store
        self.root_key = root_key
        self._root: object = _UNSET

    def root(self) -> Optional[Component]:
        """The persisted project root, looked up once."""
        if self._root is _UNSET:
            self._root = self.store.find_by_project_and_key(self.root_key, self.root_key)
            if self._root is None:
                logger.debug("Project %s has no persisted root", self.root_key)
        return self._root  # type: ignore[return-value]

    def find_by_key(self, key: str) -> Optional[Component]:
        if key == self.root_key:
            return self.root()
        return self.store.find_by_project_and_key(self.root_key, key)

    def find_by_current_key(
        self, key: str, key_separator: str = KEY_SEPARATOR
    ) -> Optional[Component]:
        component = self.find_by_key(key)
        if component is None or component.is_root or component.is_module:
            return None
        if component.module_uuid_chain or not component.path:
            return None
        if create_effective_key(self.root_key, component.path, key_separator) != key:
            return None
        return component

    def find_by_legacy_key(self, report_key: str, legacy: LegacyKey) -> Optional[Component]:
        module = self.store.find_by_project_and_key(self.root_key, legacy.module_key)
        if module is None or not module.is_module:
            return None
        if legacy.relative_path is None:
            return module

        matches = self.store.find_by_project_and_module_path(
            module.project_uuid, module.module_uuid_chain, legacy.relative_path
        )
        return _single(report_key, matches)

    def find_at_root(self, report_key: str, relative_path: str) -> Optional[Component]:
        root = self.root()
        if root is None:
            return None
        matches = self.store.find_by_project_and_module_path(root.uuid, (), relative_path)
        return _single(report_key, matches)


def _single(report_key: str, matches: Sequence[Component]) -> Optional[Component]:
    if not matches:
        return None
    if len(matches) > 1:
        uuids = [m.uuid for m in matches]
        logger.error("Legacy lookup for %s matched %d components: %s", report_key, len(uuids), uuids)
        raise AmbiguousComponentError(report_key, uuids)
    return matches[0]
