"""Legacy key derivation.

Older reports nested components under module keys::

    project:module1:module2:src/Foo.java

Current reports flatten modules away and use paths relative to the project::

    project:module1_path/module2_path/src/Foo.java

Given the current key and the report's module path map (module key ->
project-relative module path), :func:`derive_legacy_key` finds the deepest
module whose path is an exact segment prefix of the key and rewrites the key
as that module's key plus the remaining module-relative path.

Derivation is purely syntactic; it never touches the store.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from ..exceptions import AmbiguousComponentError
from ..keys import (
    KEY_SEPARATOR,
    PATH_SEPARATOR,
    has_empty_segment,
    is_segment_prefix,
    relative_part,
    split_path,
)


@dataclass(frozen=True)
class LegacyKey:
    """Lookup candidate in the retired module hierarchy.

    Attributes:
        module_key:     Key of the module that owned the component
        relative_path:  Path relative to that module, or ``None`` when the
                        component is the module itself
    """

    module_key: str
    relative_path: Optional[str] = None
    key_separator: str = KEY_SEPARATOR

    @property
    def key(self) -> str:
        if self.relative_path is None:
            return self.module_key
        return f"{self.module_key}{self.key_separator}{self.relative_path}"

    @property
    def is_module(self) -> bool:
        return self.relative_path is None


def derive_legacy_key(
    report_key: str,
    module_paths: Mapping[str, str],
    root_key: str,
    key_separator: str = KEY_SEPARATOR,
    path_separator: str = PATH_SEPARATOR,
) -> Optional[LegacyKey]:
    """Return the legacy form of ``report_key``, or ``None``.

    ``None`` means no module substitution applies: the key is the root key,
    belongs to another project, has empty path segments (``module1_path/``)
    or is not below any module of ``module_paths``. Entries for the root key
    and entries with an empty path are ignored.

    Raises:
        AmbiguousComponentError: If two modules share the matched path.
    """
    if report_key == root_key:
        return None

    relative = relative_part(root_key, report_key, key_separator)
    if relative is None or has_empty_segment(relative, path_separator):
        return None

    segments = split_path(relative, path_separator)

    best_depth = 0
    best_keys: list[str] = []
    for module_key, module_path in module_paths.items():
        if module_key == root_key or not module_path:
            continue
        module_segments = split_path(module_path, path_separator)
        if not is_segment_prefix(module_segments, segments):
            continue
        depth = len(module_segments)
        if depth > best_depth:
            best_depth = depth
            best_keys = [module_key]
        elif depth == best_depth:
            best_keys.append(module_key)

    if not best_keys:
        return None
    if len(best_keys) > 1:
        raise AmbiguousComponentError(
            report_key, sorted(best_keys), reason="modules share the same path"
        )

    remainder = segments[best_depth:]
    return LegacyKey(
        module_key=best_keys[0],
        relative_path=path_separator.join(remainder) if remainder else None,
        key_separator=key_separator,
    )


def is_migration_active(module_paths: Mapping[str, str], root_key: str) -> bool:
    """True when at least one non-root module has a path to substitute."""
    return any(path and key != root_key for key, path in module_paths.items())
