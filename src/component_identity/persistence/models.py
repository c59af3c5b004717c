"""Stored component rows.

Rows keep the layout of the retired module hierarchy:

    Project (root)                    module_uuid_path  .P.
        ├── Module                    module_uuid_path  .P.M1.
        │       ├── Module            module_uuid_path  .P.M1.M2.
        │       │       └── File      module_uuid_path  .P.M1.M2.   path relative to M2
        │       └── Directory         module_uuid_path  .P.M1.      path relative to M1
        └── File                      module_uuid_path  .P.         path relative to P

``module_uuid_path`` is the dot-delimited chain from the project uuid down to
the owning module. Module rows include themselves at the end of the chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

UUID_PATH_SEPARATOR = "."


class Scope(Enum):
    """Granularity of a stored component."""

    PROJECT = "PRJ"  # project root and legacy modules
    DIRECTORY = "DIR"
    FILE = "FIL"


class Qualifier(Enum):
    """Kind of a stored component, finer than its scope."""

    PROJECT = "TRK"
    MODULE = "BRC"
    DIRECTORY = "DIR"
    FILE = "FIL"
    UNIT_TEST_FILE = "UTS"


def format_uuid_path(uuids: list[str]) -> str:
    """``["P", "M1"]`` -> ``".P.M1."``."""
    return UUID_PATH_SEPARATOR + "".join(u + UUID_PATH_SEPARATOR for u in uuids)


def parse_uuid_path(uuid_path: str) -> list[str]:
    """``".P.M1."`` -> ``["P", "M1"]``."""
    return [u for u in uuid_path.split(UUID_PATH_SEPARATOR) if u]


@dataclass(frozen=True)
class Component:
    """A persisted component: project, module, directory or file."""

    uuid: str
    key: str
    project_uuid: str
    module_uuid_path: str
    scope: Scope
    qualifier: Qualifier
    module_uuid: Optional[str] = None  # None for the project root
    path: Optional[str] = None  # None for projects and modules
    enabled: bool = True

    @property
    def is_root(self) -> bool:
        return self.uuid == self.project_uuid

    @property
    def is_module(self) -> bool:
        """True for legacy modules (project-scoped rows below the root)."""
        return self.scope is Scope.PROJECT and not self.is_root

    @property
    def module_uuid_chain(self) -> list[str]:
        """Module uuids below the project root, outermost first."""
        return parse_uuid_path(self.module_uuid_path)[1:]
