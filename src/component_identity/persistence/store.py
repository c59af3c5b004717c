"""Read access to persisted components.

Resolvers only need two queries, captured by :class:`ComponentStore`:

    - by key:          the component of a project whose key equals ``key``
    - by module path:  the directories/files owned by the module at the end
                       of a module uuid chain, at a relative path

Both include disabled rows: a component removed from an earlier analysis
keeps its identity when it comes back.

Usage:
    from component_identity.persistence import ComponentDB, SqliteComponentStore

    with ComponentDB("/path/to/project") as db:
        store = SqliteComponentStore(db.conn)
        root = store.find_by_project_and_key("project", "project")
"""

from __future__ import annotations

import sqlite3
from typing import Iterable, Optional, Protocol, Sequence

from ..exceptions import ComponentStoreError
from .models import Component, Qualifier, Scope, format_uuid_path


class ComponentStore(Protocol):
    """The durable component store as seen by a resolver (read-only)."""

    def find_by_project_and_key(self, project_key: str, key: str) -> Optional[Component]:
        ...

    def find_by_project_and_module_path(
        self,
        project_uuid: str,
        module_uuid_chain: Sequence[str],
        relative_path: str,
    ) -> list[Component]:
        ...


class SqliteComponentStore:
    """:class:`ComponentStore` over a ``ComponentDB`` connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def find_by_project_and_key(self, project_key: str, key: str) -> Optional[Component]:
        try:
            row = self.conn.execute(
                """
                SELECT c.* FROM components c
                JOIN components p ON p.uuid = c.project_uuid
                WHERE p.kee = ? AND p.uuid = p.project_uuid AND c.kee = ?
                """,
                (project_key, key),
            ).fetchone()
        except sqlite3.Error as e:
            raise ComponentStoreError("find_by_project_and_key", e) from e

        if row is None:
            return None
        return _row_to_component(row)

    def find_by_project_and_module_path(
        self,
        project_uuid: str,
        module_uuid_chain: Sequence[str],
        relative_path: str,
    ) -> list[Component]:
        module_uuid_path = format_uuid_path([project_uuid, *module_uuid_chain])
        try:
            rows = self.conn.execute(
                """
                SELECT * FROM components
                WHERE project_uuid = ? AND module_uuid_path = ? AND path = ?
                  AND scope != ?
                ORDER BY uuid
                """,
                (project_uuid, module_uuid_path, relative_path, Scope.PROJECT.value),
            ).fetchall()
        except sqlite3.Error as e:
            raise ComponentStoreError("find_by_project_and_module_path", e) from e

        return [_row_to_component(r) for r in rows]

    def list_components(self, project_uuid: Optional[str] = None) -> list[Component]:
        """Every stored row, or every row of one project, ordered by key."""
        try:
            if project_uuid is None:
                rows = self.conn.execute("SELECT * FROM components ORDER BY kee").fetchall()
            else:
                rows = self.conn.execute(
                    "SELECT * FROM components WHERE project_uuid = ? ORDER BY kee",
                    (project_uuid,),
                ).fetchall()
        except sqlite3.Error as e:
            raise ComponentStoreError("list_components", e) from e

        return [_row_to_component(r) for r in rows]


class InMemoryComponentStore:
    """:class:`ComponentStore` over a plain list of components."""

    def __init__(self, components: Iterable[Component] = ()) -> None:
        self._components: list[Component] = list(components)

    def add(self, component: Component) -> Component:
        self._components.append(component)
        return component

    def __len__(self) -> int:
        return len(self._components)

    def find_by_project_and_key(self, project_key: str, key: str) -> Optional[Component]:
        roots = {c.uuid for c in self._components if c.is_root and c.key == project_key}
        for c in self._components:
            if c.project_uuid in roots and c.key == key:
                return c
        return None

    def find_by_project_and_module_path(
        self,
        project_uuid: str,
        module_uuid_chain: Sequence[str],
        relative_path: str,
    ) -> list[Component]:
        module_uuid_path = format_uuid_path([project_uuid, *module_uuid_chain])
        matches = [
            c
            for c in self._components
            if c.project_uuid == project_uuid
            and c.module_uuid_path == module_uuid_path
            and c.path == relative_path
            and c.scope is not Scope.PROJECT
        ]
        return sorted(matches, key=lambda c: c.uuid)


def _row_to_component(row: sqlite3.Row) -> Component:
    return Component(
        uuid=row["uuid"],
        key=row["kee"],
        project_uuid=row["project_uuid"],
        module_uuid=row["module_uuid"],
        module_uuid_path=row["module_uuid_path"],
        scope=Scope(row["scope"]),
        qualifier=Qualifier(row["qualifier"]),
        path=row["path"],
        enabled=bool(row["enabled"]),
    )
