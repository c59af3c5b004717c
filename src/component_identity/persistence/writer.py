"""Write component rows into the component database in a single transaction.

The ``insert_*`` helpers build rows with the module hierarchy layout described
in :mod:`component_identity.persistence.models`; keys default to the retired
``<module key>:<path>`` format so legacy projects can be reproduced exactly.
"""

import sqlite3
from typing import Iterable, Optional

from ..identity.generator import new_uuid
from ..keys import create_effective_key
from .models import Component, Qualifier, Scope, format_uuid_path


def save_components(conn: sqlite3.Connection, components: Iterable[Component]) -> int:
    """Persist components to the database.

    All inserts happen inside a single transaction so the database stays
    consistent even if the process is interrupted.

    Parameters
    ----------
    conn:
        An open ``sqlite3.Connection`` (from ``ComponentDB.connect()``).
    components:
        The rows to insert.

    Returns
    -------
    int
        Number of rows written.
    """
    rows = [
        (
            c.uuid,
            c.key,
            c.project_uuid,
            c.module_uuid,
            c.module_uuid_path,
            c.scope.value,
            c.qualifier.value,
            c.path,
            1 if c.enabled else 0,
        )
        for c in components
    ]

    cur = conn.cursor()
    try:
        cur.execute("BEGIN")
        if rows:
            cur.executemany(
                """
                INSERT INTO components (
                    uuid, kee, project_uuid, module_uuid, module_uuid_path,
                    scope, qualifier, path, enabled
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
        conn.commit()
        return len(rows)

    except Exception:
        conn.rollback()
        raise


def insert_project(
    conn: sqlite3.Connection, key: str, uuid: Optional[str] = None, enabled: bool = True
) -> Component:
    uuid = uuid or new_uuid()
    project = Component(
        uuid=uuid,
        key=key,
        project_uuid=uuid,
        module_uuid_path=format_uuid_path([uuid]),
        scope=Scope.PROJECT,
        qualifier=Qualifier.PROJECT,
        enabled=enabled,
    )
    save_components(conn, [project])
    return project


def insert_module(
    conn: sqlite3.Connection,
    parent: Component,
    key: str,
    uuid: Optional[str] = None,
    enabled: bool = True,
) -> Component:
    """Insert a legacy module below ``parent`` (the project or another module)."""
    if parent.scope is not Scope.PROJECT:
        raise ValueError(f"Modules must be nested in a project or module, got {parent.key}")
    uuid = uuid or new_uuid()
    module = Component(
        uuid=uuid,
        key=key,
        project_uuid=parent.project_uuid,
        module_uuid=parent.uuid,
        module_uuid_path=parent.module_uuid_path + uuid + ".",
        scope=Scope.PROJECT,
        qualifier=Qualifier.MODULE,
        enabled=enabled,
    )
    save_components(conn, [module])
    return module


def insert_directory(
    conn: sqlite3.Connection,
    module: Component,
    path: str,
    key: Optional[str] = None,
    uuid: Optional[str] = None,
    enabled: bool = True,
) -> Component:
    """Insert a directory owned by ``module`` (or by the project root)."""
    directory = _owned_component(
        module, path, key, uuid, enabled, Scope.DIRECTORY, Qualifier.DIRECTORY
    )
    save_components(conn, [directory])
    return directory


def insert_file(
    conn: sqlite3.Connection,
    module: Component,
    path: str,
    key: Optional[str] = None,
    uuid: Optional[str] = None,
    enabled: bool = True,
    qualifier: Qualifier = Qualifier.FILE,
) -> Component:
    """Insert a file owned by ``module`` (or by the project root)."""
    file = _owned_component(module, path, key, uuid, enabled, Scope.FILE, qualifier)
    save_components(conn, [file])
    return file


def _owned_component(
    module: Component,
    path: str,
    key: Optional[str],
    uuid: Optional[str],
    enabled: bool,
    scope: Scope,
    qualifier: Qualifier,
) -> Component:
    if module.scope is not Scope.PROJECT:
        raise ValueError(f"Components must be owned by a project or module, got {module.key}")
    return Component(
        uuid=uuid or new_uuid(),
        key=key or create_effective_key(module.key, path),
        project_uuid=module.project_uuid,
        module_uuid=module.uuid,
        module_uuid_path=module.module_uuid_path,
        scope=scope,
        qualifier=qualifier,
        path=path,
        enabled=enabled,
    )
