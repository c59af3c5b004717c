"""Public API for component identity resolution.

:func:`open_resolver` wires configuration, logging, the component database and
a resolver together for one analysis run. Callers that manage their own
storage can construct :class:`ComponentUuidResolver` directly.

Example:
    >>> from component_identity import open_resolver
    >>>
    >>> with open_resolver("/path/to/project", "project",
    ...                    metadata_file=Path("report/metadata.json")) as resolver:
    ...     uuid = resolver.resolve("project:module1_path/src/Foo.java")
    ...     uuids = resolver.resolved
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Mapping, Optional

from .config import load_config
from .identity import ComponentUuidResolver, load_module_paths
from .logging_config import get_logger, setup_logging
from .persistence import ComponentDB, InMemoryComponentStore, SqliteComponentStore
from .persistence.store import ComponentStore

logger = get_logger(__name__)


@contextmanager
def open_resolver(
    project_root: str,
    root_key: str,
    module_paths: Optional[Mapping[str, str]] = None,
    metadata_file: Optional[Path] = None,
    config_file: Optional[Path] = None,
    preload: bool = False,
    log_file: Optional[str] = None,
    **overrides,
) -> Iterator[ComponentUuidResolver]:
    """Open the project's component database and resolve keys against it.

    Steps:
    1. Load configuration (auto-discover TOML, env vars, overrides)
    2. Set up logging at the configured verbosity
    3. Connect the component database under ``project_root``
    4. Yield a resolver; close it and the database on exit

    Args:
        project_root: Directory holding the component database
        root_key: Key of the project root
        module_paths: Module key -> project-relative path. Read from
            ``metadata_file`` when not given.
        metadata_file: JSON report metadata carrying the module path map
        config_file: Optional explicit config file path
        preload: Read the project's rows into memory once instead of
            querying SQLite per key
        log_file: Optional file receiving the log records too
        **overrides: Configuration overrides (e.g. ``verbose=True``,
            ``thread_safe=False``)

    Raises:
        ConfigurationError: If the configuration or metadata is unreadable
        InvalidConfigError: If a configuration value is invalid
    """
    config = load_config(config_file=config_file, **overrides)
    setup_logging(config.verbosity, log_file=log_file)

    if module_paths is None:
        module_paths = load_module_paths(metadata_file) if metadata_file is not None else {}

    with ComponentDB(project_root, config) as db:
        store: ComponentStore = SqliteComponentStore(db.conn)
        if preload:
            store = _preload(store, root_key)

        resolver = ComponentUuidResolver(store, root_key, module_paths, config)
        try:
            yield resolver
        finally:
            logger.info("Resolved %d keys for %s", len(resolver.resolved), root_key)
            resolver.close()


def _preload(store: SqliteComponentStore, root_key: str) -> InMemoryComponentStore:
    root = store.find_by_project_and_key(root_key, root_key)
    if root is None:
        logger.debug("Project %s has no persisted root, nothing to preload", root_key)
        return InMemoryComponentStore()
    components = store.list_components(root.uuid)
    logger.debug("Preloaded %d components of %s", len(components), root_key)
    return InMemoryComponentStore(components)
