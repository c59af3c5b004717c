"""SQLite-backed component database stored under the project root."""

import sqlite3
from pathlib import Path
from typing import Optional

from ..config import DEFAULT_CONFIG, ResolverConfig
from ..logging_config import get_logger

logger = get_logger(__name__)

# Current schema version (bump when tables change).
_SCHEMA_VERSION = 1


class ComponentDB:
    """Manages the ``.component-identity/components.db`` SQLite database.

    Usage::

        with ComponentDB("/path/to/project") as db:
            store = SqliteComponentStore(db.conn)
    """

    def __init__(self, project_root: str, config: Optional[ResolverConfig] = None) -> None:
        config = config or DEFAULT_CONFIG
        self.db_dir: Path = Path(project_root) / config.db_dirname
        self.db_path: Path = self.db_dir / config.db_filename
        self._conn: Optional[sqlite3.Connection] = None

    @property
    def conn(self) -> sqlite3.Connection:
        """Return the active connection. Raises if not connected."""
        if self._conn is None:
            raise RuntimeError("ComponentDB is not connected. Use as context manager or call connect().")
        return self._conn

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    # ── lifecycle ─────────────────────────────────────────────────

    def _ensure_dir(self) -> None:
        """Create the database directory with a .gitignore so it stays untracked."""
        self.db_dir.mkdir(parents=True, exist_ok=True)
        gitignore = self.db_dir / ".gitignore"
        if not gitignore.exists():
            gitignore.write_text("*\n")

    def connect(self) -> sqlite3.Connection:
        """Open (or create) the database and run migrations.

        The connection may be shared with resolver worker threads; resolvers
        serialize their queries, so ``check_same_thread`` is disabled.
        Connecting an already connected database returns the open connection.
        """
        if self.is_connected:
            return self.conn
        self._ensure_dir()
        conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA foreign_keys=ON")
        conn.row_factory = sqlite3.Row
        self._conn = conn
        self._migrate()
        logger.debug("Component DB connected at %s", self.db_path)
        return conn

    def close(self) -> None:
        """Close the connection if open."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "ComponentDB":
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # ── migration ─────────────────────────────────────────────────

    def _migrate(self) -> None:
        """Idempotently create / upgrade all tables."""
        c = self.conn

        c.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_version (
                version INTEGER NOT NULL
            )
            """
        )

        row = c.execute("SELECT version FROM schema_version").fetchone()
        if row is None:
            c.execute(
                "INSERT INTO schema_version (version) VALUES (?)",
                (_SCHEMA_VERSION,),
            )

        # ── components ───────────────────────────────────────────
        # kee is unique per project, not globally: two projects may both
        # own "lib:foo" rows under different roots.
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS components (
                uuid             TEXT    PRIMARY KEY,
                kee              TEXT    NOT NULL,
                project_uuid     TEXT    NOT NULL,
                module_uuid      TEXT,
                module_uuid_path TEXT    NOT NULL,
                scope            TEXT    NOT NULL,
                qualifier        TEXT    NOT NULL,
                path             TEXT,
                enabled          INTEGER NOT NULL DEFAULT 1
            )
            """
        )

        # ── indexes ──────────────────────────────────────────────
        c.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS idx_components_project_kee "
            "ON components(project_uuid, kee)"
        )
        c.execute(
            "CREATE INDEX IF NOT EXISTS idx_components_module_path "
            "ON components(project_uuid, module_uuid_path, path)"
        )
        c.execute("CREATE INDEX IF NOT EXISTS idx_components_kee ON components(kee)")

        c.commit()
