"""Shared test fixtures for component identity tests."""

import os
import sys
import tempfile

sys.path.insert(0, "src")

import pytest

from component_identity.logging_config import get_logger
from component_identity.persistence import ComponentDB, SqliteComponentStore


class CountingStore:
    """Wraps a store and counts the queries it answers."""

    def __init__(self, store):
        self.store = store
        self.queries = 0

    def find_by_project_and_key(self, project_key, key):
        self.queries += 1
        return self.store.find_by_project_and_key(project_key, key)

    def find_by_project_and_module_path(self, project_uuid, module_uuid_chain, relative_path):
        self.queries += 1
        return self.store.find_by_project_and_module_path(
            project_uuid, module_uuid_chain, relative_path
        )


@pytest.fixture
def db():
    """A connected component database in a throwaway project directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        with ComponentDB(tmpdir) as component_db:
            yield component_db


@pytest.fixture
def store(db):
    """SQLite store over the ``db`` fixture."""
    return SqliteComponentStore(db.conn)


@pytest.fixture
def counting_store(store):
    """SQLite store that counts queries."""
    return CountingStore(store)


@pytest.fixture
def restore_package_logger():
    """Undo handlers and level installed by ``setup_logging`` during a test."""
    logger = get_logger()
    handlers, level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers[:]:
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No global/project config files and no COMPONENT_IDENTITY_* variables."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(work)
    for name in list(os.environ):
        if name.startswith("COMPONENT_IDENTITY_"):
            monkeypatch.delenv(name)
    return home, work
