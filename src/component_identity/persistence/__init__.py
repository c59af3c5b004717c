"""Durable component store: SQLite database, row models, read and write access."""

from .database import ComponentDB
from .models import Component, Qualifier, Scope
from .store import ComponentStore, InMemoryComponentStore, SqliteComponentStore
from .writer import insert_directory, insert_file, insert_module, insert_project, save_components

__all__ = [
    "ComponentDB",
    "Component",
    "Qualifier",
    "Scope",
    "ComponentStore",
    "InMemoryComponentStore",
    "SqliteComponentStore",
    "save_components",
    "insert_project",
    "insert_module",
    "insert_directory",
    "insert_file",
]
