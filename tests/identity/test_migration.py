"""Tests for resolving components stored under the retired module key format."""

import pytest

from component_identity.exceptions import AmbiguousComponentError
from component_identity.identity import ComponentUuidResolver
from component_identity.persistence import (
    Component,
    InMemoryComponentStore,
    Qualifier,
    Scope,
    insert_directory,
    insert_file,
    insert_module,
    insert_project,
)


def _uuids(*components):
    return {c.uuid for c in components}


def _migrated_layout(project, stored, resolved):
    """Rows as a migrated analysis persists them: everything owned by the root."""
    by_uuid = {c.uuid: c for c in stored}
    rows = [project]
    for key, uuid in resolved.items():
        if key == project.key:
            continue
        previous = by_uuid.get(uuid)
        is_dir = previous is not None and previous.scope is not Scope.FILE
        rows.append(
            Component(
                uuid=uuid,
                key=key,
                project_uuid=project.uuid,
                module_uuid=project.uuid,
                module_uuid_path=project.module_uuid_path,
                scope=Scope.DIRECTORY if is_dir else Scope.FILE,
                qualifier=Qualifier.DIRECTORY if is_dir else Qualifier.FILE,
                path=key[len(project.key) + 1 :],
            )
        )
    return rows


class TestExistingComponents:
    def test_loads_root_uuid_and_ignores_unmigrated_module_key(self, db, store):
        project = insert_project(db.conn, "project")
        module = insert_module(db.conn, project, "project:module1")
        resolver = ComponentUuidResolver(store, "project", {module.key: "module1_path"})

        assert resolver.resolve("project") == project.uuid
        assert resolver.resolve(module.key) not in _uuids(project, module)

    def test_generates_uuid_when_nothing_is_stored(self, store):
        resolver = ComponentUuidResolver(store, "theProjectKey", {})

        generated = resolver.resolve("foo")
        assert generated

        # kept in memory for further calls with the same key
        assert resolver.resolve("foo") == generated


class TestModuleMigration:
    @pytest.fixture
    def legacy_project(self, db):
        conn = db.conn
        project = insert_project(conn, "project")
        module1 = insert_module(conn, project, "project:module1")
        module2 = insert_module(conn, module1, "project:module1:module2")
        file1 = insert_file(conn, project, "file1_path", key="project:file1")
        file2 = insert_file(conn, module2, "file2_path", key="project:module1:module2:file2")
        return project, module1, module2, file1, file2

    @pytest.fixture
    def resolver(self, store, legacy_project):
        module_paths = {
            "project:module1": "module1_path",
            "project:module1:module2": "module1_path/module2_path",
        }
        return ComponentUuidResolver(store, "project", module_paths)

    def test_nested_module_uuid_path(self, legacy_project):
        project, module1, module2, _, file2 = legacy_project
        assert file2.module_uuid_path == f".{project.uuid}.{module1.uuid}.{module2.uuid}."

    def test_migrated_files(self, resolver, legacy_project):
        _, _, _, file1, file2 = legacy_project

        assert resolver.resolve("project:file1_path") == file1.uuid
        assert resolver.resolve("project:module1_path/module2_path/file2_path") == file2.uuid

    def test_project_remains_the_same(self, resolver, legacy_project):
        project = legacy_project[0]
        assert resolver.resolve("project") == project.uuid

    def test_migrated_modules_become_folders(self, resolver, legacy_project):
        _, module1, module2, _, _ = legacy_project

        assert resolver.resolve("project:module1_path") == module1.uuid
        assert resolver.resolve("project:module1_path/module2_path") == module2.uuid

    @pytest.mark.parametrize(
        "old_key",
        [
            "project:module1",
            "project:module1:module2",
            "project:file1",
            "project:module1:module2:file2",
        ],
    )
    def test_old_keys_with_modules_do_not_exist(self, resolver, legacy_project, old_key):
        assert resolver.resolve(old_key) not in _uuids(*legacy_project)

    def test_unknown_file_in_migrated_module_is_new(self, resolver, legacy_project):
        uuid = resolver.resolve("project:module1_path/module2_path/other_path")
        assert uuid not in _uuids(*legacy_project)


class TestAlreadyMigratedProject:
    MODULE_PATHS = {
        "project:module1": "module1_path",
        "project:module1:module2": "module1_path/module2_path",
    }

    def test_current_keys_keep_their_uuids(self, db, store):
        project = insert_project(db.conn, "project")
        directory = insert_directory(db.conn, project, "module1_path")
        file = insert_file(db.conn, project, "module1_path/Foo.java")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        assert directory.key == "project:module1_path"
        assert resolver.resolve("project:module1_path") == directory.uuid
        assert resolver.resolve("project:module1_path/Foo.java") == file.uuid

    def test_second_analysis_reuses_first_analysis_uuids(self, db, store):
        conn = db.conn
        project = insert_project(conn, "project")
        module1 = insert_module(conn, project, "project:module1")
        module2 = insert_module(conn, module1, "project:module1:module2")
        file1 = insert_file(conn, project, "file1_path", key="project:file1")
        file2 = insert_file(conn, module2, "file2_path", key="project:module1:module2:file2")
        stored = [project, module1, module2, file1, file2]
        keys = [
            "project",
            "project:file1_path",
            "project:module1_path",
            "project:module1_path/module2_path",
            "project:module1_path/module2_path/file2_path",
            "project:module1_path/new_path",
        ]

        first = ComponentUuidResolver(store, "project", self.MODULE_PATHS)
        first_uuids = {key: first.resolve(key) for key in keys}
        assert first_uuids["project:module1_path"] == module1.uuid

        migrated = InMemoryComponentStore(_migrated_layout(project, stored, first.resolved))
        second = ComponentUuidResolver(migrated, "project", self.MODULE_PATHS)

        assert {key: second.resolve(key) for key in keys} == first_uuids
        assert second.resolve("project:module1") not in first_uuids.values()

    def test_current_key_owned_by_a_module_is_not_matched_directly(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        stray = insert_file(db.conn, module1, "Foo.java", key="project:other/Foo.java")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        assert resolver.resolve("project:other/Foo.java") != stray.uuid


class TestMissingModuleRows:
    def test_module_never_stored_falls_back_to_root_path(self, db, store):
        project = insert_project(db.conn, "project")
        insert_module(db.conn, project, "project:module1")
        root_file = insert_file(db.conn, project, "module9_path/x.py", key="project:x")
        module_paths = {"project:module1": "module1_path", "project:module9": "module9_path"}
        resolver = ComponentUuidResolver(store, "project", module_paths)

        assert resolver.resolve("project:module9_path/x.py") == root_file.uuid

    def test_module_never_stored_and_nothing_at_root_mints(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        resolver = ComponentUuidResolver(store, "project", {"project:module9": "module9_path"})

        uuid = resolver.resolve("project:module9_path/x.py")
        assert uuid not in _uuids(project, module1)

    def test_missing_file_in_stored_module_checks_root(self, db, store):
        project = insert_project(db.conn, "project")
        insert_module(db.conn, project, "project:module1")
        moved = insert_file(db.conn, project, "module1_path/Foo.java", key="project:Foo.java")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        assert resolver.resolve("project:module1_path/Foo.java") == moved.uuid


class TestRootFolders:
    def test_root_folder_is_not_migrated(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        dir1 = insert_directory(db.conn, module1, "/", key="project:module1:/")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        # project remains the same
        assert resolver.resolve("project") == project.uuid

        # module migrated to folder
        assert resolver.resolve("project:module1_path") == module1.uuid

        # neither exists
        assert resolver.resolve("project:module1_path/") not in _uuids(project, module1, dir1)
        assert resolver.resolve("project:module1") not in _uuids(project, module1, dir1)


class TestDisabledComponents:
    def test_disabled_module_and_file_migrate(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1", enabled=False)
        file1 = insert_file(db.conn, module1, "file1_path", key="project:file1", enabled=False)
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        assert resolver.resolve("project:module1_path/file1_path") == file1.uuid
        assert resolver.resolve("project:module1_path") == module1.uuid

    def test_root_uuid_kept_when_root_path_is_empty(self, db, store):
        project = insert_project(db.conn, "project")
        insert_module(db.conn, project, "project:module1", enabled=False)
        module2 = insert_module(db.conn, project, "project:module2", enabled=False)
        module_paths = {"project": "", "project:module2": "module2"}
        resolver = ComponentUuidResolver(store, "project", module_paths)

        assert resolver.resolve("project") == project.uuid
        assert resolver.resolve("project:module2") == module2.uuid


class TestExactSegmentMatching:
    def test_module_path_is_not_a_string_prefix(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        file1 = insert_file(db.conn, module1, "file1_path")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        assert resolver.resolve("project:module1_path/file1_path") == file1.uuid
        other = resolver.resolve("project:module1_path_extra/file1_path")
        assert other not in _uuids(project, module1, file1)

    def test_same_path_in_other_module_is_not_matched(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        module2 = insert_module(db.conn, project, "project:module2")
        file_a = insert_file(db.conn, module1, "src/a.py")
        file_b = insert_file(db.conn, module2, "src/a.py")
        module_paths = {"project:module1": "m1", "project:module2": "m2"}
        resolver = ComponentUuidResolver(store, "project", module_paths)

        assert resolver.resolve("project:m1/src/a.py") == file_a.uuid
        assert resolver.resolve("project:m2/src/a.py") == file_b.uuid


class TestAmbiguousMatches:
    def test_duplicate_rows_at_legacy_path_raise(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        first = insert_file(db.conn, module1, "dup", key="project:module1:dup")
        second = insert_file(db.conn, module1, "dup", key="project:module1:dup_copy")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        with pytest.raises(AmbiguousComponentError) as exc_info:
            resolver.resolve("project:module1_path/dup")
        assert set(exc_info.value.candidates) == {first.uuid, second.uuid}

    def test_failed_resolution_is_not_cached(self, db, store):
        project = insert_project(db.conn, "project")
        module1 = insert_module(db.conn, project, "project:module1")
        insert_file(db.conn, module1, "dup", key="project:module1:dup")
        insert_file(db.conn, module1, "dup", key="project:module1:dup_copy")
        resolver = ComponentUuidResolver(store, "project", {"project:module1": "module1_path"})

        for _ in range(2):
            with pytest.raises(AmbiguousComponentError):
                resolver.resolve("project:module1_path/dup")
        assert "project:module1_path/dup" not in resolver.resolved

    def test_modules_sharing_a_path_raise(self, db, store):
        project = insert_project(db.conn, "project")
        insert_module(db.conn, project, "project:module1")
        insert_module(db.conn, project, "project:module2")
        module_paths = {"project:module1": "shared", "project:module2": "shared"}
        resolver = ComponentUuidResolver(store, "project", module_paths)

        with pytest.raises(AmbiguousComponentError):
            resolver.resolve("project:shared/file")


class TestInMemoryStore:
    def test_nested_migration_through_memory_store(self, db, store):
        conn = db.conn
        project = insert_project(conn, "project")
        module1 = insert_module(conn, project, "project:module1", enabled=False)
        module2 = insert_module(conn, module1, "project:module1:module2")
        file1 = insert_file(conn, project, "file1_path", key="project:file1")
        file2 = insert_file(conn, module2, "file2_path", key="project:module1:module2:file2")
        memory = InMemoryComponentStore(store.list_components())
        module_paths = {
            "project:module1": "module1_path",
            "project:module1:module2": "module1_path/module2_path",
        }
        resolver = ComponentUuidResolver(memory, "project", module_paths)

        assert resolver.resolve("project") == project.uuid
        assert resolver.resolve("project:file1_path") == file1.uuid
        assert resolver.resolve("project:module1_path") == module1.uuid
        assert resolver.resolve("project:module1_path/module2_path/file2_path") == file2.uuid
        assert resolver.resolve("project:module1:module2:file2") not in _uuids(
            project, module1, module2, file1, file2
        )
