"""Integration tests for database repositories."""

import sqlite3

import pytest

from common.constants import ROOT_GROUP_ID, ROOT_GROUP_NAME
from vault.database import MetadataStore
from vault.exceptions import AlreadyExistsError, GroupNotFoundError, StoreError
from vault.repositories import (
    FileRepository,
    GroupRepository,
    Part,
    PartRepository,
)


class TestMetadataStore:
    """Test schema creation and transactions."""

    def test_root_group_seeded(self, store):
        root = GroupRepository(store).get_by_id(ROOT_GROUP_ID)

        assert root is not None
        assert root.name == ROOT_GROUP_NAME
        assert root.parent_id is None

    def test_init_is_idempotent(self, tmp_path):
        path = tmp_path / "db.sqlite3"
        MetadataStore(path).init().close()

        with MetadataStore(path).init() as store:
            groups = GroupRepository(store).list_groups()

        assert [g.name for g in groups] == [ROOT_GROUP_NAME]

    def test_transaction_rolls_back_on_error(self, store):
        repo = FileRepository(store)

        with pytest.raises(RuntimeError):
            with store.transaction() as conn:
                repo.create_file("a.bin", 1, 10, "hash", conn=conn)
                raise RuntimeError("boom")

        assert repo.search() == []

    def test_sqlite_errors_become_store_errors(self, store):
        with pytest.raises(StoreError):
            with store.transaction() as conn:
                conn.execute("INSERT INTO no_such_table VALUES (1)")

    def test_foreign_keys_enforced(self, store):
        with pytest.raises(StoreError):
            FileRepository(store).create_file("a.bin", 1, 10, "hash", group_id=999)


class TestGroupRepository:
    def test_create_and_fetch(self, store):
        repo = GroupRepository(store)
        books = repo.create_group("Books")
        math = repo.create_group("Math", books.group_id)

        assert repo.get_by_name("Math").parent_id == books.group_id
        assert repo.get_by_id(math.group_id).name == "Math"
        assert repo.get_by_name("missing") is None

    def test_duplicate_name_rejected(self, store):
        repo = GroupRepository(store)
        repo.create_group("Books")

        with pytest.raises(AlreadyExistsError):
            repo.create_group("Books")

    def test_unknown_parent_rejected(self, store):
        with pytest.raises(GroupNotFoundError):
            GroupRepository(store).create_group("Orphan", parent_id=424242)

    def test_list_resolves_parent_names(self, store):
        repo = GroupRepository(store)
        books = repo.create_group("Books")
        repo.create_group("Math", books.group_id)

        listing = {g.name: g.parent_name for g in repo.list_groups()}

        assert listing == {ROOT_GROUP_NAME: "root", "Books": "root", "Math": "Books"}

    def test_child_and_ancestor_ids(self, store):
        repo = GroupRepository(store)
        a = repo.create_group("A")
        b = repo.create_group("B", a.group_id)
        c = repo.create_group("C", b.group_id)

        assert repo.get_child_ids(a.group_id) == [b.group_id]
        assert repo.get_ancestor_ids(c.group_id) == [b.group_id, a.group_id]
        assert repo.get_ancestor_ids(a.group_id) == []


class TestFileRepository:
    def test_create_defaults_to_root_group(self, store):
        repo = FileRepository(store)
        file = repo.create_file("notes.txt", 2, 30, "abc")

        fetched = repo.get_by_id(file.file_id)
        assert fetched == file
        assert fetched.group_id == ROOT_GROUP_ID

    def test_get_missing_returns_none(self, store):
        assert FileRepository(store).get_by_id(999) is None

    def test_search_filters(self, store):
        groups = GroupRepository(store)
        math = groups.create_group("Math")
        repo = FileRepository(store)
        algebra = repo.create_file("algebra.pdf", 1, 10, "h1", math.group_id)
        repo.create_file("geometry.pdf", 1, 10, "h2", math.group_id)
        novel = repo.create_file("novel.epub", 1, 10, "h3")

        assert [f.name for f in repo.search(name_substring="pdf")] == ["algebra.pdf", "geometry.pdf"]
        assert [f.file_id for f in repo.search(file_id=novel.file_id)] == [novel.file_id]
        assert len(repo.search(group_id=math.group_id)) == 2
        assert repo.search(name_substring="alg", group_id=math.group_id)[0].file_id == algebra.file_id
        assert repo.search(name_substring="alg", group_id=ROOT_GROUP_ID) == []
        assert repo.search(file_id=novel.file_id)[0].group_name == ROOT_GROUP_NAME

    def test_search_respects_limit(self, store):
        repo = FileRepository(store)
        for i in range(5):
            repo.create_file(f"f{i}", 1, 1, "h")

        assert len(repo.search(limit=3)) == 3

    def test_reassign_group(self, store):
        math = GroupRepository(store).create_group("Math")
        repo = FileRepository(store)
        repo.create_file("a", 1, 1, "h", math.group_id)
        repo.create_file("b", 1, 1, "h", math.group_id)

        moved = repo.reassign_group(math.group_id, ROOT_GROUP_ID)

        assert moved == 2
        assert repo.count_by_group(math.group_id) == 0
        assert repo.count_by_group(ROOT_GROUP_ID) == 2


class TestPartRepository:
    def test_parts_ordered_by_index_not_id(self, store):
        file = FileRepository(store).create_file("a.bin", 3, 30, "h")
        repo = PartRepository(store)
        repo.create_parts([
            Part(part_id="zzz", file_id=file.file_id, part_index=0, size=10),
            Part(part_id="mmm", file_id=file.file_id, part_index=1, size=10),
            Part(part_id="aaa", file_id=file.file_id, part_index=2, size=10),
        ])

        assert repo.get_part_ids(file.file_id) == ["zzz", "mmm", "aaa"]
        assert repo.count_by_file(file.file_id) == 3

    def test_duplicate_index_rejected(self, store):
        file = FileRepository(store).create_file("a.bin", 2, 20, "h")
        repo = PartRepository(store)

        with pytest.raises(StoreError):
            repo.create_parts([
                Part(part_id="p1", file_id=file.file_id, part_index=0, size=10),
                Part(part_id="p2", file_id=file.file_id, part_index=0, size=10),
            ])

        assert repo.count_by_file(file.file_id) == 0

    def test_delete_part(self, store):
        file = FileRepository(store).create_file("a.bin", 2, 20, "h")
        repo = PartRepository(store)
        repo.create_parts([
            Part(part_id="p1", file_id=file.file_id, part_index=0, size=10),
            Part(part_id="p2", file_id=file.file_id, part_index=1, size=10),
        ])

        repo.delete_part("p1")

        assert repo.get_part_ids(file.file_id) == ["p2"]

    def test_create_parts_empty_is_noop(self, store):
        PartRepository(store).create_parts([])

    def test_raw_connection_rows(self, store):
        row = store.conn.execute(
            "SELECT group_name FROM groups WHERE group_id = ?", (ROOT_GROUP_ID,)
        ).fetchone()

        assert isinstance(row, sqlite3.Row)
        assert row["group_name"] == ROOT_GROUP_NAME
