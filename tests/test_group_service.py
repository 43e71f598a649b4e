"""Tests for group creation, listing, re-parenting and cascading deletion."""

import pytest

from common.constants import ROOT_GROUP_ID, ROOT_GROUP_NAME
from vault.exceptions import (
    AlreadyExistsError,
    GroupCycleError,
    GroupNotFoundError,
    RootGroupError,
    ValidationError,
)
from vault.repositories import FileRepository
from vault.services.group_service import GroupService


@pytest.fixture
def groups(store):
    return GroupService(store)


class TestCreate:
    def test_create_top_level(self, groups):
        math = groups.create("Math")

        assert math.group_id != ROOT_GROUP_ID
        assert math.parent_id is None

    def test_create_under_parent(self, groups):
        books = groups.create("Books")
        math = groups.create("Math", "Books")

        assert math.parent_id == books.group_id

    def test_duplicate_name(self, groups):
        groups.create("Math")

        with pytest.raises(AlreadyExistsError):
            groups.create("Math")

    def test_root_name_is_taken(self, groups):
        with pytest.raises(AlreadyExistsError):
            groups.create(ROOT_GROUP_NAME)

    def test_unknown_parent(self, groups):
        with pytest.raises(GroupNotFoundError):
            groups.create("Math", "Science")

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name(self, groups, name):
        with pytest.raises(ValidationError):
            groups.create(name)


class TestList:
    def test_lists_root_with_root_parent(self, groups):
        rows = groups.list()

        assert len(rows) == 1
        assert rows[0].group_id == ROOT_GROUP_ID
        assert rows[0].parent_name == "root"

    def test_lists_parent_names(self, groups):
        groups.create("Books")
        groups.create("Math", "Books")

        rows = {row.name: row.parent_name for row in groups.list()}

        assert rows["Math"] == "Books"
        assert rows["Books"] == "root"


class TestDelete:
    def test_cascade_reassigns_files_to_root(self, groups, store):
        books = groups.create("Books")
        math = groups.create("Math", "Books")
        files = FileRepository(store)
        novel = files.create_file("novel.epub", 1, 10, "h1", books.group_id)
        algebra = files.create_file("algebra.pdf", 1, 10, "h2", math.group_id)

        deleted = groups.delete("Books")

        assert deleted == [math.group_id, books.group_id]
        assert files.count_by_group(books.group_id) == 0
        assert files.count_by_group(math.group_id) == 0
        assert files.get_by_id(novel.file_id).group_id == ROOT_GROUP_ID
        assert files.get_by_id(algebra.file_id).group_id == ROOT_GROUP_ID
        names = [row.name for row in groups.list()]
        assert "Books" not in names
        assert "Math" not in names

    def test_deleting_child_keeps_parent(self, groups):
        groups.create("Books")
        groups.create("Math", "Books")

        groups.delete("Math")

        assert [row.name for row in groups.list()] == [ROOT_GROUP_NAME, "Books"]

    def test_missing_group(self, groups):
        with pytest.raises(GroupNotFoundError):
            groups.delete("missing")

    def test_root_group_cannot_be_deleted(self, groups):
        with pytest.raises(RootGroupError):
            groups.delete(ROOT_GROUP_NAME)

        assert groups.get(ROOT_GROUP_ID).name == ROOT_GROUP_NAME

    def test_deep_tree_is_deleted_without_recursion(self, groups, store):
        groups.create("level-0")
        for depth in range(1, 1500):
            groups.create(f"level-{depth}", f"level-{depth - 1}")

        deleted = groups.delete("level-0")

        assert len(deleted) == 1500
        assert [row.name for row in groups.list()] == [ROOT_GROUP_NAME]

    def test_wide_tree_deletes_descendants_first(self, groups):
        top = groups.create("top")
        left = groups.create("left", "top")
        right = groups.create("right", "top")
        leaf = groups.create("leaf", "left")

        deleted = groups.delete("top")

        assert deleted.index(leaf.group_id) < deleted.index(left.group_id)
        assert deleted[-1] == top.group_id
        assert set(deleted) == {top.group_id, left.group_id, right.group_id, leaf.group_id}

    def test_corrupted_cycle_terminates(self, groups, store):
        a = groups.create("A")
        b = groups.create("B", "A")
        # bypass the service checks to corrupt the tree
        with store.transaction() as conn:
            conn.execute("UPDATE groups SET parent_group_id = ? WHERE group_id = ?", (b.group_id, a.group_id))

        deleted = groups.delete("A")

        assert set(deleted) == {a.group_id, b.group_id}
        assert [row.name for row in groups.list()] == [ROOT_GROUP_NAME]


class TestMove:
    def test_move_under_new_parent(self, groups):
        books = groups.create("Books")
        groups.create("Math")

        moved = groups.move("Math", "Books")

        assert moved.parent_id == books.group_id
        assert {row.name: row.parent_name for row in groups.list()}["Math"] == "Books"

    def test_move_to_top_level(self, groups):
        groups.create("Books")
        groups.create("Math", "Books")

        assert groups.move("Math").parent_id is None

    def test_move_under_descendant_rejected(self, groups):
        groups.create("A")
        groups.create("B", "A")
        groups.create("C", "B")

        with pytest.raises(GroupCycleError):
            groups.move("A", "C")

    def test_move_under_itself_rejected(self, groups):
        groups.create("A")

        with pytest.raises(GroupCycleError):
            groups.move("A", "A")

    def test_root_cannot_move(self, groups):
        groups.create("A")

        with pytest.raises(RootGroupError):
            groups.move(ROOT_GROUP_NAME, "A")
