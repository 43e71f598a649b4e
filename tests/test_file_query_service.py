"""Tests for file search and listing helpers."""

import pytest

from common.constants import LIST_PAGE_SIZE, ROOT_GROUP_ID, ROOT_GROUP_NAME
from vault.exceptions import FileNotFoundInStoreError, GroupNotFoundError
from vault.repositories import FileRepository, GroupRepository
from vault.services.file_query_service import FileQueryService
from vault.utils import format_bytes, part_label


@pytest.fixture
def files(store):
    return FileQueryService(store)


@pytest.fixture
def seeded(store):
    math = GroupRepository(store).create_group("Math")
    repo = FileRepository(store)
    return {
        "math": math,
        "algebra": repo.create_file("algebra.pdf", 1, 100, "h1", math.group_id),
        "geometry": repo.create_file("geometry.pdf", 1, 100, "h2", math.group_id),
        "novel": repo.create_file("novel.epub", 2, 2048, "h3"),
    }


def test_search_without_filters_lists_everything(files, seeded):
    assert [f.name for f in files.search()] == ["algebra.pdf", "geometry.pdf", "novel.epub"]


def test_search_by_substring(files, seeded):
    assert [f.name for f in files.search(name_substring="metry")] == ["geometry.pdf"]


def test_search_by_id(files, seeded):
    result = files.search(file_id=seeded["novel"].file_id)

    assert len(result) == 1
    assert result[0].group_id == ROOT_GROUP_ID
    assert result[0].group_name == ROOT_GROUP_NAME


def test_search_filters_combine(files, seeded):
    math_id = seeded["math"].group_id

    assert len(files.search(name_substring=".pdf", group_id=math_id)) == 2
    assert files.search(name_substring=".epub", group_id=math_id) == []


def test_search_unknown_group(files, seeded):
    with pytest.raises(GroupNotFoundError):
        files.search(group_id=999)


def test_search_is_capped(files, store):
    repo = FileRepository(store)
    for i in range(LIST_PAGE_SIZE + 5):
        repo.create_file(f"file-{i}.txt", 1, 1, "h")

    result = files.search(name_substring="file-")

    assert len(result) == LIST_PAGE_SIZE
    assert result[0].name == "file-0.txt"


def test_get_unknown_file(files):
    with pytest.raises(FileNotFoundInStoreError):
        files.get(42)


def test_part_descriptors_of_unknown_file(files):
    with pytest.raises(FileNotFoundInStoreError):
        files.get_part_descriptors(42)


@pytest.mark.parametrize("size,expected", [
    (0, "0 B"),
    (512, "512 B"),
    (1024, "1.00 KB"),
    (1536, "1.50 KB"),
    (25 * 1024 * 1024, "25.00 MB"),
    (3 * 1024 ** 3, "3.00 GB"),
    (2048 * 1024 ** 3, "2048.00 GB"),
])
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


@pytest.mark.parametrize("name,expected", [
    ("movie.mkv", "movie.mkv.part0"),
    ("my report (final).pdf", "my_report_final_.pdf.part0"),
    ("...", "file.part0"),
])
def test_part_label(name, expected):
    assert part_label(name, 0) == expected


@pytest.mark.parametrize("term,expected", [
    ("a_b", ["a_b.txt"]),
    ("50%", ["50%.txt"]),
    ("c\\d", ["c\\d.txt"]),
])
def test_search_matches_wildcard_characters_literally(files, store, term, expected):
    repo = FileRepository(store)
    for name in ["a_b.txt", "axb.txt", "50%.txt", "500.txt", "c\\d.txt", "cxd.txt"]:
        repo.create_file(name, 1, 1, "h")

    assert [f.name for f in files.search(name_substring=term)] == expected
