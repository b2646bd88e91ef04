import json

import pytest

from bookshelf.storage import SEED_BOOKS, BookStore, serialize


def test_load_missing_file_is_empty(store, books_file):
    assert not books_file.exists()
    assert store.load() == []


@pytest.mark.parametrize(
    "content",
    [
        "",
        "   \n",
        "{not json",
        "[1, 2",
        "\xff\xfe",
        "[NaN]",
        '[{"id": 1, "title": "T", "author": "A", "available": true, "x": Infinity}]',
        "[-Infinity]",
        "[1e999]",
    ],
)
def test_load_blank_or_invalid_content_is_empty(store, books_file, content):
    books_file.write_bytes(content.encode("latin-1"))
    assert store.load() == []


@pytest.mark.parametrize("content", ['{"id": 1}', "42", '"books"', "null"])
def test_load_non_array_is_empty(store, books_file, content):
    books_file.write_text(content, encoding="utf-8")
    assert store.load() == []


def test_load_deeply_nested_file_is_empty(store, books_file):
    books_file.write_text("[" * 100000, encoding="utf-8")
    assert store.load() == []


def test_load_directory_raises(tmp_path):
    with pytest.raises(OSError):
        BookStore(tmp_path).load()


def test_save_format(store, books_file):
    store.save([{"id": 1, "title": "Café", "author": "A", "available": True}])
    text = books_file.read_text(encoding="utf-8")
    assert text == (
        "[\n"
        "  {\n"
        '    "id": 1,\n'
        '    "title": "Café",\n'
        '    "author": "A",\n'
        '    "available": true\n'
        "  }\n"
        "]\n"
    )


def test_save_empty_collection(store, books_file):
    store.save([])
    assert books_file.read_text(encoding="utf-8") == "[]\n"


def test_save_creates_parent_dirs_and_leaves_no_temp_files(tmp_path):
    target = tmp_path / "nested" / "dir" / "books.json"
    BookStore(target).save(SEED_BOOKS)
    assert json.loads(target.read_text(encoding="utf-8")) == SEED_BOOKS
    assert [p.name for p in target.parent.iterdir()] == ["books.json"]


def test_save_load_is_a_fixed_point(store, books_file):
    store.save(SEED_BOOKS + [{"id": 7, "title": "X", "author": "Y", "available": False}])
    first = books_file.read_text(encoding="utf-8")
    store.save(store.load())
    assert books_file.read_text(encoding="utf-8") == first
    assert serialize(store.load()) == first


def test_ensure_seeded_writes_sample_once(store, books_file):
    assert store.ensure_seeded() is True
    assert store.load() == SEED_BOOKS

    store.save([])
    assert store.ensure_seeded() is False
    assert store.load() == []


def test_ensure_seeded_leaves_existing_garbage_alone(store, books_file):
    books_file.write_text("garbage", encoding="utf-8")
    assert store.ensure_seeded() is False
    assert books_file.read_text(encoding="utf-8") == "garbage"


@pytest.mark.parametrize(
    "books, expected",
    [
        ([], 1),
        (SEED_BOOKS, 3),
        ([{"id": 10}, {"id": 4}], 11),
        ([{"id": -3}], 1),
        ([{"id": True}, {"id": "9"}, None, "x", {"title": "no id"}], 1),
        ([{"id": 2.0}], 3),
        ([{"id": 2.5}, {"id": float("nan")}], 1),
    ],
)
def test_next_id(books, expected):
    assert BookStore.next_id(books) == expected


def test_find_index_and_without():
    books = [{"id": 1}, "junk", {"id": 2}, {"id": True}]
    assert BookStore.find_index(books, 2) == 2
    assert BookStore.find_index(books, 1) == 0
    assert BookStore.find_index(books, 99) is None
    assert BookStore.without(books, 1) == ["junk", {"id": 2}, {"id": True}]


def test_integral_float_ids_match_their_integer():
    books = [{"id": 1}, {"id": 2.0}, {"id": 2.5}]
    assert BookStore.find_index(books, 2) == 1
    assert BookStore.find_index(books, 3) is None
    assert BookStore.without(books, 2) == [{"id": 1}, {"id": 2.5}]
