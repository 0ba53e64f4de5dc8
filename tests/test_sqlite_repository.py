"""Tests specific to SqliteContactStore: schema, file handling, query building, storage errors."""

import sqlite3

import pytest

from kontakti import ContactStore
from kontakti.domain import Contact, SearchCriteria, StorageError
from kontakti.infrastructure import (
    DATABASE_FILENAME,
    SqliteContactStore,
    default_database_path,
)
from kontakti.infrastructure.persistence.sqlite_repository import (
    build_search_query,
    escape_like,
)


def _columns(path) -> list[tuple[str, str, int, int]]:
    conn = sqlite3.connect(path)
    try:
        rows = conn.execute("PRAGMA table_info(Contacts)").fetchall()
    finally:
        conn.close()
    # (name, type, notnull, pk)
    return [(r[1], r[2], r[3], r[5]) for r in rows]


def test_default_path_is_fixed_filename_in_process_base_dir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert DATABASE_FILENAME == "contacts.db"
    assert default_database_path() == tmp_path.resolve() / "contacts.db"

    store = SqliteContactStore()
    assert store.path == tmp_path.resolve() / "contacts.db"
    assert store.path.exists()


def test_creates_file_parent_dirs_and_schema(tmp_path):
    path = tmp_path / "nested" / "dir" / "contacts.db"
    store = SqliteContactStore(path)

    assert store.path == path
    assert path.exists()
    assert _columns(path) == [
        ("Id", "INTEGER", 0, 1),
        ("Name", "TEXT", 1, 0),
        ("Email", "TEXT", 1, 0),
        ("PhoneNumber", "TEXT", 0, 0),
        ("AddressLine1", "TEXT", 0, 0),
        ("AddressLine2", "TEXT", 0, 0),
    ]


def test_initialization_is_idempotent_and_data_survives(tmp_path):
    path = tmp_path / "contacts.db"
    first = SqliteContactStore(path)
    contact_id = first.create(Contact(name="Alice", email="a@x.com"))

    second = SqliteContactStore(path)
    found = second.get_by_id(contact_id)
    assert found is not None
    assert found.name == "Alice"
    assert len(second.get_all()) == 1


def test_rows_written_by_another_connection_are_visible(tmp_path):
    path = tmp_path / "contacts.db"
    store = SqliteContactStore(path)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute(
            "INSERT INTO Contacts (Name, Email, PhoneNumber) VALUES (?, ?, ?)",
            ("Bob", "b@x.com", None),
        )
    conn.close()

    (bob,) = store.search(name="bob", exact=True)
    assert bob.phone_number is None
    assert bob.id == 1


def test_storage_failure_raises_storage_error_with_cause(tmp_path):
    path = tmp_path / "contacts.db"
    store = SqliteContactStore(path)
    conn = sqlite3.connect(path)
    conn.execute("DROP TABLE Contacts")
    conn.close()

    with pytest.raises(StorageError) as exc_info:
        store.get_all()
    assert isinstance(exc_info.value.__cause__, sqlite3.OperationalError)


def test_unopenable_path_raises_storage_error(tmp_path):
    # A directory where the database file should be.
    path = tmp_path / "contacts.db"
    path.mkdir()
    with pytest.raises(StorageError):
        SqliteContactStore(path)


def test_escape_like():
    assert escape_like("plain") == "plain"
    assert escape_like("100%") == "100\\%"
    assert escape_like("a_b") == "a\\_b"
    assert escape_like("a\\b") == "a\\\\b"
    assert escape_like("\\%_") == "\\\\\\%\\_"


def test_build_search_query_without_filters():
    sql, params = build_search_query(SearchCriteria())
    assert "WHERE" not in sql
    assert sql.endswith("ORDER BY Name COLLATE NOCASE, Id")
    assert params == {}


def test_build_search_query_substring_and_paging():
    sql, params = build_search_query(
        SearchCriteria(name=" jo ", email="x_y", limit=5, offset=10)
    )
    assert "Name LIKE :name ESCAPE '\\' COLLATE NOCASE" in sql
    assert "Email LIKE :email ESCAPE '\\' COLLATE NOCASE" in sql
    assert " AND " in sql
    assert sql.endswith("LIMIT :limit OFFSET :offset")
    assert params == {"name": "%jo%", "email": "%x\\_y%", "limit": 5, "offset": 10}


def test_build_search_query_exact_ignores_offset_without_limit():
    sql, params = build_search_query(
        SearchCriteria(phone="0888", exact=True, offset=3)
    )
    assert "PhoneNumber = :phone COLLATE NOCASE" in sql
    assert "LIMIT" not in sql
    assert "OFFSET" not in sql
    assert params == {"phone": "0888"}


def test_contact_store_is_the_sqlite_store(tmp_path):
    assert ContactStore is SqliteContactStore
    store = ContactStore(tmp_path / "contacts.db")
    assert store.create(Contact(name="Alice", email="a@x.com")) == 1


def test_row_with_blank_name_raises_storage_error(tmp_path):
    path = tmp_path / "contacts.db"
    store = SqliteContactStore(path)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute(
            "INSERT INTO Contacts (Name, Email) VALUES (?, ?)", ("", "a@x.com")
        )
    conn.close()

    with pytest.raises(StorageError):
        store.get_all()
    with pytest.raises(StorageError):
        store.get_by_id(1)
