"""SQLite implementation of ContactRepository.
One Contacts table; each operation opens its own connection and runs in its own transaction.
"""

import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from kontakti.domain import (
    Contact,
    InvalidArgumentError,
    SearchCriteria,
    StorageError,
    in_integer_range,
    resolve_criteria,
)

logger = logging.getLogger(__name__)

DATABASE_FILENAME = "contacts.db"


def default_database_path() -> Path:
    """Return contacts.db in the running process's base (working) directory."""
    return Path.cwd().resolve() / DATABASE_FILENAME


_CREATE_TABLE_QUERY = """
CREATE TABLE IF NOT EXISTS Contacts (
    Id INTEGER PRIMARY KEY AUTOINCREMENT,
    Name TEXT NOT NULL,
    Email TEXT NOT NULL,
    PhoneNumber TEXT,
    AddressLine1 TEXT,
    AddressLine2 TEXT
)
"""

_INSERT_QUERY = """
INSERT INTO Contacts (Name, Email, PhoneNumber, AddressLine1, AddressLine2)
VALUES (:name, :email, :phone_number, :address_line1, :address_line2)
"""

_UPDATE_QUERY = """
UPDATE Contacts SET
    Name = :name,
    Email = :email,
    PhoneNumber = :phone_number,
    AddressLine1 = :address_line1,
    AddressLine2 = :address_line2
WHERE Id = :id
"""

_SELECT_COLUMNS = "Id, Name, Email, PhoneNumber, AddressLine1, AddressLine2"

# Search filter name -> column.
_FILTER_COLUMNS = {
    "name": "Name",
    "phone": "PhoneNumber",
    "email": "Email",
}


def escape_like(value: str) -> str:
    """Escape LIKE metacharacters (\\, %, _) so they match literally with ESCAPE '\\'."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _contact_params(contact: Contact) -> dict:
    return {
        "name": contact.name,
        "email": contact.email,
        "phone_number": contact.phone_number,
        "address_line1": contact.address_line1,
        "address_line2": contact.address_line2,
    }


def _row_to_contact(row: sqlite3.Row) -> Contact:
    try:
        return Contact(
            id=row["Id"],
            name=row["Name"],
            email=row["Email"],
            phone_number=row["PhoneNumber"],
            address_line1=row["AddressLine1"],
            address_line2=row["AddressLine2"],
        )
    except InvalidArgumentError as exc:
        # Written by another process without the entity's checks.
        raise StorageError(f"Contacts row {row['Id']} is invalid: {exc}") from exc


def build_search_query(criteria: SearchCriteria) -> tuple[str, dict]:
    """Return (sql, params) for the given criteria. Pure; no database access."""
    clauses = []
    params: dict = {}
    for key, value in criteria.filters().items():
        column = _FILTER_COLUMNS[key]
        if criteria.exact:
            clauses.append(f"{column} = :{key} COLLATE NOCASE")
            params[key] = value
        else:
            clauses.append(f"{column} LIKE :{key} ESCAPE '\\' COLLATE NOCASE")
            params[key] = f"%{escape_like(value)}%"

    sql = f"SELECT {_SELECT_COLUMNS} FROM Contacts"
    if clauses:
        sql += " WHERE " + " AND ".join(clauses)
    sql += " ORDER BY Name COLLATE NOCASE, Id"

    if criteria.limit is not None:
        sql += " LIMIT :limit"
        params["limit"] = criteria.limit
        if criteria.offset is not None and criteria.offset >= 0:
            sql += " OFFSET :offset"
            params["offset"] = criteria.offset
    return sql, params


class SqliteContactStore:
    """Stores contacts in a SQLite file. Creates the file and the Contacts table if missing.
    No connection is held between calls; concurrency is left to SQLite's own locking.
    """

    def __init__(self, path: str | Path | None = None) -> None:
        self._path = Path(path) if path is not None else default_database_path()
        self._initialize()

    @property
    def path(self) -> Path:
        return self._path

    @contextmanager
    def _connect(self, operation: str) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside a transaction; commit on success, always close."""
        try:
            conn = sqlite3.connect(self._path)
        except sqlite3.Error as exc:
            logger.error("Could not open %s for %s: %s", self._path, operation, exc)
            raise StorageError(f"{operation} failed: {exc}") from exc
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        except sqlite3.Error as exc:
            logger.error("SQLite %s failed on %s: %s", operation, self._path, exc)
            raise StorageError(f"{operation} failed: {exc}") from exc
        finally:
            conn.close()

    def _initialize(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._connect("initialize") as conn:
            conn.execute(_CREATE_TABLE_QUERY)
        logger.info("Contacts store ready at %s", self._path)

    def create(self, contact: Contact) -> int:
        if contact is None:
            raise InvalidArgumentError("contact is required.")
        with self._connect("create") as conn:
            cursor = conn.execute(_INSERT_QUERY, _contact_params(contact))
            contact_id = cursor.lastrowid
        logger.debug("Created contact %s", contact_id)
        return contact_id

    def get_all(self) -> list[Contact]:
        with self._connect("get_all") as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM Contacts ORDER BY Id"
            ).fetchall()
        return [_row_to_contact(row) for row in rows]

    def get_by_id(self, contact_id: int) -> Contact | None:
        if not in_integer_range(contact_id):
            return None
        with self._connect("get_by_id") as conn:
            row = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM Contacts WHERE Id = :id",
                {"id": contact_id},
            ).fetchone()
        if row is None:
            return None
        return _row_to_contact(row)

    def update(self, contact: Contact) -> bool:
        if contact is None:
            raise InvalidArgumentError("contact is required.")
        if contact.id is None or not in_integer_range(contact.id):
            return False
        params = _contact_params(contact)
        params["id"] = contact.id
        with self._connect("update") as conn:
            updated = conn.execute(_UPDATE_QUERY, params).rowcount > 0
        logger.debug("Updated contact %s: %s", contact.id, updated)
        return updated

    def delete(self, contact_id: int) -> bool:
        if not in_integer_range(contact_id):
            return False
        with self._connect("delete") as conn:
            deleted = (
                conn.execute(
                    "DELETE FROM Contacts WHERE Id = :id", {"id": contact_id}
                ).rowcount
                > 0
            )
        logger.debug("Deleted contact %s: %s", contact_id, deleted)
        return deleted

    def search(
        self, criteria: SearchCriteria | None = None, **filters
    ) -> list[Contact]:
        sql, params = build_search_query(resolve_criteria(criteria, filters))
        with self._connect("search") as conn:
            rows = conn.execute(sql, params).fetchall()
        return [_row_to_contact(row) for row in rows]
