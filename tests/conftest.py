"""Shared pytest fixtures for automodel-cli tests."""

import sqlite3

import pytest
from typing import Any, Dict, List, Optional, Sequence, Set

from automodel_cli.config import GeneratorOptions
from automodel_cli.database.base import DatabaseClient
from automodel_cli.database.models import RawColumn


class FakeClient(DatabaseClient):
    """In-memory stand-in for a database driver.

    Foreign key rows are served by ``execute`` for whichever table name
    appears among the query parameters.
    """

    def __init__(
        self,
        tables: Dict[str, Dict[str, RawColumn]],
        fk_rows: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        dialect: str = "mysql",
        name: str = "shop",
        failing_tables: Optional[Set[str]] = None,
        failing_fk_tables: Optional[Set[str]] = None,
    ):
        super().__init__()
        self.dialect = dialect
        self._tables = tables
        self.fk_rows = fk_rows or {}
        self.name = name
        self.failing_tables = failing_tables or set()
        self.failing_fk_tables = failing_fk_tables or set()
        self.queries: List[Sequence[Any]] = []

    @property
    def database_name(self) -> str:
        return self.name

    def connect(self):
        return None

    def _list_tables(self) -> List[str]:
        return list(self._tables)

    def _describe_table(self, table: str) -> Dict[str, RawColumn]:
        if table in self.failing_tables:
            raise RuntimeError("connection reset")
        return dict(self._tables[table])

    def _execute(self, sql: str, params: Sequence[Any]) -> List[Dict[str, Any]]:
        self.queries.append(params)
        table = next((p for p in params if p in self._tables), None)
        if table in self.failing_fk_tables:
            raise RuntimeError("permission denied")
        return [dict(row) for row in self.fk_rows.get(table, [])]


@pytest.fixture
def users_columns():
    """Columns of a typical MySQL users table."""
    return {
        "id": RawColumn(name="id", type="INT(11)", allow_null=False, primary_key=True),
        "email": RawColumn(name="email", type="VARCHAR(255)", allow_null=False),
        "is_active": RawColumn(name="is_active", type="BIT(1)", allow_null=False, default_value="b'1'"),
        "created_at": RawColumn(
            name="created_at", type="DATETIME", allow_null=False, default_value="CURRENT_TIMESTAMP"
        ),
    }


@pytest.fixture
def orders_columns():
    """Columns of an orders table pointing at users."""
    return {
        "id": RawColumn(name="id", type="INT(11)", allow_null=False, primary_key=True, default_value="0"),
        "user_id": RawColumn(name="user_id", type="INT(11)", allow_null=False),
        "status": RawColumn(name="status", type="ENUM('new','paid')", allow_null=False, default_value="new"),
        "total": RawColumn(name="total", type="DECIMAL(10,2)", allow_null=True),
    }


@pytest.fixture
def mysql_fk_rows():
    """Key rows as INFORMATION_SCHEMA reports them for users and orders."""
    return {
        "users": [
            {
                "constraint_name": "PRIMARY",
                "source_schema": "shop",
                "source_table": "users",
                "source_column": "id",
                "target_schema": None,
                "target_table": None,
                "target_column": None,
                "extra": "auto_increment",
                "column_key": "PRI",
            },
        ],
        "orders": [
            {
                "constraint_name": "PRIMARY",
                "source_schema": "shop",
                "source_table": "orders",
                "source_column": "id",
                "target_schema": None,
                "target_table": None,
                "target_column": None,
                "extra": "auto_increment",
                "column_key": "PRI",
            },
            {
                "constraint_name": "orders_user_fk",
                "source_schema": "shop",
                "source_table": "orders",
                "source_column": "user_id",
                "target_schema": "shop",
                "target_table": "users",
                "target_column": "id",
                "extra": "",
                "column_key": "MUL",
            },
        ],
    }


@pytest.fixture
def fake_client(users_columns, orders_columns, mysql_fk_rows):
    """A MySQL-flavoured fake client with users and orders."""
    return FakeClient(
        tables={"users": users_columns, "orders": orders_columns},
        fk_rows=mysql_fk_rows,
    )


@pytest.fixture
def options(tmp_path):
    """Generator options writing into a temporary directory."""
    return GeneratorOptions(directory=str(tmp_path / "models"))


@pytest.fixture
def sqlite_db(tmp_path):
    """A SQLite database file with two related tables."""
    path = tmp_path / "blog.db"
    conn = sqlite3.connect(path)
    conn.executescript(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name VARCHAR(100) NOT NULL,
            active BOOLEAN NOT NULL DEFAULT 1,
            created_at DATETIME DEFAULT CURRENT_TIMESTAMP
        );
        CREATE TABLE posts (
            id INTEGER PRIMARY KEY,
            user_id INTEGER NOT NULL REFERENCES users(id),
            title TEXT DEFAULT 'untitled'
        );
        """
    )
    conn.commit()
    conn.close()
    return str(path)


@pytest.fixture
def history_path(tmp_path):
    """Path for an isolated run history database."""
    return str(tmp_path / "history.db")


@pytest.fixture
def make_client():
    """Factory for fake clients with custom tables and key rows."""
    return FakeClient
