"""Tests for the per-engine database clients."""

import sys
from unittest.mock import MagicMock

import duckdb
import pytest

from automodel_cli.config import GeneratorOptions
from automodel_cli.database.duckdb import DuckDBClient
from automodel_cli.database.factory import SUPPORTED_DIALECTS, create_client
from automodel_cli.database.mssql import MSSQLClient
from automodel_cli.database.mysql import MySQLClient
from automodel_cli.database.postgres import PostgresClient, _clean_default
from automodel_cli.errors import DatabaseConnectionError
from automodel_cli.sequelize.generator import ModelGenerator


def _stub_rows(client, rows):
    """Answer every query on a client with fixed rows, without a driver."""
    queries = []

    def execute(sql, params):
        queries.append((sql, tuple(params)))
        return rows

    client._connection = MagicMock()
    client._execute = execute
    return queries


@pytest.fixture
def duckdb_path(tmp_path):
    """DuckDB file with a users/posts schema."""
    path = str(tmp_path / "blog.duckdb")
    conn = duckdb.connect(path)
    conn.execute("CREATE SEQUENCE users_id_seq")
    conn.execute(
        """
        CREATE TABLE users (
            id INTEGER PRIMARY KEY DEFAULT nextval('users_id_seq'),
            email VARCHAR NOT NULL,
            created_at TIMESTAMP DEFAULT current_timestamp
        )
        """
    )
    conn.execute(
        """
        CREATE TABLE posts (
            id INTEGER PRIMARY KEY,
            user_id INTEGER REFERENCES users(id),
            title VARCHAR DEFAULT 'untitled'
        )
        """
    )
    conn.close()
    return path


class TestDuckDBClient:
    """Test raw metadata and generation against a DuckDB file."""

    def test_list_tables(self, duckdb_path):
        with DuckDBClient(duckdb_path) as client:
            assert client.list_tables() == ["posts", "users"]

    def test_describe_table(self, duckdb_path):
        with DuckDBClient(duckdb_path) as client:
            columns = client.describe_table("posts")

        assert list(columns) == ["id", "user_id", "title"]
        assert columns["id"].primary_key is True
        assert columns["id"].allow_null is False
        assert columns["user_id"].primary_key is False
        assert columns["title"].type == "VARCHAR"
        assert columns["title"].default_value == "untitled"

    def test_unknown_table(self, duckdb_path):
        with DuckDBClient(duckdb_path) as client:
            with pytest.raises(LookupError):
                client.describe_table("missing")

    @pytest.mark.asyncio
    async def test_generates_models(self, duckdb_path, tmp_path):
        """Test keys, references and defaults come through the constraint catalog."""
        options = GeneratorOptions(directory=str(tmp_path / "models"), spaces=True, indentation=2)
        with DuckDBClient(duckdb_path) as client:
            result = await ModelGenerator(client, options).run(write=False)

        assert list(result.models) == ["posts", "users"]
        assert result.references_count == 1

        users = result.models["users"]
        assert (
            "  id: {\n"
            "    type: Sequelize.INTEGER,\n"
            "    allowNull: false,\n"
            "    primaryKey: true,\n"
            "    autoIncrement: true\n"
            "  },\n"
        ) in users
        assert "nextval" not in users
        assert "sequelize.literal('current_timestamp')" in users.lower()

        posts = result.models["posts"]
        assert (
            "  user_id: {\n"
            "    type: Sequelize.INTEGER,\n"
            "    allowNull: true,\n"
            "    references: {\n"
            "      model: 'users',\n"
            "      key: 'id'\n"
            "    }\n"
            "  },\n"
        ) in posts
        assert "defaultValue: 'untitled'" in posts
        assert "autoIncrement" not in posts


class TestPostgresClient:
    """Test postgres default cleanup and column description."""

    @pytest.mark.parametrize(
        "value,data_type,expected",
        [
            ("'abc'::character varying", "CHARACTER VARYING(255)", "abc"),
            ("'it''s'::text", "TEXT", "it's"),
            ("'{}'::jsonb", "JSONB", "{}"),
            ("'2020-01-01'::date", "DATE", "2020-01-01"),
            ("nextval('users_id_seq'::regclass)", "INTEGER", "nextval('users_id_seq'::regclass)"),
            ("true", "BOOLEAN", True),
            ("false", "BOOLEAN", False),
            ("true", "TEXT", "true"),
            ("now()", "TIMESTAMP WITH TIME ZONE", "now()"),
            ("0", "INTEGER", "0"),
            (None, "TEXT", None),
        ],
    )
    def test_clean_default(self, value, data_type, expected):
        assert _clean_default(value, data_type) == expected

    def test_describe_table(self):
        client = PostgresClient("shop")
        queries = _stub_rows(client, [
            {"Constraint": "PRIMARY KEY", "Field": "id", "Default": "nextval('orders_id_seq'::regclass)",
             "Null": "NO", "Type": "integer", "special": None},
            {"Constraint": None, "Field": "status", "Default": "'new'::order_status",
             "Null": "YES", "Type": "USER-DEFINED", "special": ["new", "paid"]},
        ])

        columns = client.describe_table("orders")

        assert queries[0][1] == ("orders", "public")
        assert columns["id"].type == "INTEGER"
        assert columns["id"].primary_key is True
        assert columns["status"].type == "USER-DEFINED"
        assert columns["status"].special == ["new", "paid"]
        assert columns["status"].default_value == "new"


class TestMySQLClient:
    """Test SHOW FULL COLUMNS translation."""

    def test_member_literals_keep_their_case(self):
        client = MySQLClient("shop")
        _stub_rows(client, [
            {"Field": "id", "Type": "int(11)", "Null": "NO", "Default": None, "Key": "PRI"},
            {"Field": "status", "Type": "enum('New','Paid')", "Null": "NO", "Default": "New", "Key": ""},
            {"Field": "flags", "Type": b"set('Red','Blue')", "Null": "YES", "Default": None, "Key": ""},
        ])

        columns = client.describe_table("orders")

        assert columns["id"].type == "INT(11)"
        assert columns["id"].primary_key is True
        assert columns["status"].type == "enum('New','Paid')"
        assert columns["flags"].type == "set('Red','Blue')"
        assert columns["flags"].allow_null is True


class TestMSSQLClient:
    """Test SQL Server column description and table listing."""

    def test_describe_table(self):
        client = MSSQLClient("erp")
        queries = _stub_rows(client, [
            {"name": "id", "data_type": "uniqueidentifier", "length": None, "is_nullable": "NO",
             "column_default": "(newid())", "constraint_type": "PRIMARY KEY"},
            {"name": "code", "data_type": "nvarchar", "length": 20, "is_nullable": "NO",
             "column_default": None, "constraint_type": None},
            {"name": "notes", "data_type": "varchar", "length": -1, "is_nullable": "YES",
             "column_default": None, "constraint_type": None},
        ])

        columns = client.describe_table("customers")

        assert queries[0][1] == ("customers", "dbo")
        assert columns["id"].type == "UNIQUEIDENTIFIER"
        assert columns["id"].primary_key is True
        assert columns["id"].default_value == "(newid())"
        assert columns["code"].type == "NVARCHAR(20)"
        assert columns["notes"].type == "VARCHAR(MAX)"

    def test_unknown_table(self):
        client = MSSQLClient("erp")
        _stub_rows(client, [])
        with pytest.raises(LookupError):
            client.describe_table("missing")

    def test_list_tables_skips_diagrams(self):
        client = MSSQLClient("erp")
        _stub_rows(client, [{"table_name": "customers"}, {"table_name": "sysdiagrams"}])
        assert client.list_tables() == ["customers"]

    def test_missing_driver(self, monkeypatch):
        monkeypatch.setitem(sys.modules, "pymssql", None)
        with pytest.raises(ImportError, match="pip install pymssql"):
            MSSQLClient("erp").connect()


class TestCreateClient:
    """Test client selection."""

    @pytest.mark.parametrize(
        "dialect,cls",
        [
            ("postgres", PostgresClient),
            ("postgresql", PostgresClient),
            ("mysql", MySQLClient),
            ("mariadb", MySQLClient),
            ("mssql", MSSQLClient),
            ("sqlserver", MSSQLClient),
        ],
    )
    def test_server_engines(self, dialect, cls):
        client = create_client(dialect, database="shop")
        assert isinstance(client, cls)
        assert client.dialect in SUPPORTED_DIALECTS

    def test_mssql_defaults(self):
        client = create_client("mssql", database="erp", user="sa")
        assert (client.host, client.port, client.schema_name) == ("localhost", 1433, "dbo")

    def test_duckdb_needs_no_database_name(self, duckdb_path):
        assert isinstance(create_client("duckdb", path=duckdb_path), DuckDBClient)

    def test_database_required(self):
        with pytest.raises(DatabaseConnectionError, match="required for mssql"):
            create_client("mssql")
