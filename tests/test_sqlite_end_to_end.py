"""End-to-end generation against a real SQLite database file."""

import pytest

from automodel_cli.config import GeneratorOptions
from automodel_cli.database.factory import create_client
from automodel_cli.database.sqlite import SQLiteClient
from automodel_cli.sequelize.generator import ModelGenerator


EXPECTED_POSTS = (
    "import Sequelize from 'sequelize';\n"
    "\n"
    "import { ModelBuilder } from 'hc-database/sequelize/modelBuilder.js';\n"
    "\n"
    "export const Posts = new ModelBuilder().build('posts', {\n"
    "  id: {\n"
    "    type: Sequelize.INTEGER,\n"
    "    allowNull: true,\n"
    "    primaryKey: true\n"
    "  },\n"
    "  user_id: {\n"
    "    type: Sequelize.INTEGER,\n"
    "    allowNull: false,\n"
    "    references: {\n"
    "      model: 'users',\n"
    "      key: 'id'\n"
    "    }\n"
    "  },\n"
    "  title: {\n"
    "    type: Sequelize.TEXT,\n"
    "    allowNull: true,\n"
    "    defaultValue: 'untitled'\n"
    "  }\n"
    "}, {\n"
    "  freezeTableName: true,\n"
    "  name: {\n"
    "    singular: 'posts',\n"
    "    plural: 'posts'\n"
    "  }\n"
    "});\n"
)


class TestSQLiteClient:
    """Test raw metadata from sqlite3."""

    def test_list_tables_skips_internal(self, sqlite_db):
        """Test sqlite_sequence and friends are not listed."""
        with SQLiteClient(sqlite_db) as client:
            assert client.list_tables() == ["posts", "users"]

    def test_describe_table(self, sqlite_db):
        with SQLiteClient(sqlite_db) as client:
            columns = client.describe_table("users")

        assert list(columns) == ["id", "name", "active", "created_at"]
        assert columns["id"].primary_key is True
        assert columns["name"].type == "VARCHAR(100)"
        assert columns["name"].allow_null is False
        assert columns["active"].default_value == "1"
        assert columns["created_at"].default_value == "CURRENT_TIMESTAMP"

    def test_quoted_default_unwrapped(self, sqlite_db):
        with SQLiteClient(sqlite_db) as client:
            assert client.describe_table("posts")["title"].default_value == "untitled"

    def test_missing_table(self, sqlite_db):
        with SQLiteClient(sqlite_db) as client:
            with pytest.raises(LookupError):
                client.describe_table("comments")

    def test_database_name(self, sqlite_db):
        assert SQLiteClient(sqlite_db).database_name == "blog"
        assert SQLiteClient().database_name == "memory"

    def test_factory(self, sqlite_db):
        client = create_client("sqlite", path=sqlite_db)
        assert isinstance(client, SQLiteClient)
        assert client.database_path == sqlite_db


class TestSQLiteGeneration:
    """Test generated models for the blog database."""

    @pytest.mark.asyncio
    async def test_generate_blog_models(self, sqlite_db, tmp_path):
        options = GeneratorOptions(
            directory=str(tmp_path / "models"),
            indentation=2,
            spaces=True,
            additional={"name": True},
        )
        with SQLiteClient(sqlite_db) as client:
            result = await ModelGenerator(client, options).run()

        assert [p.name for p in result.paths] == ["posts.js", "users.js"]
        assert (tmp_path / "models" / "posts.js").read_text(encoding="utf-8") == EXPECTED_POSTS
        assert result.references_count == 1

    @pytest.mark.asyncio
    async def test_users_model(self, sqlite_db, tmp_path):
        options = GeneratorOptions(directory=str(tmp_path))
        with SQLiteClient(sqlite_db) as client:
            result = await ModelGenerator(client, options).run(write=False)

        users = result.models["users"]
        assert "\tname: {\n\t\ttype: Sequelize.TEXT,\n\t\tallowNull: false\n\t},\n" in users
        assert "\t\ttype: Sequelize.BOOLEAN,\n\t\tallowNull: false,\n\t\tdefaultValue: '1'\n" in users
        assert "defaultValue: sequelize.literal('CURRENT_TIMESTAMP')" in users
        assert "autoIncrement" not in users
