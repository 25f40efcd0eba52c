"""Tests for the generation pipeline."""

import os

import pytest

from automodel_cli.config import GeneratorOptions
from automodel_cli.errors import IntrospectionError, WriteError
from automodel_cli.sequelize.generator import ModelGenerator
from automodel_cli.sequelize.writer import OutputWriter


class TestModelGenerator:
    """Test the full introspect, render and write flow against a fake client."""

    @pytest.mark.asyncio
    async def test_run_writes_one_file_per_table(self, fake_client, options):
        """Test every table gets a .js file in the output directory."""
        result = await ModelGenerator(fake_client, options).run()

        assert result.tables_count == 2
        assert sorted(p.name for p in result.paths) == ["orders.js", "users.js"]
        for path in result.paths:
            assert path.read_text(encoding="utf-8") == result.models[path.stem]

    @pytest.mark.asyncio
    async def test_counts(self, fake_client, options):
        result = await ModelGenerator(fake_client, options).run(write=False)

        assert result.columns_count == 8
        assert result.references_count == 1
        assert result.paths == []
        assert not os.path.exists(options.directory)

    @pytest.mark.asyncio
    async def test_models_follow_table_order(self, fake_client, options):
        result = await ModelGenerator(fake_client, options).run(write=False)
        assert list(result.models) == ["users", "orders"]

    @pytest.mark.asyncio
    async def test_serial_key_has_no_default(self, fake_client, options):
        """Test the auto-increment id drops its raw default."""
        result = await ModelGenerator(fake_client, options).run(write=False)
        orders = result.models["orders"]

        assert (
            "\tid: {\n"
            "\t\ttype: Sequelize.INTEGER(11),\n"
            "\t\tallowNull: false,\n"
            "\t\tprimaryKey: true,\n"
            "\t\tautoIncrement: true\n"
            "\t},\n"
        ) in orders

    @pytest.mark.asyncio
    async def test_foreign_key_reference(self, fake_client, options):
        result = await ModelGenerator(fake_client, options).run(write=False)
        orders = result.models["orders"]

        assert (
            "\tuser_id: {\n"
            "\t\ttype: Sequelize.INTEGER(11),\n"
            "\t\tallowNull: false,\n"
            "\t\treferences: {\n"
            "\t\t\tmodel: 'users',\n"
            "\t\t\tkey: 'id'\n"
            "\t\t}\n"
            "\t},\n"
        ) in orders
        assert "type: Sequelize.ENUM('new','paid')," in orders
        assert "defaultValue: 'new'" in orders

    @pytest.mark.asyncio
    async def test_users_defaults(self, fake_client, options):
        result = await ModelGenerator(fake_client, options).run(write=False)
        users = result.models["users"]

        assert "export const Users = new ModelBuilder().build('users', {" in users
        assert "\t\ttype: Sequelize.BOOLEAN,\n\t\tallowNull: false,\n\t\tdefaultValue: 1\n" in users
        assert "defaultValue: sequelize.literal('CURRENT_TIMESTAMP')" in users

    @pytest.mark.asyncio
    async def test_reruns_are_byte_identical(self, fake_client, options):
        first = await ModelGenerator(fake_client, options).run(write=False)
        second = await ModelGenerator(fake_client, options).run(write=False)
        assert dict(first.models) == dict(second.models)

    @pytest.mark.asyncio
    async def test_models_are_read_only(self, fake_client, options):
        result = await ModelGenerator(fake_client, options).run(write=False)
        with pytest.raises(TypeError):
            result.models["users"] = ""

    @pytest.mark.asyncio
    async def test_table_filter(self, fake_client, tmp_path):
        options = GeneratorOptions(directory=str(tmp_path), tables=["orders"])
        result = await ModelGenerator(fake_client, options).run(write=False)
        assert list(result.models) == ["orders"]

    @pytest.mark.asyncio
    async def test_introspection_failure_aborts_after_siblings(self, fake_client, options):
        """Test a describe failure is raised once every worker has finished."""
        fake_client.failing_tables = {"users"}
        generator = ModelGenerator(fake_client, options)

        with pytest.raises(IntrospectionError) as exc_info:
            await generator.run()

        assert exc_info.value.table == "users"
        assert "orders" in generator.tables
        assert not os.path.exists(options.directory)

    @pytest.mark.asyncio
    async def test_foreign_key_failure_is_not_fatal(self, fake_client, options):
        """Test a failed key query leaves that table without references."""
        fake_client.failing_fk_tables = {"orders"}
        result = await ModelGenerator(fake_client, options).run(write=False)

        assert "references" not in result.models["orders"]
        assert "autoIncrement" not in result.models["orders"]
        assert "autoIncrement: true" in result.models["users"]

    @pytest.mark.asyncio
    async def test_unknown_dialect_skips_references(self, make_client, users_columns, options):
        client = make_client(tables={"users": users_columns}, dialect="oracle")
        generator = ModelGenerator(client, options)
        result = await generator.run(write=False)

        assert generator.dialect is None
        assert client.queries == []
        assert "primaryKey: true" in result.models["users"]

    @pytest.mark.asyncio
    async def test_empty_database(self, make_client, options):
        result = await ModelGenerator(make_client(tables={}), options).run()
        assert result.tables_count == 0
        assert result.paths == []


class TestOutputWriter:
    """Test model persistence."""

    def test_path_for(self, tmp_path):
        writer = OutputWriter(str(tmp_path), ".ts")
        assert writer.path_for("users") == tmp_path / "users.ts"

    @pytest.mark.asyncio
    async def test_write_all_creates_directory(self, tmp_path):
        writer = OutputWriter(str(tmp_path / "a" / "b"))
        paths = await writer.write_all({"users": "x\n"})

        assert paths == [tmp_path / "a" / "b" / "users.js"]
        assert paths[0].read_text(encoding="utf-8") == "x\n"

    @pytest.mark.asyncio
    async def test_write_failure(self, tmp_path):
        """Test an unwritable target raises WriteError with the path."""
        blocker = tmp_path / "models"
        blocker.write_text("not a directory")
        writer = OutputWriter(str(blocker))

        with pytest.raises(WriteError) as exc_info:
            await writer.write_all({"users": "x\n"})

        assert exc_info.value.code == "WRITE_ERROR"
        assert exc_info.value.path == str(blocker)
