"""Tests for the command-line interface."""

import pytest
import yaml
from click.testing import CliRunner

from schema_discovery import cli as cli_module
from schema_discovery.cli import cli
from schema_discovery.discoverer import SchemaDiscoverer


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "discovery.yaml"
    path.write_text("connection:\n  driver: odbc\n  connection_string: DSN=test\n")
    return path


@pytest.fixture
def patched(monkeypatch, sales_source):
    """Route the CLI's discoverer to the in-memory sales source."""
    monkeypatch.setattr(
        cli_module.SchemaDiscoverer,
        "from_config",
        classmethod(lambda cls, config, logger=None: SchemaDiscoverer(sales_source, logger=logger)),
    )
    return sales_source


class TestCli:
    """Tests for the schema-discovery commands."""

    def test_schemas(self, config_file, patched):
        result = CliRunner().invoke(cli, ["-c", str(config_file), "schemas"])
        assert result.exit_code == 0
        assert "SALES" in result.output
        assert "2 found" in result.output

    def test_tables(self, config_file, patched):
        result = CliRunner().invoke(cli, ["-c", str(config_file), "tables", "--schema", "SALES"])
        assert result.exit_code == 0
        assert "SALES.ORDERS" in result.output
        assert "HR.EMPLOYEES" not in result.output

    def test_describe_writes_yaml(self, config_file, patched, tmp_path):
        output = tmp_path / "orders.yaml"
        result = CliRunner().invoke(
            cli,
            ["-c", str(config_file), "describe", "ORDERS", "--schema", "SALES", "--output", str(output)],
        )
        assert result.exit_code == 0

        data = yaml.safe_load(output.read_text())
        assert data["name"] == "ORDERS"
        assert [f["name"] for f in data["fields"]] == ["ID", "AMOUNT"]
        assert data["fields"][0]["is_primary_key"] is True

    def test_describe_missing_table(self, config_file, patched):
        result = CliRunner().invoke(cli, ["-c", str(config_file), "describe", "NOPE", "--schema", "SALES"])
        assert result.exit_code == 2
        assert "Table not found" in result.output

    def test_bad_config(self, tmp_path):
        result = CliRunner().invoke(cli, ["-c", str(tmp_path / "missing.yaml"), "catalogs"])
        assert result.exit_code == 1
        assert "Configuration file not found" in result.output
