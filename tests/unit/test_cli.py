import json

import pytest
from typer.testing import CliRunner

import trino_opa.cli as cli
from trino_opa.cli import app
from trino_opa.transports import InMemoryTransport, allow_all, deny_all


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("TRINO_OPA_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("TRINO_OPA_TRANSPORT", "inmemory")
    monkeypatch.delenv("TRINO_OPA_POLICY_URI", raising=False)
    monkeypatch.delenv("TRINO_OPA_POLICY_BATCHED_URI", raising=False)


def _use_transport(monkeypatch, make_access_control, transport):
    monkeypatch.setattr(
        cli, "create_access_control", lambda settings: make_access_control(transport)
    )


def test_check_allows():
    runner = CliRunner()
    result = runner.invoke(
        app, ["check", "AccessCatalog", "--user", "alice", "--catalog", "tpch"]
    )
    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert "ALLOW" in result.stdout


def test_check_denies_with_exit_code_1(monkeypatch, make_access_control):
    transport = InMemoryTransport(deny_all)
    _use_transport(monkeypatch, make_access_control, transport)

    runner = CliRunner()
    result = runner.invoke(
        app,
        ["check", "SelectFromColumns", "--user", "bob", "--group", "dev",
         "--catalog", "c", "--schema", "s", "--table", "t"],
    )

    assert result.exit_code == 1
    assert "DENY" in result.stdout
    document = transport.requests[0][1]["input"]
    assert document["context"]["identity"] == {"user": "bob", "groups": ["dev"]}
    assert document["action"]["resource"] == {
        "table": {"catalogName": "c", "schemaName": "s", "tableName": "t"}
    }


def test_check_service_error_exit_code_2(monkeypatch, make_access_control):
    _use_transport(
        monkeypatch, make_access_control, InMemoryTransport(allow_all, status_code=500)
    )

    runner = CliRunner()
    result = runner.invoke(app, ["check", "ExecuteQuery", "--user", "alice"])

    assert result.exit_code == 2
    assert "DENY" not in result.stdout
    assert "ALLOW" not in result.stdout


def test_filter_catalogs_prints_visible(monkeypatch, make_access_control):
    def policy(uri, document):
        return document["action"]["resource"]["catalog"]["name"] != "system"

    _use_transport(monkeypatch, make_access_control, InMemoryTransport(policy))

    runner = CliRunner()
    result = runner.invoke(
        app, ["filter-catalogs", "tpch", "system", "hive", "--user", "alice"]
    )

    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert result.stdout.split() == ["hive", "tpch"]


def test_show_input_prints_document():
    runner = CliRunner()
    result = runner.invoke(
        app,
        ["show-input", "ShowTables", "--user", "alice", "--catalog", "c",
         "--schema", "s", "--engine-version", "455"],
    )

    assert result.exit_code == 0, f"Command failed. Output: {result.stdout}"
    assert json.loads(result.stdout) == {
        "input": {
            "context": {
                "identity": {"user": "alice", "groups": []},
                "softwareStack": {"trinoVersion": "455"},
            },
            "action": {
                "operation": "ShowTables",
                "resource": {"schema": {"catalogName": "c", "schemaName": "s"}},
            },
        }
    }


def test_table_requires_catalog_and_schema():
    runner = CliRunner()
    result = runner.invoke(app, ["show-input", "DropTable", "--user", "alice", "--table", "t"])
    assert result.exit_code != 0
