from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from querydesk.cli import app
from querydesk.common.contracts import CommandResult, StatementResult

cli = CliRunner()


@pytest.fixture
def patched_dispatcher(dispatcher):
    with patch("querydesk.cli.QueryDispatcher", return_value=dispatcher):
        yield dispatcher


class TestCli:

    def test_run_warehouse_query(self, patched_dispatcher, connection):
        connection.result = StatementResult(columns=["ID"], rows=[[7]])
        result = cli.invoke(app, ["run", "SELECT 7 AS ID"])

        assert result.exit_code == 0
        assert "1 row(s)" in result.stdout
        assert connection.statements == ["SELECT 7 AS ID"]

    def test_run_cluster_command(self, patched_dispatcher, runner):
        runner.result = CommandResult(exit_code=0, stdout="NAME STATUS\nweb Running\n")
        result = cli.invoke(app, ["run", "get pods", "--target", "cluster", "--mode", "kubectl"])

        assert result.exit_code == 0
        assert runner.calls == [("get", ["pods"])]
        assert "Running" in result.stdout

    def test_failure_exits_non_zero(self, patched_dispatcher):
        result = cli.invoke(app, ["run", "DROP TABLE users"])

        assert result.exit_code == 1
        assert "Query blocked" in result.stdout

    def test_json_output(self, patched_dispatcher):
        result = cli.invoke(app, ["run", "delete pod web", "-t", "cluster", "--json"])

        assert result.exit_code == 1
        assert '"success": false' in result.stdout
        assert '"error": "Command not allowed"' in result.stdout

    def test_ping(self, patched_dispatcher, cluster, make_node):
        cluster.nodes = [make_node("n1")]
        result = cli.invoke(app, ["ping", "cluster"])

        assert result.exit_code == 0
        assert "Successfully connected to EKS cluster" in result.stdout

    def test_commands(self):
        result = cli.invoke(app, ["commands"])

        assert result.exit_code == 0
        assert "kubectl" in result.stdout
        assert "SELECT" in result.stdout
