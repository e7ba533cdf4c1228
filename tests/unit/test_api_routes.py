import pytest
from fastapi.testclient import TestClient

from querydesk.common.contracts import CommandResult, StatementResult
from querydesk.common.errors import ExecutionTimeoutError
from querydesk_api.container import Container
from querydesk_api.main import app


@pytest.fixture
def api(dispatcher):
    app.state.container = Container(dispatcher)
    yield TestClient(app)
    app.state.container = None


class TestWarehouseRoutes:

    def test_execute(self, api, connection):
        connection.result = StatementResult(columns=["ID"], rows=[[1], [2]])
        response = api.post("/api/snowflake/execute", json={"query": "SELECT id FROM t"})

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"] == {"columns": ["ID"], "rows": [[1], [2]], "rowCount": 2}
        assert body["executionTime"].endswith("ms")
        assert body["query"] == "SELECT id FROM t"

    @pytest.mark.parametrize("payload", [{}, {"query": ""}, {"query": "   "}, {"query": 12}])
    def test_invalid_query(self, api, payload):
        response = api.post("/api/snowflake/execute", json=payload)

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Invalid query",
            "message": "Query must be a non-empty string",
        }

    def test_blocked(self, api, connection):
        response = api.post("/api/snowflake/execute", json={"query": "DELETE FROM accounts WHERE 1=1"})

        assert response.status_code == 400
        assert response.json()["error"] == "Query blocked"
        assert connection.connected == 0

    def test_timeout_maps_to_504(self, api, connection):
        connection.execute_error = ExecutionTimeoutError("Operation timed out after 60 seconds.")
        response = api.post("/api/snowflake/execute", json={"query": "SELECT 1"})
        assert response.status_code == 504

    def test_binary_cells_serialize(self, api, connection):
        connection.result = StatementResult(columns=["B"], rows=[[b"\xff\x00"]])
        response = api.post("/api/snowflake/execute", json={"query": "SELECT TO_BINARY('FF00', 'HEX') AS B"})

        assert response.status_code == 200
        assert response.json()["data"]["rows"] == [["ff00"]]

    def test_test_connection(self, api, connection):
        connection.result = StatementResult(columns=["VERSION", "USER", "DATABASE"], rows=[["8.1", "A", "DB"]])
        response = api.get("/api/snowflake/test-connection")

        assert response.status_code == 200
        assert response.json()["message"] == "Successfully connected to Snowflake"

    def test_schemas_and_tables(self, api, connection):
        connection.result = StatementResult(columns=["SCHEMA_NAME"], rows=[["PUBLIC"]])
        assert api.get("/api/snowflake/schemas").json()["data"]["rows"] == [["PUBLIC"]]
        assert api.get("/api/snowflake/tables").status_code == 200


class TestClusterRoutes:

    def test_kubectl_execute(self, api, runner):
        runner.result = CommandResult(exit_code=0, stdout="NAME STATUS\nweb Running\n")
        response = api.post("/api/eks/execute", json={"query": "get pods", "queryType": "kubectl"})

        assert response.status_code == 200
        assert response.json()["queryType"] == "kubectl"
        assert response.json()["data"]["columns"] == ["NAME", "STATUS"]

    def test_query_type_defaults_to_kubectl(self, api, runner):
        runner.result = CommandResult(exit_code=0, stdout="ok")
        response = api.post("/api/eks/execute", json={"query": "cluster-info"})
        assert response.json()["queryType"] == "kubectl"

    def test_resource_query(self, api, cluster, make_pod):
        cluster.pods = [make_pod("web")]
        response = api.post("/api/eks/execute", json={"query": "select * from pods", "queryType": "sql"})

        assert response.status_code == 200
        assert response.json()["data"]["rowCount"] == 1

    def test_unknown_query_type(self, api, runner):
        response = api.post("/api/eks/execute", json={"query": "get pods", "queryType": "graphql"})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": "Invalid query",
            "message": 'Invalid query type. Use "kubectl" or "sql"',
            "query": "get pods",
        }
        assert runner.calls == []

    def test_command_not_allowed(self, api):
        response = api.post("/api/eks/execute", json={"query": "delete pod web"})

        assert response.status_code == 400
        assert response.json()["error"] == "Command not allowed"

    def test_backend_failure_maps_to_500(self, api, cluster):
        cluster.error = Exception("connect ECONNREFUSED")
        response = api.post("/api/eks/execute", json={"query": "SELECT * FROM NODES", "queryType": "sql"})

        assert response.status_code == 500
        assert response.json()["message"] == "connect ECONNREFUSED"

    def test_namespaces(self, api, cluster, make_pod):
        cluster.namespaces = [{"metadata": {"name": "prod"}, "status": {"phase": "Active"}}]
        cluster.pods = [make_pod("web", namespace="prod")]

        assert api.get("/api/eks/namespaces").json()["data"]["rows"] == [["prod", "Active", ""]]
        pods = api.get("/api/eks/namespaces/prod/pods").json()
        assert pods["data"]["rows"][0][0] == "web"
        assert cluster.calls[-1] == "list_namespaced_pods:prod"

    def test_test_connection(self, api, cluster, make_node):
        cluster.nodes = [make_node("n1")]
        body = api.get("/api/eks/test-connection").json()

        assert body["message"] == "Successfully connected to EKS cluster"
        assert body["data"]["rowCount"] == 1


def test_health(api):
    response = api.get("/api/health")
    assert response.status_code == 200
    assert response.json()["success"] is True
