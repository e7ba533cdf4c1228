import time

import pytest

from querydesk.common.contracts import CommandResult, StatementResult
from querydesk.common.resilience import CLUSTER_BREAKER, WAREHOUSE_BREAKER
from querydesk.execution.dispatcher import QueryDispatcher


class FakeConnection:
    """In-memory warehouse connection recording its lifecycle."""

    def __init__(self, result=None, execute_error=None, connect_error=None, delay=0.0):
        self.result = result if result is not None else StatementResult()
        self.execute_error = execute_error
        self.connect_error = connect_error
        self.delay = delay
        self.connected = 0
        self.destroyed = 0
        self.statements = []

    def connect(self):
        self.connected += 1
        if self.connect_error:
            raise self.connect_error

    def execute(self, statement):
        self.statements.append(statement)
        if self.delay:
            time.sleep(self.delay)
        if self.execute_error:
            raise self.execute_error
        return self.result

    def destroy(self):
        self.destroyed += 1


class FakeCluster:
    """Orchestration client returning canned JSON-shaped objects."""

    def __init__(self, pods=None, nodes=None, deployments=None, services=None,
                 namespaces=None, error=None):
        self.pods = pods or []
        self.nodes = nodes or []
        self.deployments = deployments or []
        self.services = services or []
        self.namespaces = namespaces or []
        self.error = error
        self.calls = []

    def _answer(self, name, items):
        self.calls.append(name)
        if self.error:
            raise self.error
        return items

    def list_pods(self):
        return self._answer("list_pods", self.pods)

    def list_nodes(self):
        return self._answer("list_nodes", self.nodes)

    def list_deployments(self):
        return self._answer("list_deployments", self.deployments)

    def list_services(self):
        return self._answer("list_services", self.services)

    def list_namespaces(self):
        return self._answer("list_namespaces", self.namespaces)

    def list_namespaced_pods(self, namespace):
        self.calls.append(f"list_namespaced_pods:{namespace}")
        if self.error:
            raise self.error
        return [p for p in self.pods if p.get("metadata", {}).get("namespace") == namespace]


class FakeRunner:
    """Command runner that never spawns a process."""

    def __init__(self, result=None, error=None):
        self.result = result or CommandResult(exit_code=0, stdout="")
        self.error = error
        self.calls = []

    def run(self, verb, args):
        self.calls.append((verb, list(args)))
        if self.error:
            raise self.error
        return self.result


@pytest.fixture(autouse=True)
def reset_breakers():
    WAREHOUSE_BREAKER.close()
    CLUSTER_BREAKER.close()
    yield
    WAREHOUSE_BREAKER.close()
    CLUSTER_BREAKER.close()


@pytest.fixture
def connection():
    return FakeConnection()


@pytest.fixture
def cluster():
    return FakeCluster()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def dispatcher(connection, cluster, runner):
    return QueryDispatcher(
        warehouse_factory=lambda: connection,
        cluster=cluster,
        runner=runner,
    )


def _make_pod(name, namespace="default", phase="Running", restarts=None, ready=True):
    pod = {
        "metadata": {"name": name, "namespace": namespace, "creationTimestamp": "2024-01-01T00:00:00Z"},
        "status": {"phase": phase},
    }
    if restarts is not None:
        pod["status"]["containerStatuses"] = [{"restartCount": restarts, "ready": ready}]
    return pod


def _make_node(name, ready="True"):
    return {
        "metadata": {"name": name, "creationTimestamp": "2024-01-01T00:00:00Z"},
        "status": {
            "conditions": [{"type": "MemoryPressure", "status": "False"}, {"type": "Ready", "status": ready}],
            "nodeInfo": {"kubeletVersion": "v1.29.0", "osImage": "Amazon Linux 2", "architecture": "amd64"},
        },
    }


@pytest.fixture
def make_pod():
    return _make_pod


@pytest.fixture
def make_node():
    return _make_node
