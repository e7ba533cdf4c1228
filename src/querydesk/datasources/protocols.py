from typing import Any, Dict, List, Protocol, Sequence, runtime_checkable

from querydesk.common.contracts import CommandResult, StatementResult


@runtime_checkable
class WarehouseConnection(Protocol):
    """Contract for a single-use warehouse connection."""

    def connect(self) -> None:
        """Open the session. Raises BackendConnectionError."""
        ...

    def execute(self, statement: str) -> StatementResult:
        """Run one statement. Raises BackendExecutionError."""
        ...

    def destroy(self) -> None:
        """Release the session. Idempotent, never raises."""
        ...


@runtime_checkable
class ClusterClient(Protocol):
    """Contract for the orchestration API. Objects are JSON-shaped dicts."""

    def list_pods(self) -> List[Dict[str, Any]]:
        ...

    def list_nodes(self) -> List[Dict[str, Any]]:
        ...

    def list_deployments(self) -> List[Dict[str, Any]]:
        ...

    def list_services(self) -> List[Dict[str, Any]]:
        ...

    def list_namespaces(self) -> List[Dict[str, Any]]:
        ...

    def list_namespaced_pods(self, namespace: str) -> List[Dict[str, Any]]:
        ...


@runtime_checkable
class CommandRunner(Protocol):
    """Contract for invoking the external command-line tool."""

    def run(self, verb: str, args: Sequence[str]) -> CommandResult:
        ...
