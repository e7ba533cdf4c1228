"""
Resource-query translator.

Maps the fixed phrases ``SELECT * FROM PODS|NODES|DEPLOYMENTS|SERVICES`` onto
cluster list calls and projects every returned object into a flat row. This is
a lookup table, not a parser: no WHERE, JOIN, projection list or ordering.
Adding a resource kind means adding one entry to ``RESOURCE_QUERIES``.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from querydesk.common.errors import UnsupportedQueryError
from querydesk.datasources.protocols import ClusterClient

Row = Dict[str, Any]
Projection = Callable[[Dict[str, Any]], Row]

SUPPORTED_GRAMMAR = "SELECT * FROM PODS|DEPLOYMENTS|SERVICES|NODES"


class ResourceKind(str, Enum):
    PODS = "PODS"
    DEPLOYMENTS = "DEPLOYMENTS"
    SERVICES = "SERVICES"
    NODES = "NODES"


def _get(obj: Any, *path: str, default: Any = "") -> Any:
    """Walks nested dicts, returning ``default`` for any missing or null step."""
    current = obj
    for key in path:
        if not isinstance(current, dict):
            return default
        current = current.get(key)
        if current is None:
            return default
    return current


def _count(obj: Any, *path: str) -> int:
    return _get(obj, *path, default=0) or 0


def _ready_condition(node: Dict[str, Any]) -> str:
    for condition in _get(node, "status", "conditions", default=[]):
        if isinstance(condition, dict) and condition.get("type") == "Ready":
            return condition.get("status") or "Unknown"
    return "Unknown"


def _render_ports(service: Dict[str, Any]) -> str:
    ports = _get(service, "spec", "ports", default=[])
    if not ports:
        return "N/A"
    return ", ".join(
        f"{_get(p, 'port')}:{_get(p, 'targetPort')}/{_get(p, 'protocol')}" for p in ports
    )


def project_pod(pod: Dict[str, Any]) -> Row:
    statuses = _get(pod, "status", "containerStatuses", default=[])
    return {
        "name": _get(pod, "metadata", "name"),
        "namespace": _get(pod, "metadata", "namespace"),
        "status": _get(pod, "status", "phase"),
        "created": _get(pod, "metadata", "creationTimestamp"),
        "restarts": _count(statuses[0], "restartCount") if statuses else 0,
    }


def project_node(node: Dict[str, Any]) -> Row:
    return {
        "name": _get(node, "metadata", "name"),
        "status": _ready_condition(node),
        "version": _get(node, "status", "nodeInfo", "kubeletVersion"),
        "os": _get(node, "status", "nodeInfo", "osImage"),
        "arch": _get(node, "status", "nodeInfo", "architecture"),
        "created": _get(node, "metadata", "creationTimestamp"),
    }


def project_deployment(deployment: Dict[str, Any]) -> Row:
    return {
        "name": _get(deployment, "metadata", "name"),
        "namespace": _get(deployment, "metadata", "namespace"),
        "replicas": _count(deployment, "status", "replicas"),
        "ready": _count(deployment, "status", "readyReplicas"),
        "available": _count(deployment, "status", "availableReplicas"),
        "created": _get(deployment, "metadata", "creationTimestamp"),
    }


def project_service(service: Dict[str, Any]) -> Row:
    return {
        "name": _get(service, "metadata", "name"),
        "namespace": _get(service, "metadata", "namespace"),
        "type": _get(service, "spec", "type"),
        "clusterIP": _get(service, "spec", "clusterIP"),
        "ports": _render_ports(service),
    }


def project_node_summary(node: Dict[str, Any]) -> Row:
    """Short node view used by the connection probe."""
    row = project_node(node)
    return {key: row[key] for key in ("name", "status", "version", "os")}


def project_namespace(namespace: Dict[str, Any]) -> Row:
    return {
        "name": _get(namespace, "metadata", "name"),
        "status": _get(namespace, "status", "phase"),
        "created": _get(namespace, "metadata", "creationTimestamp"),
    }


def project_namespaced_pod(pod: Dict[str, Any]) -> Row:
    statuses = _get(pod, "status", "containerStatuses", default=[])
    return {
        "name": _get(pod, "metadata", "name"),
        "status": _get(pod, "status", "phase"),
        "ready": sum(1 for s in statuses if isinstance(s, dict) and s.get("ready")),
        "restarts": _count(statuses[0], "restartCount") if statuses else 0,
        "age": _get(pod, "metadata", "creationTimestamp"),
    }


@dataclass(frozen=True)
class ResourceQuery:
    list_call: Callable[[ClusterClient], List[Dict[str, Any]]]
    project: Projection


RESOURCE_QUERIES: Dict[ResourceKind, ResourceQuery] = {
    ResourceKind.PODS: ResourceQuery(lambda c: c.list_pods(), project_pod),
    ResourceKind.DEPLOYMENTS: ResourceQuery(lambda c: c.list_deployments(), project_deployment),
    ResourceKind.SERVICES: ResourceQuery(lambda c: c.list_services(), project_service),
    ResourceKind.NODES: ResourceQuery(lambda c: c.list_nodes(), project_node),
}


def match_resource(statement: str) -> Optional[ResourceKind]:
    """Returns the resource kind named by ``statement``, or None if unsupported."""
    normalized = statement.strip().upper()
    for kind in RESOURCE_QUERIES:
        if normalized.startswith(f"SELECT * FROM {kind.value}"):
            return kind
    return None


def translate(statement: str, cluster: ClusterClient) -> List[Row]:
    """Runs the list call named by ``statement`` and projects its objects.

    Raises:
        UnsupportedQueryError: If the statement is outside the grammar.
    """
    kind = match_resource(statement)
    if kind is None:
        raise UnsupportedQueryError(f"Unsupported SQL query. Try: {SUPPORTED_GRAMMAR}")
    query = RESOURCE_QUERIES[kind]
    return [query.project(obj) for obj in query.list_call(cluster)]
