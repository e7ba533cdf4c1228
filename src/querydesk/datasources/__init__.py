"""Backend clients: Snowflake warehouse, Kubernetes API and kubectl."""
from querydesk.datasources.protocols import ClusterClient, CommandRunner, WarehouseConnection
from querydesk.datasources.warehouse import SnowflakeConnection, warehouse_session
from querydesk.datasources.cluster import KubernetesClusterClient
from querydesk.datasources.kubectl import KubectlRunner, parse_command_output

__all__ = [
    "ClusterClient",
    "CommandRunner",
    "WarehouseConnection",
    "SnowflakeConnection",
    "warehouse_session",
    "KubernetesClusterClient",
    "KubectlRunner",
    "parse_command_output",
]
