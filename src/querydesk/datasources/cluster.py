"""
Kubernetes cluster backend.

List calls return objects in their JSON form (camelCase keys, ISO timestamps),
the same shape the API server sends, so projections read
``metadata.creationTimestamp`` rather than client model attributes.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

import urllib3
from kubernetes import client, config as kube_config
from kubernetes.client.rest import ApiException
from kubernetes.config.config_exception import ConfigException

from querydesk.common.errors import (
    BackendConnectionError,
    BackendExecutionError,
    BackendTransportError,
    ExecutionTimeoutError,
)
from querydesk.common.logger import get_logger
from querydesk.common.settings import Settings, settings as default_settings

logger = get_logger("cluster")


def _is_timeout(exc: BaseException) -> bool:
    if isinstance(exc, urllib3.exceptions.TimeoutError):
        return True
    if isinstance(exc, urllib3.exceptions.MaxRetryError):
        return isinstance(exc.reason, urllib3.exceptions.TimeoutError)
    return False


class KubernetesClusterClient:
    """Cluster client backed by the official kubernetes Python client."""

    def __init__(self, config: Optional[Settings] = None):
        self.config = config or default_settings
        self._api_client: Optional[client.ApiClient] = None

    def _load_api_client(self) -> client.ApiClient:
        path = self.config.kubeconfig_path
        if path:
            return kube_config.new_client_from_config(config_file=path)
        try:
            return kube_config.new_client_from_config()
        except ConfigException:
            logger.info("No kubeconfig found, falling back to in-cluster configuration")
            configuration = client.Configuration()
            kube_config.load_incluster_config(client_configuration=configuration)
            return client.ApiClient(configuration=configuration)

    @property
    def api_client(self) -> client.ApiClient:
        if self._api_client is None:
            try:
                self._api_client = self._load_api_client()
            except (ConfigException, OSError) as e:
                logger.error(f"Failed to initialize Kubernetes client: {e}")
                raise BackendConnectionError(f"Failed to initialize Kubernetes client: {e}") from e
        return self._api_client

    def _list(self, call: Callable[..., Any], **kwargs: Any) -> List[Dict[str, Any]]:
        try:
            response = call(_request_timeout=self.config.cluster_timeout_sec, **kwargs)
        except ApiException as e:
            raise BackendExecutionError(f"({e.status}) {e.reason}") from e
        except urllib3.exceptions.HTTPError as e:
            if _is_timeout(e):
                raise ExecutionTimeoutError(
                    f"Cluster request timed out after {self.config.cluster_timeout_sec} seconds."
                ) from e
            raise BackendTransportError(str(e)) from e
        return [self.api_client.sanitize_for_serialization(item) for item in response.items]

    @property
    def core(self) -> client.CoreV1Api:
        return client.CoreV1Api(self.api_client)

    @property
    def apps(self) -> client.AppsV1Api:
        return client.AppsV1Api(self.api_client)

    def list_pods(self) -> List[Dict[str, Any]]:
        return self._list(self.core.list_pod_for_all_namespaces)

    def list_nodes(self) -> List[Dict[str, Any]]:
        return self._list(self.core.list_node)

    def list_deployments(self) -> List[Dict[str, Any]]:
        return self._list(self.apps.list_deployment_for_all_namespaces)

    def list_services(self) -> List[Dict[str, Any]]:
        return self._list(self.core.list_service_for_all_namespaces)

    def list_namespaces(self) -> List[Dict[str, Any]]:
        return self._list(self.core.list_namespace)

    def list_namespaced_pods(self, namespace: str) -> List[Dict[str, Any]]:
        return self._list(self.core.list_namespaced_pod, namespace=namespace)
