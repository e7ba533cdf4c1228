from typing import Any, Dict, Optional, Tuple

from querydesk import QueryDispatcher
from querydesk.common.contracts import (
    ConnectionTarget,
    ExecutionFailure,
    ExecutionOutcome,
    QueryMode,
    QueryRequest,
)
from querydesk.common.errors import ErrorCode
from querydesk.execution.dispatcher import INVALID_MODE_MESSAGE

CLUSTER_QUERY_TYPES = {QueryMode.NATIVE_COMMAND.value, QueryMode.RESOURCE_QUERY.value}

STATUS_BY_CODE = {
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.EXECUTION_TIMEOUT: 504,
}

Response = Tuple[int, Dict[str, Any]]


def to_http(outcome: ExecutionOutcome) -> Response:
    """Maps an outcome onto an HTTP status code and the wire envelope."""
    if isinstance(outcome, ExecutionFailure):
        if outcome.is_client_error:
            return 400, outcome.to_response()
        return STATUS_BY_CODE.get(outcome.error_code, 500), outcome.to_response()
    return 200, outcome.to_response()


class WarehouseService:
    def __init__(self, dispatcher: QueryDispatcher):
        self.dispatcher = dispatcher

    def test_connection(self) -> Response:
        return to_http(self.dispatcher.test_connection(ConnectionTarget.WAREHOUSE))

    def execute(self, query: Any) -> Response:
        request = QueryRequest(target=ConnectionTarget.WAREHOUSE, text=query)
        return to_http(self.dispatcher.execute(request))

    def schemas(self) -> Response:
        return to_http(self.dispatcher.list_schemas())

    def tables(self) -> Response:
        return to_http(self.dispatcher.list_tables())


class ClusterService:
    def __init__(self, dispatcher: QueryDispatcher):
        self.dispatcher = dispatcher

    def test_connection(self) -> Response:
        return to_http(self.dispatcher.test_connection(ConnectionTarget.CLUSTER))

    def execute(self, query: Any, query_type: Optional[str] = None) -> Response:
        if query_type is not None and query_type not in CLUSTER_QUERY_TYPES:
            echo = self.dispatcher.echo_query(query) if isinstance(query, str) else None
            return to_http(
                ExecutionFailure(error_code=ErrorCode.INVALID_INPUT, message=INVALID_MODE_MESSAGE, query=echo)
            )
        mode = QueryMode(query_type) if query_type else None
        request = QueryRequest(target=ConnectionTarget.CLUSTER, mode=mode, text=query)
        return to_http(self.dispatcher.execute(request))

    def namespaces(self) -> Response:
        return to_http(self.dispatcher.list_namespaces())

    def namespace_pods(self, namespace: str) -> Response:
        return to_http(self.dispatcher.list_namespace_pods(namespace))
