"""
Query dispatcher.

Entry point of the engine: validates the request, applies the security policy
for the target, runs the backend call under its circuit breaker and timeout,
normalizes the native result and wraps everything in an ExecutionOutcome.
No exception leaves this module; every failure becomes an ExecutionFailure.
"""
from __future__ import annotations

import time
from typing import Any, Callable, Optional, Tuple, TypeVar

import pybreaker

from querydesk.common.contracts import (
    ConnectionTarget,
    ExecutionFailure,
    ExecutionOutcome,
    ExecutionSuccess,
    QueryMode,
    QueryRequest,
    ResultEnvelope,
    StatementResult,
    TabularResult,
)
from querydesk.common.errors import (
    CommandNotAllowedError,
    ErrorCode,
    QueryBlockedError,
    QueryDeskError,
)
from querydesk.common.logger import get_logger, trace_context
from querydesk.common.resilience import CLUSTER_BREAKER, WAREHOUSE_BREAKER
from querydesk.common.sandbox import run_with_timeout
from querydesk.common.settings import Settings, settings as default_settings
from querydesk.datasources.cluster import KubernetesClusterClient
from querydesk.datasources.kubectl import KubectlRunner, parse_command_output
from querydesk.datasources.protocols import ClusterClient, CommandRunner
from querydesk.datasources.warehouse import (
    PROBE_STATEMENT,
    SCHEMAS_STATEMENT,
    TABLES_STATEMENT,
    SnowflakeConnection,
    WarehouseFactory,
    warehouse_session,
)
from querydesk.execution.normalizer import normalize, normalize_rows
from querydesk.execution.translator import (
    project_namespace,
    project_namespaced_pod,
    project_node_summary,
    translate,
)
from querydesk.security.commands import describe_allowed, is_allowed, split_command
from querydesk.security.injection import matched_pattern

logger = get_logger("dispatcher")

T = TypeVar("T")

EMPTY_QUERY_MESSAGE = "Query must be a non-empty string"
INVALID_MODE_MESSAGE = 'Invalid query type. Use "kubectl" or "sql"'
BLOCKED_MESSAGE = "Query contains potentially dangerous operations"

Operation = Callable[[], Tuple[ResultEnvelope, int]]


def _timed(func: Callable[..., T], *args: Any, **kwargs: Any) -> Tuple[T, int]:
    start = time.perf_counter()
    result = func(*args, **kwargs)
    return result, int((time.perf_counter() - start) * 1000)


def _normalize_statement(result: StatementResult) -> ResultEnvelope:
    if result.returns_rows:
        return normalize_rows(result.columns, result.rows)
    if result.rows_affected is None:
        return normalize("Statement executed successfully.")
    return normalize(
        f"Statement executed successfully. {result.rows_affected} row(s) affected.",
        rows_affected=result.rows_affected,
    )


class QueryDispatcher:
    """Executes queries against the warehouse or the cluster.

    Backends are injectable; by default they are built from ``settings``.
    ``warehouse_factory`` must return a fresh, unconnected connection per call.
    """

    def __init__(
        self,
        warehouse_factory: Optional[WarehouseFactory] = None,
        cluster: Optional[ClusterClient] = None,
        runner: Optional[CommandRunner] = None,
        config: Optional[Settings] = None,
    ):
        self.config = config or default_settings
        self.warehouse_factory = warehouse_factory or (lambda: SnowflakeConnection(self.config))
        self.cluster = cluster or KubernetesClusterClient(self.config)
        self.runner = runner or KubectlRunner(self.config)

    def echo_query(self, text: str) -> str:
        return text[: self.config.query_echo_limit]

    # ------------------------------------------------------------------
    # Query execution
    # ------------------------------------------------------------------

    def execute(self, request: QueryRequest) -> ExecutionOutcome:
        with trace_context():
            text = request.text
            if not isinstance(text, str) or not text.strip():
                return ExecutionFailure(error_code=ErrorCode.INVALID_INPUT, message=EMPTY_QUERY_MESSAGE)

            mode = request.effective_mode
            query = self.echo_query(text)
            logger.info(
                "Dispatching query",
                extra={"target": request.target.value, "mode": mode.value, "query_head": query[:80]},
            )

            if request.target == ConnectionTarget.WAREHOUSE:
                return self._run(lambda: self._run_statement(text), query=query)
            if mode == QueryMode.NATIVE_COMMAND:
                return self._run(lambda: self._run_command(text), query=query, query_type=mode.value)
            if mode == QueryMode.RESOURCE_QUERY:
                return self._run(lambda: self._run_resource_query(text), query=query, query_type=mode.value)
            return ExecutionFailure(
                error_code=ErrorCode.INVALID_INPUT, message=INVALID_MODE_MESSAGE, query=query
            )

    def _run(
        self,
        operation: Operation,
        query: Optional[str] = None,
        query_type: Optional[str] = None,
        message: Optional[str] = None,
    ) -> ExecutionOutcome:
        try:
            envelope, elapsed_ms = operation()
        except pybreaker.CircuitBreakerError as e:
            logger.warning(f"Backend unavailable: {e}")
            return ExecutionFailure(
                error_code=ErrorCode.SERVICE_UNAVAILABLE,
                message="Backend is temporarily unavailable after repeated failures. Try again later.",
                query=query,
            )
        except QueryDeskError as e:
            logger.warning(f"Query failed ({e.error_code.value}): {e.message}")
            return ExecutionFailure(error_code=e.error_code, message=e.message, query=query)
        except Exception as e:
            logger.exception("Unexpected backend failure")
            return ExecutionFailure(
                error_code=ErrorCode.BACKEND_EXECUTION_FAILURE,
                message=str(e) or type(e).__name__,
                query=query,
            )

        logger.info("Query succeeded", extra={"elapsed_ms": elapsed_ms})
        return ExecutionSuccess(
            data=envelope,
            elapsed_ms=elapsed_ms,
            query=query,
            query_type=query_type,
            message=message,
        )

    def _run_statement(self, statement: str) -> Tuple[ResultEnvelope, int]:
        pattern = matched_pattern(statement)
        if pattern is not None:
            logger.warning("Statement blocked by injection guard", extra={"pattern": pattern})
            raise QueryBlockedError(BLOCKED_MESSAGE)
        return WAREHOUSE_BREAKER.call(self._execute_statement, statement)

    def _execute_statement(self, statement: str) -> Tuple[ResultEnvelope, int]:
        with warehouse_session(self.warehouse_factory) as connection:
            result, elapsed_ms = _timed(
                run_with_timeout,
                connection.execute,
                statement,
                timeout_sec=self.config.warehouse_timeout_sec,
                label="warehouse.execute",
            )
        return _normalize_statement(result), elapsed_ms

    def _run_command(self, text: str) -> Tuple[ResultEnvelope, int]:
        verb, args = split_command(text)
        if not is_allowed(verb):
            logger.warning("Command rejected by whitelist", extra={"verb": verb[:40]})
            raise CommandNotAllowedError(describe_allowed())
        result, elapsed_ms = CLUSTER_BREAKER.call(_timed, self.runner.run, verb, args)
        return normalize(parse_command_output(result)), elapsed_ms

    def _run_resource_query(self, text: str) -> Tuple[ResultEnvelope, int]:
        rows, elapsed_ms = CLUSTER_BREAKER.call(_timed, translate, text, self.cluster)
        return normalize(rows), elapsed_ms

    # ------------------------------------------------------------------
    # Connection probes and catalog listings
    # ------------------------------------------------------------------

    def test_connection(self, target: ConnectionTarget) -> ExecutionOutcome:
        with trace_context():
            if target == ConnectionTarget.WAREHOUSE:
                return self._run(
                    lambda: WAREHOUSE_BREAKER.call(self._execute_statement, PROBE_STATEMENT),
                    message="Successfully connected to Snowflake",
                )
            return self._run(
                lambda: self._list_cluster(lambda: self.cluster.list_nodes(), project_node_summary),
                message="Successfully connected to EKS cluster",
            )

    def list_schemas(self) -> ExecutionOutcome:
        with trace_context():
            return self._run(lambda: WAREHOUSE_BREAKER.call(self._execute_statement, SCHEMAS_STATEMENT))

    def list_tables(self) -> ExecutionOutcome:
        with trace_context():
            return self._run(lambda: WAREHOUSE_BREAKER.call(self._execute_statement, TABLES_STATEMENT))

    def list_namespaces(self) -> ExecutionOutcome:
        with trace_context():
            return self._run(
                lambda: self._list_cluster(lambda: self.cluster.list_namespaces(), project_namespace)
            )

    def list_namespace_pods(self, namespace: str) -> ExecutionOutcome:
        with trace_context():
            if not isinstance(namespace, str) or not namespace.strip():
                return ExecutionFailure(
                    error_code=ErrorCode.INVALID_INPUT, message="Namespace must be a non-empty string"
                )
            return self._run(
                lambda: self._list_cluster(
                    lambda: self.cluster.list_namespaced_pods(namespace.strip()), project_namespaced_pod
                )
            )

    def _list_cluster(self, list_call, project) -> Tuple[ResultEnvelope, int]:
        objects, elapsed_ms = CLUSTER_BREAKER.call(_timed, list_call)
        if not objects:
            # Catalog listings keep their header when empty.
            return TabularResult.from_rows(list(project({})), []), elapsed_ms
        return normalize([project(obj) for obj in objects]), elapsed_ms
