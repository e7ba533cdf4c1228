from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """Failure kinds surfaced by the dispatcher."""
    INVALID_INPUT = "INVALID_INPUT"
    BLOCKED = "BLOCKED"
    COMMAND_NOT_ALLOWED = "COMMAND_NOT_ALLOWED"
    UNSUPPORTED_QUERY = "UNSUPPORTED_QUERY"
    BACKEND_CONNECTION_FAILURE = "BACKEND_CONNECTION_FAILURE"
    BACKEND_EXECUTION_FAILURE = "BACKEND_EXECUTION_FAILURE"
    TOOL_SPAWN_FAILURE = "TOOL_SPAWN_FAILURE"
    EXECUTION_TIMEOUT = "EXECUTION_TIMEOUT"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"


# Short, stable category strings returned as the envelope's `error` field.
ERROR_CATEGORIES = {
    ErrorCode.INVALID_INPUT: "Invalid query",
    ErrorCode.BLOCKED: "Query blocked",
    ErrorCode.COMMAND_NOT_ALLOWED: "Command not allowed",
    ErrorCode.UNSUPPORTED_QUERY: "Unsupported query",
    ErrorCode.BACKEND_CONNECTION_FAILURE: "Connection failed",
    ErrorCode.BACKEND_EXECUTION_FAILURE: "Query execution failed",
    ErrorCode.TOOL_SPAWN_FAILURE: "Tool spawn failed",
    ErrorCode.EXECUTION_TIMEOUT: "Query timed out",
    ErrorCode.SERVICE_UNAVAILABLE: "Service unavailable",
}

CLIENT_ERRORS = {
    ErrorCode.INVALID_INPUT,
    ErrorCode.BLOCKED,
    ErrorCode.COMMAND_NOT_ALLOWED,
    ErrorCode.UNSUPPORTED_QUERY,
}


class QueryDeskError(Exception):
    """Base exception for querydesk. Carries the ErrorCode it maps to."""

    error_code: ErrorCode = ErrorCode.BACKEND_EXECUTION_FAILURE

    def __init__(self, message: str, error_code: Optional[ErrorCode] = None):
        super().__init__(message)
        self.message = message
        if error_code is not None:
            self.error_code = error_code


class QueryBlockedError(QueryDeskError):
    error_code = ErrorCode.BLOCKED


class CommandNotAllowedError(QueryDeskError):
    error_code = ErrorCode.COMMAND_NOT_ALLOWED


class UnsupportedQueryError(QueryDeskError):
    error_code = ErrorCode.UNSUPPORTED_QUERY


class BackendConnectionError(QueryDeskError):
    error_code = ErrorCode.BACKEND_CONNECTION_FAILURE


class BackendExecutionError(QueryDeskError):
    error_code = ErrorCode.BACKEND_EXECUTION_FAILURE


class BackendTransportError(BackendExecutionError):
    """Request never got an answer from the backend (refused, reset, DNS)."""


class ToolSpawnError(QueryDeskError):
    error_code = ErrorCode.TOOL_SPAWN_FAILURE


class ExecutionTimeoutError(QueryDeskError):
    error_code = ErrorCode.EXECUTION_TIMEOUT
