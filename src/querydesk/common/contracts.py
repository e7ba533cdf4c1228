"""
Contract definitions for the query engine.

Requests, canonical result envelopes and execution outcomes exchanged between
the dispatcher and its callers (HTTP API, CLI, tests). Field names are
snake_case in Python and camelCase on the wire.
"""
from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from querydesk.common.errors import CLIENT_ERRORS, ERROR_CATEGORIES, ErrorCode


class ConnectionTarget(str, Enum):
    WAREHOUSE = "warehouse"
    CLUSTER = "cluster"


class QueryMode(str, Enum):
    NATIVE_COMMAND = "kubectl"
    RESOURCE_QUERY = "sql"
    STATEMENT = "statement"


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class QueryRequest(WireModel):
    """A single query to dispatch. ``mode`` only matters for the cluster target."""

    target: ConnectionTarget
    text: Any = Field(default=None, description="Raw query text; validated by the dispatcher.")
    mode: Optional[QueryMode] = None

    @property
    def effective_mode(self) -> QueryMode:
        if self.target == ConnectionTarget.WAREHOUSE:
            return QueryMode.STATEMENT
        return self.mode or QueryMode.NATIVE_COMMAND


class TabularResult(WireModel):
    kind: Literal["table"] = Field(default="table", exclude=True)
    columns: List[str]
    rows: List[List[Any]]
    row_count: int

    @classmethod
    def from_rows(cls, columns: List[str], rows: List[List[Any]]) -> "TabularResult":
        return cls(columns=columns, rows=rows, row_count=len(rows))


class MessageResult(WireModel):
    kind: Literal["message"] = Field(default="message", exclude=True)
    message: str
    row_count: Literal[0, 1] = 0
    rows_affected: Optional[int] = None


ResultEnvelope = Union[TabularResult, MessageResult]


class ExecutionSuccess(WireModel):
    success: Literal[True] = True
    data: ResultEnvelope = Field(discriminator="kind")
    elapsed_ms: int
    query: Optional[str] = None
    query_type: Optional[str] = None
    message: Optional[str] = None

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "success": True,
            "data": self.data.to_wire(),
            "executionTime": f"{self.elapsed_ms}ms",
        }
        if self.message is not None:
            response["message"] = self.message
        if self.query is not None:
            response["query"] = self.query
        if self.query_type is not None:
            response["queryType"] = self.query_type
        return response


class ExecutionFailure(WireModel):
    """Structured failure. ``message`` is already safe to show to a client."""

    success: Literal[False] = False
    error_code: ErrorCode
    message: str
    query: Optional[str] = None

    @property
    def category(self) -> str:
        return ERROR_CATEGORIES[self.error_code]

    @property
    def is_client_error(self) -> bool:
        return self.error_code in CLIENT_ERRORS

    def to_response(self) -> Dict[str, Any]:
        response: Dict[str, Any] = {
            "success": False,
            "error": self.category,
            "message": self.message,
        }
        if self.query is not None:
            response["query"] = self.query
        return response


ExecutionOutcome = Union[ExecutionSuccess, ExecutionFailure]


class StatementResult(BaseModel):
    """Native warehouse result: column names plus positional rows."""

    columns: List[str] = Field(default_factory=list)
    rows: List[List[Any]] = Field(default_factory=list)
    rows_affected: Optional[int] = None

    @property
    def returns_rows(self) -> bool:
        return bool(self.columns)


class CommandResult(BaseModel):
    """Native result of one external tool invocation."""

    exit_code: int
    stdout: str = ""
    stderr: str = ""
