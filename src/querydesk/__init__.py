# querydesk package

from .execution.dispatcher import QueryDispatcher
from .execution.normalizer import normalize
from .execution.translator import ResourceKind, translate

# Also expose core models and enums
from .common.contracts import (
    ConnectionTarget,
    QueryMode,
    QueryRequest,
    TabularResult,
    MessageResult,
    ExecutionSuccess,
    ExecutionFailure,
)
from .common.errors import ErrorCode

__all__ = [
    "QueryDispatcher",
    "normalize",
    "ResourceKind",
    "translate",
    "ConnectionTarget",
    "QueryMode",
    "QueryRequest",
    "TabularResult",
    "MessageResult",
    "ExecutionSuccess",
    "ExecutionFailure",
    "ErrorCode",
]
