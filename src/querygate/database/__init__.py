"""Dynamic connection query execution module."""

from .connection_spec import ConnectionTarget, build_connection_target
from .executor import QueryExecutor
from .models import ConnectionSpec, QueryRequest, QueryResult, RowRecord

__all__ = [
    "ConnectionSpec",
    "ConnectionTarget",
    "QueryExecutor",
    "QueryRequest",
    "QueryResult",
    "RowRecord",
    "build_connection_target",
]
