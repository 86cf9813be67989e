"""Request and result models for query execution."""

import base64
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator


class ConnectionSpec(BaseModel):
    """Self-describing endpoint and credentials supplied with a request."""

    model_config = ConfigDict(populate_by_name=True)

    host: str
    port: Optional[int] = None
    database: Optional[str] = None
    username: str
    password: SecretStr
    secure: bool = False
    library_list: Optional[str] = Field(default=None, alias="libraryList")
    default_schema: Optional[str] = Field(default=None, alias="defaultSchema")

    @field_validator("host")
    @classmethod
    def host_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("host must not be empty")
        return value

    @field_validator("port")
    @classmethod
    def port_positive(cls, value: Optional[int]) -> Optional[int]:
        # Older clients send 0 for "driver default port".
        if value is None or value == 0:
            return None
        if value < 0:
            raise ValueError("port must be a positive integer")
        return value


class QueryRequest(ConnectionSpec):
    """A connection spec plus the single statement to run against it."""

    sql: Optional[str] = None


def json_safe(value: Any) -> Any:
    """Convert a row value into something the JSON encoder accepts."""
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, bytes):
        return base64.b64encode(value).decode("ascii")
    return value


class RowRecord(Mapping):
    """One result row keyed by column name, in result-metadata order.

    Duplicate column names are kept positionally in ``columns``,
    ``positional_values`` and ``pairs()``. Through the mapping interface a
    duplicated name keeps its first position and resolves to the last value.
    """

    __slots__ = ("_columns", "_values", "_index")

    def __init__(self, columns: Sequence[str], values: Sequence[Any]):
        if len(columns) != len(values):
            raise ValueError(f"row has {len(values)} values for {len(columns)} columns")
        self._columns = tuple(columns)
        self._values = tuple(values)
        self._index: Dict[str, int] = {}
        for position, name in enumerate(self._columns):
            self._index[name] = position

    @property
    def columns(self) -> Tuple[str, ...]:
        return self._columns

    @property
    def positional_values(self) -> Tuple[Any, ...]:
        return self._values

    def pairs(self) -> List[Tuple[str, Any]]:
        return list(zip(self._columns, self._values))

    def __getitem__(self, key: str) -> Any:
        return self._values[self._index[key]]

    def __iter__(self) -> Iterator[str]:
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def __repr__(self) -> str:
        return f"RowRecord({self.pairs()!r})"

    def to_dict(self) -> Dict[str, Any]:
        return {name: json_safe(self[name]) for name in self}


@dataclass(frozen=True)
class QueryResult:
    """Terminal outcome of one query execution."""

    success: bool
    execution_time_ms: int
    row_count: int = 0
    rows: Tuple[RowRecord, ...] = ()
    error: Optional[str] = None
    error_details: Optional[str] = None

    @classmethod
    def succeeded(cls, rows: Sequence[RowRecord], execution_time_ms: int) -> "QueryResult":
        return cls(
            success=True,
            execution_time_ms=execution_time_ms,
            row_count=len(rows),
            rows=tuple(rows),
        )

    @classmethod
    def failed(cls, error: str, execution_time_ms: int, error_details: Optional[str] = None) -> "QueryResult":
        return cls(
            success=False,
            execution_time_ms=execution_time_ms,
            error=error,
            error_details=error_details,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to its wire representation."""
        return {
            "success": self.success,
            "executionTimeMs": self.execution_time_ms,
            "rowCount": self.row_count,
            "rows": [row.to_dict() for row in self.rows],
            "error": self.error,
            "errorDetails": self.error_details,
        }
