"""Failure classification for query execution."""

import logging
from typing import Any, Iterable, Optional

import jaydebeapi

from .models import QueryResult

logger = logging.getLogger(__name__)

EMPTY_SQL_ERROR = "SQL query cannot be empty"
SQL_ERROR_PREFIX = "SQL Error: "
UNEXPECTED_ERROR_PREFIX = "Execution Error: "
REDACTED = "******"


class QueryValidationError(ValueError):
    """Raised when a request is rejected before any connection attempt."""


def _sql_exception(exc: BaseException) -> Optional[Any]:
    """Find the Java SQLException behind a bridged driver failure, if any."""
    if hasattr(exc, "getSQLState"):
        return exc
    for arg in getattr(exc, "args", ()):
        if hasattr(arg, "getSQLState"):
            return arg
    return None


def is_driver_error(exc: BaseException) -> bool:
    """True for failures reported by the database driver."""
    if isinstance(exc, jaydebeapi.Error) or _sql_exception(exc) is not None:
        return True
    return hasattr(exc, "sqlstate") and hasattr(exc, "errno")


def _message(exc: BaseException) -> str:
    java_exc = _sql_exception(exc)
    if java_exc is not None and hasattr(java_exc, "getMessage"):
        return str(java_exc.getMessage())
    return str(exc)


def _cause_message(exc: BaseException) -> Optional[str]:
    java_exc = _sql_exception(exc)
    if java_exc is not None and hasattr(java_exc, "getCause"):
        cause = java_exc.getCause()
        if cause is not None:
            return str(cause.getMessage())
    cause = exc.__cause__
    if cause is not None and cause is not java_exc:
        return str(cause)
    return None


def sql_error_details(exc: BaseException) -> str:
    """Multi-line diagnostic dump for a driver failure."""
    java_exc = _sql_exception(exc)
    if java_exc is not None:
        state = java_exc.getSQLState()
        code = java_exc.getErrorCode()
    else:
        state = getattr(exc, "sqlstate", None)
        code = getattr(exc, "errno", None)

    details = f"SQLState: {state}\n"
    details += f"Error Code: {code if code is not None else 0}\n"
    details += f"Message: {_message(exc)}\n"
    cause = _cause_message(exc)
    if cause is not None:
        details += f"Cause: {cause}\n"
    return details


def _redact(text: Optional[str], secrets: Iterable[str]) -> Optional[str]:
    if text is None:
        return None
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


def classify_failure(exc: BaseException, execution_time_ms: int, secrets: Iterable[str] = ()) -> QueryResult:
    """Convert any execution failure into a failed QueryResult."""
    secrets = tuple(secrets)

    if isinstance(exc, QueryValidationError):
        return QueryResult.failed(str(exc), execution_time_ms)

    if is_driver_error(exc):
        logger.error("SQL execution error", exc_info=exc)
        error = SQL_ERROR_PREFIX + _message(exc)
        details = sql_error_details(exc)
    else:
        logger.error("Unexpected error during query execution", exc_info=exc)
        error = UNEXPECTED_ERROR_PREFIX + str(exc)
        details = f"{type(exc).__name__}: {exc}"

    return QueryResult.failed(
        _redact(error, secrets),
        execution_time_ms,
        error_details=_redact(details, secrets),
    )
