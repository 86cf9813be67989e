"""Per-request query execution against dynamically specified endpoints."""

import logging
import time
from contextlib import contextmanager
from typing import Optional

from ..config.settings import Settings, get_settings
from .connection_spec import build_connection_target
from .driver import Jt400Driver
from .errors import EMPTY_SQL_ERROR, QueryValidationError, classify_failure
from .materializer import materialize_rows
from .models import ConnectionSpec, QueryRequest, QueryResult

logger = logging.getLogger(__name__)


def validate_request(request: QueryRequest) -> None:
    """Reject requests that must never reach a connection attempt."""
    if not request.sql or not request.sql.strip():
        raise QueryValidationError(EMPTY_SQL_ERROR)


@contextmanager
def released(resource, name: str):
    """Close ``resource`` on exit. A failing close is logged, never raised."""
    try:
        yield resource
    finally:
        try:
            resource.close()
            logger.debug(f"{name.capitalize()} closed")
        except Exception as e:
            logger.warning(f"Error closing {name}: {e}")


def _elapsed_ms(start_time: float) -> int:
    return max(0, int((time.monotonic() - start_time) * 1000))


class QueryExecutor:
    """Runs one statement per call on a connection opened for that call.

    Each call opens its own connection with the request's credentials,
    creates one statement cursor on it, drains the result and closes the
    cursor and then the connection. The DB-API cursor owns both the JDBC
    statement and its result set, so closing it releases both. Nothing is
    shared between calls.
    """

    def __init__(self, settings: Optional[Settings] = None, driver=None):
        """Initialize the executor."""
        self.settings = settings or get_settings()
        self.driver = driver or Jt400Driver(self.settings)

    @contextmanager
    def get_connection(self, spec: ConnectionSpec):
        """Open a direct connection for ``spec``."""
        target = build_connection_target(spec)
        logger.info(f"Connecting to: {target.url}")
        connection = self.driver.connect(target, spec.username, spec.password.get_secret_value())
        logger.debug("Connection established successfully")
        with released(connection, "connection"):
            yield connection

    @contextmanager
    def get_statement(self, connection):
        """Create a statement on ``connection`` with the configured timeout."""
        cursor = self.driver.create_statement(connection, self.settings.query_timeout)
        with released(cursor, "statement"):
            yield cursor

    def execute_query(self, request: QueryRequest, principal: Optional[str] = None) -> QueryResult:
        """Execute ``request.sql`` and return a result. Never raises for query failures."""
        start_time = time.monotonic()
        if principal:
            logger.info(f"Query execution requested by user: {principal}")

        try:
            validate_request(request)
            with self.get_connection(request) as connection:
                with self.get_statement(connection) as cursor:
                    logger.debug(f"Executing query: {request.sql}")
                    cursor.execute(request.sql)
                    rows = materialize_rows(cursor)
        except Exception as e:
            return classify_failure(
                e,
                _elapsed_ms(start_time),
                secrets=(request.password.get_secret_value(),),
            )

        execution_time_ms = _elapsed_ms(start_time)
        logger.info(f"Query executed successfully. Rows: {len(rows)}, Time: {execution_time_ms}ms")
        return QueryResult.succeeded(rows, execution_time_ms)

    def test_connection(self, spec: ConnectionSpec) -> QueryResult:
        """Run a trivial statement against ``spec``."""
        request = QueryRequest(**spec.model_dump(exclude={"sql"}), sql="SELECT 1 FROM SYSIBM.SYSDUMMY1")
        return self.execute_query(request)
