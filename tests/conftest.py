"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import Mock

from querygate.config.settings import Settings
from querygate.database.models import QueryRequest


class FakeCursor:
    """DB-API cursor double that serves canned rows."""

    def __init__(self, description=None, rows=None, execute_error=None, close_error=None):
        self.description = description
        self._rows = list(rows or [])
        self.execute_error = execute_error
        self.close_error = close_error
        self.executed = []
        self.fetch_count = 0
        self.close_count = 0

    def execute(self, sql):
        self.executed.append(sql)
        if self.execute_error is not None:
            raise self.execute_error

    def fetchone(self):
        if self.fetch_count >= len(self._rows):
            return None
        row = self._rows[self.fetch_count]
        self.fetch_count += 1
        return row

    def close(self):
        self.close_count += 1
        if self.close_error is not None:
            raise self.close_error


class FakeConnection:
    """DB-API connection double that records closes."""

    def __init__(self, close_error=None):
        self.close_error = close_error
        self.close_count = 0

    def close(self):
        self.close_count += 1
        if self.close_error is not None:
            raise self.close_error


class FakeDriver:
    """Driver double handing out one connection and one cursor."""

    def __init__(self, cursor=None, connection=None, connect_error=None):
        self.cursor = cursor or FakeCursor()
        self.connection = connection or FakeConnection()
        self.connect_error = connect_error
        self.connect_calls = []
        self.statement_timeouts = []

    def connect(self, target, username, password):
        self.connect_calls.append((target, username, password))
        if self.connect_error is not None:
            raise self.connect_error
        return self.connection

    def create_statement(self, connection, query_timeout=0):
        assert connection is self.connection
        self.statement_timeouts.append(query_timeout)
        return self.cursor


@pytest.fixture
def settings():
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, query_timeout=0, connection_timeout=30000, jwt_secret="test-secret")


@pytest.fixture
def mock_settings():
    """Create mock settings for testing."""
    settings = Mock(spec=Settings)
    settings.query_timeout = 0
    settings.connection_timeout = 30000
    settings.login_timeout_seconds = 30
    settings.max_pool_size = 15
    settings.jdbc_driver_class = "com.ibm.as400.access.AS400JDBCDriver"
    settings.jdbc_driver_jar = "/opt/jt400/jt400.jar"
    settings.jwt_secret = "test-secret"
    settings.jwt_algorithm = "HS256"
    settings.cors_origins = ["http://localhost:3000"]
    settings.debug = False
    settings.log_level = "INFO"
    return settings


@pytest.fixture
def query_request():
    """A request against a typical IBM i endpoint."""
    return QueryRequest(
        host="10.0.0.5",
        port=446,
        database="mylib",
        username="QUSER",
        password="s3cret-pw",
        secure=True,
        defaultSchema="QGPL",
        sql="SELECT 1 FROM SYSIBM.SYSDUMMY1",
    )


@pytest.fixture
def single_value_cursor():
    """Cursor answering SELECT 1 with one row and one column named 1."""
    return FakeCursor(description=[("1", None, None, None, None, None, None)], rows=[(1,)])


@pytest.fixture
def fake_driver(single_value_cursor):
    return FakeDriver(cursor=single_value_cursor)


@pytest.fixture(autouse=True)
def reset_global_instances():
    """Reset global instances before each test."""
    import querygate.config.settings
    querygate.config.settings._settings = None

    yield

    querygate.config.settings._settings = None


class FakeSQLException(Exception):
    """Stand-in for a java.sql.SQLException surfaced through the JDBC bridge."""

    def __init__(self, message, sql_state=None, error_code=0, cause=None):
        super().__init__(message)
        self._message = message
        self._sql_state = sql_state
        self._error_code = error_code
        self._cause = cause

    def getMessage(self):
        return self._message

    def getSQLState(self):
        return self._sql_state

    def getErrorCode(self):
        return self._error_code

    def getCause(self):
        return self._cause


# Pytest configuration
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "integration: mark test as integration test (requires a reachable IBM i endpoint)"
    )
