"""JDBC bridge to the JT400 driver."""

import logging
import threading
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, Optional

import jaydebeapi
import jpype

from ..config.settings import Settings, get_settings
from .connection_spec import ConnectionTarget

logger = logging.getLogger(__name__)

# java.sql.Types constants
BIT = -7
TINYINT = -6
SMALLINT = 5
INTEGER = 4
BIGINT = -5
FLOAT = 6
REAL = 7
DOUBLE = 8
NUMERIC = 2
DECIMAL = 3
CHAR = 1
VARCHAR = 12
LONGVARCHAR = -1
NCHAR = -15
NVARCHAR = -9
CLOB = 2005
DATE = 91
TIME = 92
TIMESTAMP = 93
BINARY = -2
VARBINARY = -3
LONGVARBINARY = -4
BLOB = 2004
BOOLEAN = 16

_jvm_lock = threading.Lock()


def _to_int(rs, col):
    value = rs.getLong(col)
    return None if rs.wasNull() else int(value)


def _to_float(rs, col):
    value = rs.getDouble(col)
    return None if rs.wasNull() else float(value)


def _to_bool(rs, col):
    value = rs.getBoolean(col)
    return None if rs.wasNull() else bool(value)


def _to_str(rs, col):
    value = rs.getString(col)
    return None if value is None else str(value)


def _to_decimal(rs, col):
    value = rs.getBigDecimal(col)
    return None if value is None else Decimal(str(value.toPlainString()))


def _to_datetime(rs, col):
    value = rs.getTimestamp(col)
    if value is None:
        return None
    local = value.toLocalDateTime()
    return datetime(
        int(local.getYear()),
        int(local.getMonthValue()),
        int(local.getDayOfMonth()),
        int(local.getHour()),
        int(local.getMinute()),
        int(local.getSecond()),
        int(local.getNano()) // 1000,
    )


def _to_date(rs, col):
    value = rs.getDate(col)
    if value is None:
        return None
    local = value.toLocalDate()
    return date(int(local.getYear()), int(local.getMonthValue()), int(local.getDayOfMonth()))


def _to_time(rs, col):
    value = rs.getTime(col)
    if value is None:
        return None
    local = value.toLocalTime()
    return time(int(local.getHour()), int(local.getMinute()), int(local.getSecond()))


def _to_bytes(rs, col):
    # getBytes reads BLOB columns too
    value = rs.getBytes(col)
    return None if value is None else bytes(value)


# Keyed by driver-reported SQL type. Anything else is read with getObject.
JT400_CONVERTERS = {
    BIT: _to_bool,
    BOOLEAN: _to_bool,
    TINYINT: _to_int,
    SMALLINT: _to_int,
    INTEGER: _to_int,
    BIGINT: _to_int,
    FLOAT: _to_float,
    REAL: _to_float,
    DOUBLE: _to_float,
    NUMERIC: _to_decimal,
    DECIMAL: _to_decimal,
    CHAR: _to_str,
    VARCHAR: _to_str,
    LONGVARCHAR: _to_str,
    NCHAR: _to_str,
    NVARCHAR: _to_str,
    CLOB: _to_str,
    DATE: _to_date,
    TIME: _to_time,
    TIMESTAMP: _to_datetime,
    BINARY: _to_bytes,
    VARBINARY: _to_bytes,
    LONGVARBINARY: _to_bytes,
    BLOB: _to_bytes,
}


def start_jvm(classpath: Optional[str] = None) -> None:
    """Start the JVM once per process, with ``classpath`` holding the driver jar."""
    with _jvm_lock:
        if jpype.isJVMStarted():
            return
        logger.info(f"Starting JVM with driver classpath {classpath}")
        jpype.startJVM(
            jpype.getDefaultJVMPath(),
            classpath=[classpath] if classpath else None,
            ignoreUnrecognized=True,
            convertStrings=True,
        )


class TimedCursor(jaydebeapi.Cursor):
    """Cursor that applies a JDBC query timeout to each statement it prepares."""

    def __init__(self, connection, converters, query_timeout: int = 0):
        super().__init__(connection, converters)
        self.query_timeout = query_timeout

    def _set_stmt_parms(self, prep_stmt, parameters):
        if self.query_timeout > 0:
            prep_stmt.setQueryTimeout(self.query_timeout)
        super()._set_stmt_parms(prep_stmt, parameters)


class Jt400Driver:
    """Opens direct, unpooled connections for dynamic connection specs."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()

    def driver_args(self, username: str, password: str) -> Dict[str, str]:
        args = {"user": username, "password": password}
        if self.settings.login_timeout_seconds > 0:
            args["login timeout"] = str(self.settings.login_timeout_seconds)
        return args

    def connect(self, target: ConnectionTarget, username: str, password: str):
        """Open a new connection to ``target`` with the caller's own credentials."""
        start_jvm(self.settings.jdbc_driver_jar)
        logger.debug(f"Loading JDBC driver {self.settings.jdbc_driver_class}")
        return jaydebeapi.connect(
            self.settings.jdbc_driver_class,
            target.url,
            self.driver_args(username, password),
            self.settings.jdbc_driver_jar,
        )

    def create_statement(self, connection, query_timeout: int = 0) -> TimedCursor:
        """Create a statement cursor on ``connection``."""
        return TimedCursor(connection, JT400_CONVERTERS, query_timeout)
