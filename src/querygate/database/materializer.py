"""Drain DB-API cursors into row records."""

import logging
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, List

from .models import RowRecord

logger = logging.getLogger(__name__)

# Hard bound on rows held in memory for one request.
ROW_LIMIT = 10000


def to_scalar(value: Any) -> Any:
    """Normalize a driver value into a plain Python scalar.

    The result is always one of None, bool, int, float, str, bytes,
    datetime, date or time. Integral decimals become int, other decimals
    float. Unknown driver objects fall back to their string form.
    """
    if value is None or isinstance(value, (bool, int, float, str, datetime, date, time)):
        return value
    if isinstance(value, Decimal):
        if value == value.to_integral_value():
            return int(value)
        return float(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    return str(value)


def materialize_rows(cursor, limit: int = ROW_LIMIT) -> List[RowRecord]:
    """Read up to ``limit`` rows from an executed cursor.

    Column names are read once from ``cursor.description`` in declared order.
    Rows past the limit are left unread; truncation is not an error.
    Statements that produce no result set yield no rows.
    """
    if cursor.description is None:
        return []

    columns = [desc[0] for desc in cursor.description]
    rows: List[RowRecord] = []
    while len(rows) < limit:
        row = cursor.fetchone()
        if row is None:
            break
        rows.append(RowRecord(columns, [to_scalar(value) for value in row]))

    if len(rows) == limit:
        logger.debug(f"Result materialization stopped at the {limit} row limit")
    return rows
