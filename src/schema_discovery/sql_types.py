"""
Default native type naming and logical type derivation.

Covers the JDBC ``java.sql.Types`` codes and the ODBC SQL type codes
reported in the DATA_TYPE column of column metadata. The two codings agree
for the common types; the ODBC-only codes sit in a separate table.
"""

from __future__ import annotations

from typing import Dict, Tuple

from schema_discovery.models import DataType

OTHER = "OTHER"

# code -> (native name, logical type)
SQL_TYPES: Dict[int, Tuple[str, DataType]] = {
    -16: ("LONGNVARCHAR", DataType.STRING),
    -15: ("NCHAR", DataType.STRING),
    -9: ("NVARCHAR", DataType.STRING),
    -7: ("BIT", DataType.BOOLEAN),
    -6: ("TINYINT", DataType.INTEGER),
    -5: ("BIGINT", DataType.BIGINT),
    -4: ("LONGVARBINARY", DataType.BINARY),
    -3: ("VARBINARY", DataType.BINARY),
    -2: ("BINARY", DataType.BINARY),
    -1: ("LONGVARCHAR", DataType.STRING),
    1: ("CHAR", DataType.STRING),
    2: ("NUMERIC", DataType.DECIMAL),
    3: ("DECIMAL", DataType.DECIMAL),
    4: ("INTEGER", DataType.INTEGER),
    5: ("SMALLINT", DataType.INTEGER),
    6: ("FLOAT", DataType.DOUBLE),  # double precision
    7: ("REAL", DataType.FLOAT),
    8: ("DOUBLE", DataType.DOUBLE),
    12: ("VARCHAR", DataType.STRING),
    16: ("BOOLEAN", DataType.BOOLEAN),
    91: ("DATE", DataType.DATE),
    92: ("TIME", DataType.STRING),
    93: ("TIMESTAMP", DataType.TIMESTAMP),
    2004: ("BLOB", DataType.BINARY),
    2005: ("CLOB", DataType.STRING),
    2011: ("NCLOB", DataType.STRING),
    2013: ("TIME_WITH_TIMEZONE", DataType.STRING),
    2014: ("TIMESTAMP_WITH_TIMEZONE", DataType.TIMESTAMP),
}

# ODBC 2.x date/time codes and ODBC wide character codes.
# -8 is ROWID under JDBC; both map to a string.
ODBC_TYPES: Dict[int, Tuple[str, DataType]] = {
    -11: ("GUID", DataType.STRING),
    -10: ("WLONGVARCHAR", DataType.STRING),
    -8: ("WCHAR", DataType.STRING),
    9: ("DATE", DataType.DATE),
    10: ("TIME", DataType.STRING),
    11: ("TIMESTAMP", DataType.TIMESTAMP),
}


def _lookup(type_code: int) -> Tuple[str, DataType]:
    if type_code in SQL_TYPES:
        return SQL_TYPES[type_code]
    return ODBC_TYPES.get(type_code, (OTHER, DataType.UNKNOWN))


def native_type_name(type_code: int) -> str:
    """Return the SQL type name for a numeric type code, or ``OTHER``."""
    return _lookup(type_code)[0]


def derive_logical_type(type_code: int) -> DataType:
    """Return the logical type for a numeric type code."""
    return _lookup(type_code)[1]
