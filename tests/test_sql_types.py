"""Tests for native type naming and logical type derivation."""

import pytest

from schema_discovery.models import DataType
from schema_discovery.sql_types import derive_logical_type, native_type_name


@pytest.mark.parametrize("code,name,logical", [
    (12, "VARCHAR", DataType.STRING),
    (4, "INTEGER", DataType.INTEGER),
    (-5, "BIGINT", DataType.BIGINT),
    (3, "DECIMAL", DataType.DECIMAL),
    (8, "DOUBLE", DataType.DOUBLE),
    (91, "DATE", DataType.DATE),
    (93, "TIMESTAMP", DataType.TIMESTAMP),
    (-7, "BIT", DataType.BOOLEAN),
    (2004, "BLOB", DataType.BINARY),
])
def test_common_codes(code, name, logical):
    assert native_type_name(code) == name
    assert derive_logical_type(code) == logical


def test_odbc_legacy_codes():
    assert native_type_name(11) == "TIMESTAMP"
    assert derive_logical_type(9) == DataType.DATE
    assert derive_logical_type(-9) == DataType.STRING


def test_unknown_code():
    assert native_type_name(1111) == "OTHER"
    assert derive_logical_type(1111) == DataType.UNKNOWN
