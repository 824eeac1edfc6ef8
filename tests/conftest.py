"""Shared fixtures: an in-memory metadata connection and provider."""

import re
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from schema_discovery.exceptions import DiscoveryConnectionError, QueryError
from schema_discovery.metadata.base import (
    DEFAULT_TABLE_TYPES,
    ConnectionProvider,
    MetadataConnection,
)
from schema_discovery.models import ColumnDescriptor, TableIdentity

Key = Tuple[Optional[str], Optional[str], str]


def like(pattern: Optional[str], value: Optional[str]) -> bool:
    """Case-insensitive SQL LIKE; a None pattern or '%' matches anything, including None."""
    if pattern is None or pattern == "%":
        return True
    if value is None:
        return False
    regex = "".join(
        ".*" if ch == "%" else "." if ch == "_" else re.escape(ch) for ch in pattern
    )
    return re.fullmatch(regex, value, re.IGNORECASE) is not None


def exact(arg: Optional[str], value: Optional[str]) -> bool:
    return arg is None or arg == value


class FakeMetadataConnection(MetadataConnection):
    """Metadata connection answering from in-memory rows."""

    def __init__(
        self,
        catalogs: Sequence[str] = (),
        schemas: Sequence[str] = (),
        tables: Sequence[TableIdentity] = (),
        columns: Optional[Dict[Key, List[ColumnDescriptor]]] = None,
        primary_keys: Optional[Dict[Key, List[str]]] = None,
        errors: Optional[Dict[str, Callable[..., bool]]] = None,
    ):
        self.catalogs = list(catalogs)
        self.schemas = list(schemas)
        self.tables = list(tables)
        self.columns = columns or {}
        self.primary_keys = primary_keys or {}
        self.errors = errors or {}
        self.calls: List[tuple] = []
        self.closed = False

    def _record(self, method: str, *args) -> None:
        self.calls.append((method,) + args)
        check = self.errors.get(method)
        if check is not None and check(*args):
            raise QueryError(f"{method} failed", operation=method)

    def get_catalogs(self) -> List[str]:
        self._record("get_catalogs")
        return list(self.catalogs)

    def get_schemas(self) -> List[str]:
        self._record("get_schemas")
        return list(self.schemas)

    def get_tables(self, catalog, schema_pattern, table_pattern, table_types=DEFAULT_TABLE_TYPES):
        self._record("get_tables", catalog, schema_pattern, table_pattern)
        return [
            t for t in self.tables
            if (catalog is None or t.catalog_name is None or t.catalog_name == catalog)
            and like(schema_pattern, t.schema_name)
            and like(table_pattern, t.table_name)
            and (t.table_type is None or t.table_type in table_types)
        ]

    def get_columns(self, catalog, schema_pattern, table_pattern, column_pattern=None):
        self._record("get_columns", catalog, schema_pattern, table_pattern)
        result = []
        for (cat, schem, name), cols in self.columns.items():
            if exact(catalog, cat) and like(schema_pattern, schem) and like(table_pattern, name):
                result.extend(c for c in cols if like(column_pattern, c.name))
        return result

    def get_primary_keys(self, catalog, schema, table):
        self._record("get_primary_keys", catalog, schema, table)
        result = []
        for (cat, schem, name), keys in self.primary_keys.items():
            if exact(catalog, cat) and exact(schema, schem) and name == table:
                result.extend(keys)
        return result

    def close(self) -> None:
        self.closed = True


class FakeProvider(ConnectionProvider):
    """Hands out fresh fake connections built by a factory."""

    def __init__(self, factory: Callable[[], FakeMetadataConnection], fail: bool = False):
        self.factory = factory
        self.fail = fail
        self.connections: List[FakeMetadataConnection] = []
        self.authenticated: List[bool] = []

    def acquire(self, use_authenticated_path: bool = False) -> FakeMetadataConnection:
        self.authenticated.append(use_authenticated_path)
        if self.fail:
            raise DiscoveryConnectionError("connection refused", operation="acquire")
        conn = self.factory()
        self.connections.append(conn)
        return conn

    @property
    def all_closed(self) -> bool:
        return all(c.closed for c in self.connections)

    def calls(self, method: str) -> List[tuple]:
        return [c for conn in self.connections for c in conn.calls if c[0] == method]


@pytest.fixture
def sales_source():
    """Schema-only vendor (no catalogs): SALES.ORDERS, SALES.CUSTOMERS, HR.EMPLOYEES."""
    def factory():
        return FakeMetadataConnection(
            catalogs=[],
            schemas=["HR", "SALES"],
            tables=[
                TableIdentity("EMPLOYEES", schema_name="HR", table_type="TABLE"),
                TableIdentity("CUSTOMERS", schema_name="SALES", table_type="TABLE"),
                TableIdentity("ORDERS", schema_name="SALES", table_type="TABLE"),
            ],
            columns={
                (None, "SALES", "ORDERS"): [
                    ColumnDescriptor("ID", type_code=-5, is_nullable="NO"),
                    ColumnDescriptor("AMOUNT", type_code=3, remarks="Order total", is_nullable="YES"),
                ],
                (None, "SALES", "CUSTOMERS"): [
                    ColumnDescriptor("CUSTOMER_ID", type_code=4, is_nullable="NO"),
                ],
            },
            primary_keys={
                (None, "SALES", "ORDERS"): ["ID"],
                (None, "SALES", "CUSTOMERS"): ["CUSTOMER_ID"],
            },
        )
    return FakeProvider(factory)


@pytest.fixture
def mysql_source():
    """Catalog-keyed vendor: catalogs shop and crm, no schemas on rows."""
    def factory():
        return FakeMetadataConnection(
            catalogs=["crm", "shop"],
            schemas=[],
            tables=[
                TableIdentity("contacts", catalog_name="crm", table_type="TABLE"),
                TableIdentity("orders", catalog_name="shop", table_type="TABLE"),
                TableIdentity("order_totals", catalog_name="shop", table_type="VIEW"),
            ],
            columns={
                ("shop", None, "orders"): [
                    ColumnDescriptor("id", type_code=4, is_nullable="NO"),
                    ColumnDescriptor("placed_at", type_code=93, is_nullable="YES"),
                ],
            },
            primary_keys={
                ("shop", None, "orders"): ["id"],
            },
            # the schema position is not supported for primary keys
            errors={"get_primary_keys": lambda catalog, schema, table: catalog is None},
        )
    return FakeProvider(factory)
