"""
ODBC metadata connection using pyodbc.

Uses the ODBC catalog functions (SQLTables, SQLColumns, SQLPrimaryKeys),
which report catalogs and schemas the same way the driver's vendor does.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Type

from schema_discovery.auth import KerberosTicket
from schema_discovery.config import ConnectionConfig, KerberosConfig
from schema_discovery.exceptions import DiscoveryConnectionError, QueryError
from schema_discovery.metadata.base import (
    DEFAULT_TABLE_TYPES,
    WILDCARD,
    ConnectionProvider,
    MetadataConnection,
)
from schema_discovery.models import ColumnDescriptor, TableIdentity

logger = logging.getLogger(__name__)


class OdbcMetadataConnection(MetadataConnection):
    """Metadata queries over a pyodbc connection."""

    def __init__(self, conn: Any, driver_error: Type[Exception] = Exception):
        """
        Args:
            conn: Open pyodbc connection
            driver_error: Exception class raised by the driver (``pyodbc.Error``)
        """
        self._conn = conn
        self._driver_error = driver_error

    def _fetch(self, operation: str, method: str, **kwargs) -> List[Any]:
        """Run one catalog function on a fresh cursor and return all rows."""
        cursor = self._conn.cursor()
        try:
            return list(getattr(cursor, method)(**kwargs))
        except self._driver_error as e:
            raise QueryError(
                f"ODBC {method} failed: {e}",
                operation=operation,
                schema=kwargs.get("schema"),
                table=kwargs.get("table"),
            ) from e
        finally:
            cursor.close()

    def get_catalogs(self) -> List[str]:
        # SQL_ALL_CATALOGS: catalog '%' with empty schema and table
        rows = self._fetch("get_catalogs", "tables", catalog=WILDCARD, schema="", table="")
        return [row.table_cat for row in rows if row.table_cat is not None]

    def get_schemas(self) -> List[str]:
        # SQL_ALL_SCHEMAS: schema '%' with empty catalog and table
        rows = self._fetch("get_schemas", "tables", catalog="", schema=WILDCARD, table="")
        return [row.table_schem for row in rows if row.table_schem is not None]

    def get_tables(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        table_types: Sequence[str] = DEFAULT_TABLE_TYPES,
    ) -> List[TableIdentity]:
        rows = self._fetch(
            "get_tables",
            "tables",
            table=table_pattern,
            catalog=catalog,
            schema=schema_pattern,
            tableType=",".join(table_types) if table_types else None,
        )
        tables = []
        for row in rows:
            if not row.table_name:
                logger.debug(f"Skipping table row without a name: catalog:{row.table_cat} schema:{row.table_schem}")
                continue
            tables.append(TableIdentity(
                table_name=row.table_name,
                schema_name=row.table_schem,
                catalog_name=row.table_cat,
                table_type=row.table_type,
            ))
        return tables

    def get_columns(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        column_pattern: Optional[str] = None,
    ) -> List[ColumnDescriptor]:
        rows = self._fetch(
            "get_columns",
            "columns",
            table=table_pattern,
            catalog=catalog,
            schema=schema_pattern,
            column=column_pattern,
        )
        return [
            ColumnDescriptor(
                name=row.column_name,
                type_code=int(row.data_type),
                remarks=row.remarks,
                is_nullable=row.is_nullable,
            )
            for row in rows
        ]

    def get_primary_keys(
        self,
        catalog: Optional[str],
        schema: Optional[str],
        table: str,
    ) -> List[str]:
        rows = self._fetch("get_primary_keys", "primaryKeys", table=table, catalog=catalog, schema=schema)
        return [row.column_name for row in rows]

    def close(self) -> None:
        """Close the pyodbc connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed ODBC connection")


class OdbcConnectionProvider(ConnectionProvider):
    """Opens pyodbc connections from a connection string."""

    def __init__(
        self,
        connection: ConnectionConfig,
        kerberos: Optional[KerberosConfig] = None,
    ):
        self.connection = connection
        self.ticket = KerberosTicket(kerberos or KerberosConfig())

    def connection_string(self, use_authenticated_path: bool = False) -> str:
        """Pick the connection string for the requested path."""
        if use_authenticated_path and self.ticket.enabled:
            return self.connection.authenticated_connection_string or self.connection.connection_string
        return self.connection.connection_string

    def acquire(self, use_authenticated_path: bool = False) -> OdbcMetadataConnection:
        import pyodbc

        authenticated = use_authenticated_path and self.ticket.enabled
        if authenticated:
            self.ticket.obtain()

        kwargs = {"autocommit": True}
        if self.connection.timeout is not None:
            kwargs["timeout"] = self.connection.timeout

        try:
            if authenticated:
                with self.ticket.credential_cache():
                    conn = pyodbc.connect(self.connection_string(True), **kwargs)
            else:
                conn = pyodbc.connect(self.connection_string(False), **kwargs)
        except pyodbc.Error as e:
            raise DiscoveryConnectionError(
                f"Unable to open ODBC connection: {e}", operation="acquire"
            ) from e

        logger.debug(f"Opened ODBC connection (kerberos={authenticated})")
        return OdbcMetadataConnection(conn, pyodbc.Error)
