"""
Oracle metadata connection using oracledb.

Answers metadata queries from the Oracle data dictionary views:
- ALL_USERS (schemas; Oracle has no catalogs)
- ALL_TABLES / ALL_VIEWS / ALL_TAB_COMMENTS
- ALL_TAB_COLUMNS / ALL_COL_COMMENTS
- ALL_CONSTRAINTS / ALL_CONS_COLUMNS
"""

from __future__ import annotations

import logging
import re
from typing import Any, Dict, List, Optional, Sequence, Type

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


# Oracle type name -> SQL type code, as the Oracle JDBC driver reports them
ORACLE_TYPE_CODES = {
    "NUMBER": 2,
    "INTEGER": 4,
    "FLOAT": 6,
    "BINARY_FLOAT": 7,
    "BINARY_DOUBLE": 8,
    "VARCHAR2": 12,
    "NVARCHAR2": -9,
    "CHAR": 1,
    "NCHAR": -15,
    "CLOB": 2005,
    "NCLOB": 2011,
    "DATE": 93,  # Oracle DATE includes time
    "TIMESTAMP": 93,
    "TIMESTAMP WITH TIME ZONE": 2014,
    "TIMESTAMP WITH LOCAL TIME ZONE": 93,
    "RAW": -3,
    "BLOB": 2004,
    "LONG": -1,
    "LONG RAW": -4,
}

OTHER_TYPE_CODE = 1111

_PRECISION = re.compile(r"\(\d+\)")


def _dictionary_name(name: Optional[str]) -> str:
    """Dictionary views store unquoted names in upper case."""
    return name.upper() if name else WILDCARD


def oracle_type_code(data_type: str, precision: Optional[int] = None, scale: Optional[int] = None) -> int:
    """Map an Oracle data type name to a SQL type code."""
    base_type = _PRECISION.sub("", data_type or "").strip().upper()
    code = ORACLE_TYPE_CODES.get(base_type, OTHER_TYPE_CODE)

    # Integral NUMBER columns
    if base_type == "NUMBER" and scale == 0 and precision is not None:
        if precision <= 9:
            code = 4
        elif precision <= 18:
            code = -5
    return code


class OracleMetadataConnection(MetadataConnection):
    """Metadata queries over an oracledb connection."""

    def __init__(self, conn: Any, driver_error: Type[Exception] = Exception):
        """
        Args:
            conn: Open oracledb connection
            driver_error: Exception class raised by the driver (``oracledb.Error``)
        """
        self._conn = conn
        self._driver_error = driver_error

    def _query(self, operation: str, sql: str, params: Dict[str, Any]) -> List[tuple]:
        cursor = self._conn.cursor()
        try:
            cursor.execute(sql, params)
            return list(cursor)
        except self._driver_error as e:
            raise QueryError(
                f"Oracle dictionary query failed: {e}",
                operation=operation,
                schema=params.get("owner"),
                table=params.get("table_name"),
            ) from e
        finally:
            cursor.close()

    def get_catalogs(self) -> List[str]:
        return []

    def get_schemas(self) -> List[str]:
        rows = self._query("get_schemas", """
            SELECT username
            FROM all_users
            ORDER BY username
        """, {})
        return [row[0] for row in rows]

    def get_tables(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        table_types: Sequence[str] = DEFAULT_TABLE_TYPES,
    ) -> List[TableIdentity]:
        types = {t.upper() for t in table_types} if table_types else {"TABLE", "VIEW"}
        selects = []
        if "TABLE" in types:
            selects.append("""
                SELECT owner, table_name, 'TABLE' AS table_type
                FROM all_tables
                WHERE owner LIKE :owner AND table_name LIKE :table_name
            """)
        if "VIEW" in types:
            selects.append("""
                SELECT owner, view_name, 'VIEW' AS table_type
                FROM all_views
                WHERE owner LIKE :owner AND view_name LIKE :table_name
            """)
        if not selects:
            return []

        sql = " UNION ALL ".join(selects) + " ORDER BY 3, 1, 2"
        rows = self._query("get_tables", sql, {
            "owner": _dictionary_name(schema_pattern),
            "table_name": _dictionary_name(table_pattern),
        })
        return [
            TableIdentity(table_name=name, schema_name=owner, table_type=table_type)
            for owner, name, table_type in rows
        ]

    def get_columns(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        column_pattern: Optional[str] = None,
    ) -> List[ColumnDescriptor]:
        # no catalogs in Oracle; a catalog-only lookup matches nothing
        if schema_pattern is None and catalog is not None:
            return []

        rows = self._query("get_columns", """
            SELECT
                c.column_name,
                c.data_type,
                c.data_precision,
                c.data_scale,
                c.nullable,
                cc.comments
            FROM all_tab_columns c
            LEFT JOIN all_col_comments cc
                ON c.owner = cc.owner
                AND c.table_name = cc.table_name
                AND c.column_name = cc.column_name
            WHERE c.owner LIKE :owner
                AND c.table_name LIKE :table_name
                AND c.column_name LIKE :column_name
            ORDER BY c.owner, c.table_name, c.column_id
        """, {
            "owner": _dictionary_name(schema_pattern),
            "table_name": _dictionary_name(table_pattern),
            "column_name": _dictionary_name(column_pattern),
        })

        columns = []
        for col_name, data_type, precision, scale, nullable, comment in rows:
            columns.append(ColumnDescriptor(
                name=col_name,
                type_code=oracle_type_code(data_type, precision, scale),
                remarks=comment,
                is_nullable="YES" if nullable == "Y" else "NO",
            ))
        return columns

    def get_primary_keys(
        self,
        catalog: Optional[str],
        schema: Optional[str],
        table: str,
    ) -> List[str]:
        # no catalogs in Oracle
        if schema is None and catalog is not None:
            return []

        rows = self._query("get_primary_keys", """
            SELECT cc.column_name
            FROM all_constraints c
            JOIN all_cons_columns cc
                ON c.owner = cc.owner
                AND c.constraint_name = cc.constraint_name
            WHERE c.owner LIKE :owner
                AND c.table_name = :table_name
                AND c.constraint_type = 'P'
            ORDER BY cc.position
        """, {"owner": _dictionary_name(schema), "table_name": _dictionary_name(table)})
        return [row[0] for row in rows]

    def close(self) -> None:
        """Close database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed Oracle connection")


class OracleConnectionProvider(ConnectionProvider):
    """Opens oracledb connections, with password or external (Kerberos) auth."""

    def __init__(
        self,
        connection: ConnectionConfig,
        kerberos: Optional[KerberosConfig] = None,
    ):
        self.connection = connection
        self.ticket = KerberosTicket(kerberos or KerberosConfig())

    def acquire(self, use_authenticated_path: bool = False) -> OracleMetadataConnection:
        import oracledb

        authenticated = use_authenticated_path and self.ticket.enabled
        try:
            if authenticated:
                self.ticket.obtain()
                # External authentication needs the thick client
                if oracledb.is_thin_mode():
                    oracledb.init_oracle_client()
                with self.ticket.credential_cache():
                    conn = oracledb.connect(dsn=self.connection.dsn, externalauth=True)
            else:
                conn = oracledb.connect(
                    user=self.connection.user,
                    password=self.connection.password,
                    dsn=self.connection.dsn,
                )
        except oracledb.Error as e:
            raise DiscoveryConnectionError(
                f"Unable to connect to Oracle at {self.connection.dsn}: {e}", operation="acquire"
            ) from e

        logger.info(f"Connected to Oracle database at {self.connection.dsn}")
        return OracleMetadataConnection(conn, oracledb.Error)
