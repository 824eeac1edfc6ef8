"""
Schema discovery over vendor-neutral metadata connections.

Vendors disagree on whether tables live under a catalog (MySQL), a schema
(Oracle, Teradata) or both. The discoverer branches on whether the source
reports any catalogs and falls back between catalog and schema positions
when a lookup fails or comes back empty.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Sequence, Tuple

from schema_discovery import sql_types
from schema_discovery.exceptions import (
    DiscoveryConnectionError,
    InvalidArgumentError,
    QueryError,
)
from schema_discovery.metadata.base import (
    DEFAULT_TABLE_TYPES,
    WILDCARD,
    ConnectionProvider,
    MetadataConnection,
)
from schema_discovery.models import (
    ColumnDescriptor,
    DataType,
    Field,
    PrimaryKeySet,
    TableIdentity,
    TableSchema,
)


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _same_name(a: Optional[str], b: Optional[str]) -> bool:
    return a is not None and b is not None and a.lower() == b.lower()


class SchemaDiscoverer:
    """
    Lists catalogs, schemas and tables and describes single tables.

    Every public operation opens its own connection through the provider and
    closes it before returning. Nothing is cached between calls.
    """

    def __init__(
        self,
        provider: ConnectionProvider,
        use_authenticated_path: bool = False,
        table_types: Sequence[str] = DEFAULT_TABLE_TYPES,
        native_type_name: Callable[[int], str] = sql_types.native_type_name,
        derive_logical_type: Callable[[int], DataType] = sql_types.derive_logical_type,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            provider: Opens metadata connections
            use_authenticated_path: Describe tables over the Kerberos path
            table_types: Table types to list, e.g. ("TABLE", "VIEW")
            native_type_name: Maps a SQL type code to its native name
            derive_logical_type: Maps a SQL type code to a logical type
            logger: Logger for discovery messages
        """
        self.provider = provider
        self.use_authenticated_path = use_authenticated_path
        self.table_types = tuple(table_types)
        self.native_type_name = native_type_name
        self.derive_logical_type = derive_logical_type
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(cls, config, logger: Optional[logging.Logger] = None) -> SchemaDiscoverer:
        """Build a discoverer from a ``DiscoveryConfig``."""
        from schema_discovery.config import build_provider

        return cls(
            build_provider(config),
            use_authenticated_path=config.kerberos.enabled,
            table_types=config.table_types,
            logger=logger,
        )

    @contextmanager
    def _connect(
        self,
        operation: str,
        authenticated: bool = False,
        schema: Optional[str] = None,
        table: Optional[str] = None,
    ) -> Iterator[MetadataConnection]:
        """Acquire a connection and release it on every exit path."""
        try:
            conn = self.provider.acquire(authenticated)
        except DiscoveryConnectionError as e:
            raise DiscoveryConnectionError(
                f"Unable to connect: {e.message}", operation=operation, schema=schema, table=table
            ) from e

        try:
            yield conn
        finally:
            conn.close()

    def list_catalogs(self) -> List[str]:
        """Return all catalogs in source order."""
        with self._connect("list_catalogs") as conn:
            try:
                return list(conn.get_catalogs())
            except QueryError as e:
                raise QueryError("Unable to list catalogs", operation="list_catalogs") from e

    def list_schemas(self) -> List[str]:
        """Return all schemas in source order."""
        with self._connect("list_schemas") as conn:
            try:
                return list(conn.get_schemas())
            except QueryError as e:
                raise QueryError("Unable to list schemas", operation="list_schemas") from e

    def _get_tables(
        self,
        conn: MetadataConnection,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
    ) -> List[TableIdentity]:
        """Query one partition; a failed query yields no rows."""
        try:
            return list(conn.get_tables(catalog, schema_pattern, table_pattern, self.table_types))
        except QueryError as e:
            self.logger.debug(
                f"Failed to list tables for catalog:{catalog} schema:{schema_pattern} "
                f"tableName:{table_pattern}: {e}"
            )
            return []

    def list_tables(
        self,
        schema: Optional[str] = None,
        table_name: Optional[str] = None,
    ) -> List[str]:
        """
        List tables as ``<schema-or-catalog>.<table>``.

        Some databases key tables by catalog, some by schema. When the source
        reports catalogs every catalog is searched, otherwise the schema
        filter (or every schema, for a full listing) is used.

        Args:
            schema: Schema name pattern, or None for all
            table_name: Table name pattern, or None for all

        Returns:
            Qualified table names in source order
        """
        schema_pattern = schema if schema is not None else WILDCARD
        table_pattern = table_name if table_name is not None else WILDCARD

        catalogs = self.list_catalogs()
        has_catalogs = bool(catalogs)

        partitions: List[Tuple[Optional[str], Optional[str]]]
        if not _is_blank(schema) or not _is_blank(table_name):
            if has_catalogs:
                partitions = [(catalog, schema_pattern) for catalog in catalogs]
            else:
                partitions = [(None, schema_pattern)]
        elif has_catalogs:
            partitions = [(catalog, WILDCARD) for catalog in catalogs]
        else:
            partitions = [(None, db_schema) for db_schema in self.list_schemas()]

        tables: List[str] = []
        with self._connect("list_tables", schema=schema, table=table_name) as conn:
            for catalog, pattern in partitions:
                for row in self._get_tables(conn, catalog, pattern, table_pattern):
                    tables.append(row.qualified_name)

        self.logger.info(f"Found {len(tables)} tables across {len(partitions)} partitions")
        return tables

    def describe_table(self, schema: Optional[str], table: str) -> Optional[TableSchema]:
        """
        Describe one table.

        A schema name that matches a catalog (ignoring case) is treated as
        the catalog, for vendors that name their catalogs like schemas.

        Args:
            schema: Schema or catalog name, or None
            table: Table name

        Returns:
            TableSchema, or None if the table was not found

        Raises:
            InvalidArgumentError: if the table name is empty
            DiscoveryError: if a connection or column query fails
        """
        if not table:
            raise InvalidArgumentError("Table expected", operation="describe_table", schema=schema, table=table)

        catalog = None
        schema_pattern = None
        if not _is_blank(schema):
            catalog = next((c for c in self.list_catalogs() if _same_name(schema, c)), None)
            schema_pattern = schema if catalog is None else WILDCARD

        with self._connect(
            "describe_table",
            authenticated=self.use_authenticated_path,
            schema=schema,
            table=table,
        ) as conn:
            for row in self._get_tables(conn, catalog, schema_pattern, table):
                if not _same_name(table, row.table_name):
                    continue
                if not (_is_blank(schema) or _is_blank(row.schema_name) or _same_name(schema, row.schema_name)):
                    continue

                # columns are looked up under the source's spelling of the namespace
                namespace = row.qualifier or schema
                try:
                    fields = self.list_columns(conn, namespace, row.table_name)
                except QueryError as e:
                    raise QueryError(
                        f"Unable to describe schema [{schema}] table [{table}]",
                        operation="describe_table",
                        schema=schema,
                        table=table,
                    ) from e

                return TableSchema(name=row.table_name, schema_name=row.qualifier, fields=tuple(fields))

        self.logger.debug(f"Table not found: {schema}.{table}")
        return None

    def _primary_key_attempt(
        self,
        conn: MetadataConnection,
        catalog: Optional[str],
        schema: Optional[str],
        table: str,
    ) -> Optional[PrimaryKeySet]:
        """One primary key lookup; None when the query failed."""
        try:
            return frozenset(conn.get_primary_keys(catalog, schema, table))
        except QueryError as e:
            self.logger.debug(f"Primary key lookup failed for catalog:{catalog} schema:{schema} table:{table}: {e}")
            return None

    def list_primary_keys(
        self,
        conn: MetadataConnection,
        schema: Optional[str],
        table: str,
    ) -> PrimaryKeySet:
        """
        Return primary key column names, looking the name up as a schema
        first and as a catalog if that fails. Empty when both fail.
        """
        keys = self._primary_key_attempt(conn, None, schema, table)
        if keys is None:
            keys = self._primary_key_attempt(conn, schema, None, table)
        return keys if keys is not None else frozenset()

    def to_field(self, column: ColumnDescriptor, primary_keys: PrimaryKeySet) -> Field:
        """Map one column row to a Field."""
        return Field(
            name=column.name,
            native_type_name=self.native_type_name(column.type_code),
            logical_type=self.derive_logical_type(column.type_code),
            description=column.remarks,
            nullable=column.is_nullable != "NO",
            # exact-case match against the primary key query
            is_primary_key=column.name in primary_keys,
        )

    def list_columns(
        self,
        conn: MetadataConnection,
        schema: Optional[str],
        table: str,
    ) -> List[Field]:
        """
        Return the fields of a table in ordinal order.

        If nothing comes back with the name in the schema position, the
        lookup is repeated with it in the catalog position (MySQL).
        """
        primary_keys = self.list_primary_keys(conn, schema, table)

        fields = [self.to_field(c, primary_keys) for c in conn.get_columns(None, schema, table, None)]
        if not fields:
            fields = [self.to_field(c, primary_keys) for c in conn.get_columns(schema, None, table, None)]
        return fields
