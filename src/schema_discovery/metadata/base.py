"""
Base classes for metadata connections and connection providers.

A metadata connection wraps one live database connection and exposes the
catalog query primitives discovery needs. Name arguments follow JDBC/ODBC
conventions: ``None`` means "do not filter on this", and pattern arguments
accept ``%`` and ``_`` wildcards.
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from schema_discovery.models import ColumnDescriptor, TableIdentity

WILDCARD = "%"
DEFAULT_TABLE_TYPES = ("TABLE", "VIEW")


class MetadataConnection:
    """
    A live connection exposing metadata queries.

    Subclasses raise ``QueryError`` when a query fails.
    """

    def get_catalogs(self) -> List[str]:
        """Return catalog names in source order."""
        raise NotImplementedError

    def get_schemas(self) -> List[str]:
        """Return schema names in source order."""
        raise NotImplementedError

    def get_tables(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        table_types: Sequence[str] = DEFAULT_TABLE_TYPES,
    ) -> Iterable[TableIdentity]:
        """Return tables matching the given catalog and patterns."""
        raise NotImplementedError

    def get_columns(
        self,
        catalog: Optional[str],
        schema_pattern: Optional[str],
        table_pattern: str,
        column_pattern: Optional[str] = None,
    ) -> Iterable[ColumnDescriptor]:
        """Return columns of the matching tables, in ordinal order."""
        raise NotImplementedError

    def get_primary_keys(
        self,
        catalog: Optional[str],
        schema: Optional[str],
        table: str,
    ) -> Iterable[str]:
        """Return the primary key column names of a table."""
        raise NotImplementedError

    def close(self) -> None:
        """Release the underlying connection."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class ConnectionProvider:
    """
    Opens metadata connections.

    Subclasses raise ``DiscoveryConnectionError`` when a connection cannot
    be established.
    """

    def acquire(self, use_authenticated_path: bool = False) -> MetadataConnection:
        """Open a new connection, optionally through the authenticated path."""
        raise NotImplementedError
