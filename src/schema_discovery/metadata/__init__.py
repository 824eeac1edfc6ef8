"""
Metadata connections for relational databases.

Drivers are imported by their own modules (``odbc``, ``oracle``) so only the
one in use needs to be installed and loaded.
"""

from schema_discovery.metadata.base import (
    DEFAULT_TABLE_TYPES,
    WILDCARD,
    ConnectionProvider,
    MetadataConnection,
)

__all__ = [
    "DEFAULT_TABLE_TYPES",
    "WILDCARD",
    "ConnectionProvider",
    "MetadataConnection",
]
