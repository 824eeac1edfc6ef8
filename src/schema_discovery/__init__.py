"""
Schema Discovery - relational database metadata discovery

Discovers catalogs, schemas, tables, columns and primary keys through
vendor-neutral metadata queries and normalizes the vendors' differing use of
"catalog" and "schema" into one table/column model.

Features:
- Catalog-vs-schema disambiguation with fallbacks per vendor
- Column mapping with native and logical type derivation
- ODBC (pyodbc) and Oracle (oracledb) metadata connections
- Optional Kerberos keytab login for the authenticated connection path
"""

__version__ = "0.1.0"

from schema_discovery.models import (
    ColumnDescriptor,
    DataType,
    Field,
    TableIdentity,
    TableSchema,
)
from schema_discovery.exceptions import (
    ConfigError,
    DiscoveryConnectionError,
    DiscoveryError,
    InvalidArgumentError,
    QueryError,
)
from schema_discovery.config import DiscoveryConfig, build_provider, load_config
from schema_discovery.discoverer import SchemaDiscoverer

__all__ = [
    # Models
    "ColumnDescriptor",
    "DataType",
    "Field",
    "TableIdentity",
    "TableSchema",
    # Errors
    "ConfigError",
    "DiscoveryConnectionError",
    "DiscoveryError",
    "InvalidArgumentError",
    "QueryError",
    # Configuration
    "DiscoveryConfig",
    "build_provider",
    "load_config",
    # Discovery
    "SchemaDiscoverer",
]
