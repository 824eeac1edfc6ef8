"""
Core data models for the schema_discovery package.

Defines the normalized table/column structures produced by discovery, plus
the raw row types returned by metadata connections.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from schema_discovery.exceptions import InvalidArgumentError


class DataType(str, Enum):
    """Logical data types derived from native SQL type codes."""
    STRING = "string"
    INTEGER = "integer"
    BIGINT = "bigint"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    DATE = "date"
    TIMESTAMP = "timestamp"
    BOOLEAN = "boolean"
    BINARY = "binary"
    UNKNOWN = "unknown"


PrimaryKeySet = FrozenSet[str]


@dataclass(frozen=True)
class TableIdentity:
    """One table row as reported by a metadata connection."""
    table_name: str
    schema_name: Optional[str] = None
    catalog_name: Optional[str] = None
    table_type: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.table_name:
            raise InvalidArgumentError("Table name expected")

    @property
    def qualifier(self) -> Optional[str]:
        """Schema if present, otherwise catalog."""
        return self.schema_name if self.schema_name else self.catalog_name

    @property
    def qualified_name(self) -> str:
        """Return ``<schema-or-catalog>.<table>``."""
        return f"{self.qualifier}.{self.table_name}"


@dataclass(frozen=True)
class ColumnDescriptor:
    """One raw column row as reported by a metadata connection."""
    name: str
    type_code: int
    remarks: Optional[str] = None
    is_nullable: Optional[str] = None  # "YES", "NO" or unknown


@dataclass(frozen=True)
class Field:
    """Normalized metadata for a single column."""
    name: str
    native_type_name: str
    logical_type: DataType
    description: Optional[str] = None
    nullable: bool = True
    is_primary_key: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "native_type_name": self.native_type_name,
            "logical_type": self.logical_type.value,
            "description": self.description,
            "nullable": self.nullable,
            "is_primary_key": self.is_primary_key,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Field:
        """Create from dictionary."""
        return cls(
            name=data["name"],
            native_type_name=data["native_type_name"],
            logical_type=DataType(data.get("logical_type", "unknown")),
            description=data.get("description"),
            nullable=data.get("nullable", True),
            is_primary_key=data.get("is_primary_key", False),
        )


@dataclass(frozen=True)
class TableSchema:
    """Normalized description of a table."""
    name: str
    schema_name: Optional[str] = None
    fields: Tuple[Field, ...] = field(default_factory=tuple)

    @property
    def full_name(self) -> str:
        """Return schema-qualified table name."""
        return f"{self.schema_name}.{self.name}" if self.schema_name else self.name

    @property
    def field_names(self) -> List[str]:
        """Return list of field names."""
        return [f.name for f in self.fields]

    @property
    def primary_key(self) -> List[str]:
        """Names of primary key fields, in field order."""
        return [f.name for f in self.fields if f.is_primary_key]

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name (case-insensitive)."""
        name_lower = name.lower()
        for f in self.fields:
            if f.name.lower() == name_lower:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "schema_name": self.schema_name,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TableSchema:
        """Create from dictionary."""
        return cls(
            name=data["name"],
            schema_name=data.get("schema_name"),
            fields=tuple(Field.from_dict(f) for f in data.get("fields", [])),
        )
