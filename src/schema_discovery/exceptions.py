"""
Exception hierarchy for schema discovery.

Fatal failures carry the operation and the schema/table they were working on.
"""

from __future__ import annotations

from typing import Optional


class DiscoveryError(Exception):
    """Base class for all discovery failures."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        schema: Optional[str] = None,
        table: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.operation = operation
        self.schema = schema
        self.table = table

    def __str__(self) -> str:
        context = []
        if self.operation:
            context.append(f"operation={self.operation}")
        if self.schema is not None:
            context.append(f"schema={self.schema}")
        if self.table is not None:
            context.append(f"table={self.table}")
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class InvalidArgumentError(DiscoveryError, ValueError):
    """A required argument was missing or empty."""


class DiscoveryConnectionError(DiscoveryError):
    """Acquiring or authenticating a connection failed."""


class QueryError(DiscoveryError):
    """A metadata query failed."""


class ConfigError(DiscoveryError):
    """Configuration could not be read or is invalid."""
