"""
Configuration loading for schema discovery.

Reads a YAML file describing how to connect, whether to obtain a Kerberos
ticket, and which table types to list.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from schema_discovery.exceptions import ConfigError
from schema_discovery.metadata.base import DEFAULT_TABLE_TYPES

logger = logging.getLogger(__name__)

SUPPORTED_DRIVERS = ("odbc", "oracle")


@dataclass
class ConnectionConfig:
    """How to reach the database."""
    driver: str = "odbc"
    connection_string: Optional[str] = None
    authenticated_connection_string: Optional[str] = None
    dsn: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    timeout: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ConnectionConfig:
        """Create from dictionary."""
        driver = str(data.get("driver", "odbc")).lower()
        if driver not in SUPPORTED_DRIVERS:
            raise ConfigError(
                f"Unsupported driver '{driver}', expected one of {', '.join(SUPPORTED_DRIVERS)}"
            )
        if driver == "odbc" and not data.get("connection_string"):
            raise ConfigError("connection.connection_string is required for the odbc driver")
        if driver == "oracle" and not data.get("dsn"):
            raise ConfigError("connection.dsn is required for the oracle driver")

        timeout = data.get("timeout")
        return cls(
            driver=driver,
            connection_string=data.get("connection_string"),
            authenticated_connection_string=data.get("authenticated_connection_string"),
            dsn=data.get("dsn"),
            user=data.get("user"),
            password=data.get("password"),
            timeout=int(timeout) if timeout is not None else None,
        )


@dataclass
class KerberosConfig:
    """Keytab-based Kerberos login settings."""
    enabled: bool = False
    principal: Optional[str] = None
    keytab: Optional[Path] = None
    kinit_command: str = "kinit"
    ticket_cache: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> KerberosConfig:
        """Create from dictionary."""
        enabled = bool(data.get("enabled", False))
        if enabled and not (data.get("principal") and data.get("keytab")):
            raise ConfigError("kerberos.principal and kerberos.keytab are required when kerberos is enabled")
        return cls(
            enabled=enabled,
            principal=data.get("principal"),
            keytab=Path(data["keytab"]) if data.get("keytab") else None,
            kinit_command=data.get("kinit_command", "kinit"),
            ticket_cache=Path(data["ticket_cache"]) if data.get("ticket_cache") else None,
        )


@dataclass
class DiscoveryConfig:
    """Top-level configuration."""
    connection: ConnectionConfig
    kerberos: KerberosConfig = field(default_factory=KerberosConfig)
    table_types: Tuple[str, ...] = DEFAULT_TABLE_TYPES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DiscoveryConfig:
        """Create from dictionary."""
        if not isinstance(data, dict) or "connection" not in data:
            raise ConfigError("Configuration must contain a 'connection' section")

        discovery = data.get("discovery") or {}
        table_types = discovery.get("table_types", list(DEFAULT_TABLE_TYPES))
        if isinstance(table_types, str):
            table_types = [t.strip() for t in table_types.split(",")]

        return cls(
            connection=ConnectionConfig.from_dict(data["connection"] or {}),
            kerberos=KerberosConfig.from_dict(data.get("kerberos") or {}),
            table_types=tuple(t.upper() for t in table_types if t),
        )


def load_config(path: Path) -> DiscoveryConfig:
    """
    Load discovery configuration from a YAML file.

    Args:
        path: Path to the YAML file

    Returns:
        DiscoveryConfig

    Raises:
        ConfigError: if the file is missing, unparsable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Unable to parse configuration file {path}: {e}") from e

    config = DiscoveryConfig.from_dict(data)
    logger.info(f"Loaded {config.connection.driver} configuration from {path}")
    return config


def build_provider(config: DiscoveryConfig):
    """Return the connection provider for the configured driver."""
    if config.connection.driver == "oracle":
        from schema_discovery.metadata.oracle import OracleConnectionProvider
        return OracleConnectionProvider(config.connection, config.kerberos)

    from schema_discovery.metadata.odbc import OdbcConnectionProvider
    return OdbcConnectionProvider(config.connection, config.kerberos)
