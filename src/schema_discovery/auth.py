"""
Kerberos ticket acquisition for the authenticated connection path.

Logs in from a keytab with ``kinit`` so that drivers using GSSAPI pick the
ticket up from the credential cache.
"""

from __future__ import annotations

import logging
import os
import subprocess
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional

from schema_discovery.config import KerberosConfig
from schema_discovery.exceptions import DiscoveryConnectionError

logger = logging.getLogger(__name__)


class KerberosTicket:
    """Obtains a Kerberos ticket from a keytab."""

    def __init__(self, config: KerberosConfig):
        self.config = config

    @property
    def enabled(self) -> bool:
        return self.config.enabled

    def command(self) -> List[str]:
        """Build the kinit command line."""
        cmd = [self.config.kinit_command, "-kt", str(self.config.keytab)]
        if self.config.ticket_cache:
            cmd += ["-c", str(self.config.ticket_cache)]
        cmd.append(str(self.config.principal))
        return cmd

    def environment(self) -> Optional[Dict[str, str]]:
        """Environment for kinit, pointing KRB5CCNAME at the configured cache."""
        if not self.config.ticket_cache:
            return None
        env = dict(os.environ)
        env["KRB5CCNAME"] = f"FILE:{self.config.ticket_cache}"
        return env

    def obtain(self) -> None:
        """
        Run kinit for the configured principal.

        Raises:
            DiscoveryConnectionError: if kerberos is disabled or kinit fails
        """
        if not self.enabled:
            raise DiscoveryConnectionError("Kerberos is not enabled", operation="kinit")

        cmd = self.command()
        logger.debug(f"Obtaining Kerberos ticket for {self.config.principal}")
        try:
            subprocess.run(
                cmd,
                check=True,
                capture_output=True,
                text=True,
                env=self.environment(),
            )
        except FileNotFoundError as e:
            raise DiscoveryConnectionError(
                f"kinit command not found: {self.config.kinit_command}", operation="kinit"
            ) from e
        except subprocess.CalledProcessError as e:
            raise DiscoveryConnectionError(
                f"kinit failed for {self.config.principal}: {(e.stderr or '').strip()}",
                operation="kinit",
            ) from e

        logger.info(f"Obtained Kerberos ticket for {self.config.principal}")

    @contextmanager
    def credential_cache(self) -> Iterator[None]:
        """
        Point KRB5CCNAME at the configured ticket cache while a driver connects.

        GSSAPI inside the driver reads the cache location from the process
        environment, so the variable is set for the duration of the block and
        the previous value is restored afterwards. Without a configured cache
        the environment is left untouched.
        """
        if not self.config.ticket_cache:
            yield
            return

        previous = os.environ.get("KRB5CCNAME")
        os.environ["KRB5CCNAME"] = f"FILE:{self.config.ticket_cache}"
        try:
            yield
        finally:
            if previous is None:
                os.environ.pop("KRB5CCNAME", None)
            else:
                os.environ["KRB5CCNAME"] = previous
