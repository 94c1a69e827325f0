"""Shared data types for drivers."""

import re
from dataclasses import dataclass


@dataclass
class HostConnectionInfo:
    """SSH connection details for an existing host."""

    host: str
    username: str = "root"
    ssh_port: int = 22
    ssh_key: str = ""

    @property
    def address(self) -> str:
        """SSH address string (user@host)."""
        return f"{self.username}@{self.host}" if self.username else self.host


_HOSTNAME_LABEL = re.compile(r"[A-Za-z0-9]([A-Za-z0-9-]{0,61}[A-Za-z0-9])?")


def is_valid_hostname(name: str) -> bool:
    """RFC 1123 host name: dot-separated labels of letters, digits and inner hyphens."""
    if not name or len(name) > 253:
        return False
    return all(_HOSTNAME_LABEL.fullmatch(label) for label in name.split("."))
