"""Engine, auth and swarm option dataclasses."""

import os
from dataclasses import dataclass, field, fields

from dockprov.drivers.base import DEFAULT_ENGINE_INSTALL_URL

DEFAULT_CERT_DIR = "~/.dockprov/certs"


def _known_keys(cls, d: dict) -> dict:
    """Keep only keys that are fields of *cls*; reject unknown ones."""
    names = {f.name for f in fields(cls)}
    unknown = sorted(set(d) - names)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} field(s): {', '.join(unknown)}")
    return dict(d)


@dataclass
class EngineOptions:
    """Which engine build to install and how the daemon is configured."""

    arbitrary_flags: list[str] = field(default_factory=list)
    dns: list[str] = field(default_factory=list)
    graph_dir: str = ""
    env: list[str] = field(default_factory=list)
    ipv6: bool = False
    insecure_registry: list[str] = field(default_factory=list)
    labels: list[str] = field(default_factory=list)
    log_level: str = ""
    storage_driver: str = ""
    selinux_enabled: bool = False
    tls_verify: bool = True
    registry_mirror: list[str] = field(default_factory=list)
    install_url: str = DEFAULT_ENGINE_INSTALL_URL

    @classmethod
    def from_dict(cls, d: dict) -> "EngineOptions":
        return cls(**_known_keys(cls, d or {}))


@dataclass
class AuthOptions:
    """Local and remote locations of the TLS material."""

    cert_dir: str = ""
    ca_cert_path: str = ""
    ca_private_key_path: str = ""
    ca_cert_remote_path: str = ""
    server_cert_path: str = ""
    server_key_path: str = ""
    client_key_path: str = ""
    client_cert_path: str = ""
    server_cert_remote_path: str = ""
    server_key_remote_path: str = ""
    server_cert_sans: list[str] = field(default_factory=list)
    store_path: str = ""

    @classmethod
    def from_cert_dir(cls, cert_dir: str, **overrides) -> "AuthOptions":
        """Build options whose local paths use the conventional file names in *cert_dir*."""
        cert_dir = os.path.expanduser(cert_dir)
        values = {
            "cert_dir": cert_dir,
            "ca_cert_path": os.path.join(cert_dir, "ca.pem"),
            "ca_private_key_path": os.path.join(cert_dir, "ca-key.pem"),
            "server_cert_path": os.path.join(cert_dir, "server.pem"),
            "server_key_path": os.path.join(cert_dir, "server-key.pem"),
            "client_cert_path": os.path.join(cert_dir, "cert.pem"),
            "client_key_path": os.path.join(cert_dir, "key.pem"),
            "store_path": cert_dir,
        }
        values.update({k: v for k, v in overrides.items() if v})
        return cls(**values)

    @classmethod
    def from_dict(cls, d: dict) -> "AuthOptions":
        d = _known_keys(cls, d or {})
        cert_dir = d.pop("cert_dir", "")
        if cert_dir:
            return cls.from_cert_dir(cert_dir, **d)
        return cls(**d)


@dataclass
class SwarmOptions:
    """Swarm cluster membership for the machine."""

    is_swarm: bool = False
    address: str = ""
    discovery: str = ""
    agent: bool = False
    master: bool = False
    host: str = "tcp://0.0.0.0:3376"
    image: str = "swarm:latest"
    strategy: str = "spread"
    heartbeat: int = 0
    overcommit: float = 0.0
    arbitrary_flags: list[str] = field(default_factory=list)
    arbitrary_join_flags: list[str] = field(default_factory=list)
    env: list[str] = field(default_factory=list)
    is_experimental: bool = False

    @classmethod
    def from_dict(cls, d: dict) -> "SwarmOptions":
        d = _known_keys(cls, d or {})
        # Asking for a master or an agent implies swarm membership
        if d.get("master") or d.get("agent"):
            d.setdefault("is_swarm", True)
        return cls(**d)
