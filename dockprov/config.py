"""Machine configuration files.

A config file lists the machines to provision. Values under ``defaults`` are
deep-merged under every entry of ``machines``::

    defaults:
      host: {username: root, ssh_key: ~/.ssh/id_ed25519}
      auth: {cert_dir: ~/.dockprov/certs}
    machines:
      - name: node1
        os: AlpineLinux
        host: {address: 10.0.0.5}
        swarm: {master: true, discovery: "token://abc"}
"""

import logging
import os
from dataclasses import dataclass, field

import yaml

from dockprov.drivers.types import HostConnectionInfo, is_valid_hostname
from dockprov.options import DEFAULT_CERT_DIR, AuthOptions, EngineOptions, SwarmOptions

logger = logging.getLogger(__name__)

_MACHINE_KEYS = {"name", "os", "host", "engine", "auth", "swarm"}


@dataclass
class MachineConfig:
    """Everything needed to provision one machine."""

    name: str
    host: HostConnectionInfo
    os: str | None = None  # registered provisioner name; detected when None
    engine: EngineOptions = field(default_factory=EngineOptions)
    auth: AuthOptions = field(default_factory=AuthOptions)
    swarm: SwarmOptions = field(default_factory=SwarmOptions)

    @classmethod
    def from_dict(cls, d: dict) -> "MachineConfig":
        unknown = sorted(set(d) - _MACHINE_KEYS)
        if unknown:
            raise ValueError(f"Unknown machine field(s): {', '.join(unknown)}")
        name = d.get("name")
        if not name:
            raise ValueError("Machine entry is missing 'name'")
        name = str(name)
        if not is_valid_hostname(name):
            raise ValueError(f"Machine name '{name}' is not a valid host name")
        host_dict = dict(d.get("host") or {})
        address = host_dict.pop("address", None)
        if not address:
            raise ValueError(f"Machine '{name}' is missing 'host.address'")
        if "ssh_key" in host_dict:
            host_dict["ssh_key"] = os.path.expanduser(host_dict["ssh_key"])
        auth_dict = dict(d.get("auth") or {})
        auth_dict.setdefault("cert_dir", DEFAULT_CERT_DIR)
        return cls(
            name=name,
            host=HostConnectionInfo(host=address, **host_dict),
            os=d.get("os"),
            engine=EngineOptions.from_dict(d.get("engine")),
            auth=AuthOptions.from_dict(auth_dict),
            swarm=SwarmOptions.from_dict(d.get("swarm")),
        )


def deep_merge(base, override):
    """Recursive dict merge. Override wins for scalars."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_machines(path):
    """Load a machines file and return a list of MachineConfig."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    defaults = config.get("defaults") or {}
    entries = config.get("machines") or []
    if not entries:
        raise ValueError(f"No machines defined in {path}")

    machines = [MachineConfig.from_dict(deep_merge(defaults, entry)) for entry in entries]
    names = [m.name for m in machines]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        raise ValueError(f"Duplicate machine name(s) in {path}: {', '.join(duplicates)}")

    logger.debug(f"Loaded {len(machines)} machine(s) from {path}")
    return machines
