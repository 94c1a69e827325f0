"""Machine drivers: connectivity, identity and the SSH transport."""

from dockprov.drivers.base import DEFAULT_ENGINE_INSTALL_URL, DEFAULT_ENGINE_PORT, Driver
from dockprov.drivers.generic import GenericDriver
from dockprov.drivers.shell import run_shell_cmd
from dockprov.drivers.ssh import wait_for_ssh
from dockprov.drivers.ssh_transport import make_run_cmd, make_write_file, scp_file, ssh_base_args
from dockprov.drivers.types import HostConnectionInfo

__all__ = [
    "DEFAULT_ENGINE_INSTALL_URL",
    "DEFAULT_ENGINE_PORT",
    "Driver",
    "GenericDriver",
    "HostConnectionInfo",
    "make_run_cmd",
    "make_write_file",
    "run_shell_cmd",
    "scp_file",
    "ssh_base_args",
    "wait_for_ssh",
]
