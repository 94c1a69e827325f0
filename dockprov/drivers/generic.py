"""Generic driver: an already running host reachable over SSH."""

import logging

from dockprov.drivers.base import Driver
from dockprov.drivers.ssh import wait_for_ssh
from dockprov.drivers.ssh_transport import make_run_cmd, make_write_file
from dockprov.drivers.types import HostConnectionInfo

logger = logging.getLogger(__name__)


class GenericDriver(Driver):
    """Drive an existing machine through plain SSH."""

    def __init__(self, machine_name: str, conn: HostConnectionInfo, dry_run: bool = False,
                 command_timeout: int | None = None):
        self.machine_name = machine_name
        self.conn = conn
        self.dry_run = dry_run
        self._run_cmd = make_run_cmd(
            conn.address, conn.ssh_key, conn.ssh_port, dry_run=dry_run, timeout=command_timeout,
        )
        self._write_file = make_write_file(conn.address, conn.ssh_key, conn.ssh_port, dry_run=dry_run)

    def get_machine_name(self) -> str:
        return self.machine_name

    def driver_name(self) -> str:
        return "generic"

    def get_ip(self) -> str:
        return self.conn.host

    async def run_command(self, command: str) -> tuple[int, str, str]:
        return await self._run_cmd(command, log_output=logger.isEnabledFor(logging.DEBUG))

    async def write_file(self, remote_path: str, content: str) -> tuple[int, str]:
        return await self._write_file(remote_path, content)

    async def wait_ready(self, timeout=120, interval=5) -> bool:
        """Block until the host accepts SSH connections."""
        logger.info(f"Waiting for SSH connectivity to {self.conn.address}...")
        return await wait_for_ssh(
            self.conn.host,
            self.conn.username,
            self.conn.ssh_port,
            self.conn.ssh_key,
            timeout=timeout,
            interval=interval,
            dry_run=self.dry_run,
        )
