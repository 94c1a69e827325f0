"""Remote command execution through a driver."""

import logging

from dockprov.provision.errors import CommandError

logger = logging.getLogger(__name__)


class SSHCommander:
    """Run commands on the driver's machine, raising on failure."""

    def __init__(self, driver):
        self.driver = driver

    async def ssh_command(self, command: str) -> str:
        logger.debug(f"[{self.driver.get_machine_name()}] ssh: {command}")
        returncode, stdout, stderr = await self.driver.run_command(command)
        if returncode != 0:
            raise CommandError(command, returncode, stdout, stderr)
        return stdout

    async def write_file(self, remote_path: str, content: str):
        logger.debug(f"[{self.driver.get_machine_name()}] scp -> {remote_path}")
        returncode, stderr = await self.driver.write_file(remote_path, content)
        if returncode != 0:
            raise CommandError(f"scp {remote_path}", returncode, "", stderr)
