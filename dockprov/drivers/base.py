"""Driver interface consumed by the provisioners.

A driver owns connectivity to one machine and reports its identity. The
provisioning code only queries it and runs commands through it.
"""

from abc import ABC, abstractmethod

DEFAULT_ENGINE_INSTALL_URL = "https://get.docker.com"
DEFAULT_ENGINE_PORT = 2376


class Driver(ABC):
    """Connectivity and identity for a single machine."""

    dry_run = False

    @abstractmethod
    def get_machine_name(self) -> str:
        """Name the machine should carry (used as its hostname)."""

    @abstractmethod
    def driver_name(self) -> str:
        """Short identifier of the driver implementation."""

    @abstractmethod
    def get_ip(self) -> str:
        """Address other hosts use to reach the machine."""

    def get_url(self) -> str:
        """Docker engine URL, e.g. ``tcp://10.0.0.5:2376``."""
        return f"tcp://{self.get_ip()}:{DEFAULT_ENGINE_PORT}"

    @abstractmethod
    async def run_command(self, command: str) -> tuple[int, str, str]:
        """Run a shell command on the machine.

        Returns:
            (returncode, stdout, stderr) tuple
        """

    @abstractmethod
    async def write_file(self, remote_path: str, content: str) -> tuple[int, str]:
        """Copy *content* to *remote_path* as the connecting user.

        Returns:
            (returncode, stderr) tuple
        """
