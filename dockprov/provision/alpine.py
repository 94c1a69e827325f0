"""Alpine Linux provisioner (OpenRC)."""

import logging

from dockprov.provision.actions import PackageAction
from dockprov.provision.errors import CommandError, UnsupportedActionError
from dockprov.provision.generic import GenericProvisioner
from dockprov.provision.registry import register
from dockprov.provision.utils import select_docker

logger = logging.getLogger(__name__)

# /etc/hosts is bind mounted from Docker, so the generic provisioner must not
# try to replace it in place
HOSTS_CLEANUP_CMD = "sed /127.0.1.1/d /etc/hosts > /tmp/hosts && cat /tmp/hosts | sudo tee /etc/hosts"
HOSTNAME_TMPL = "echo 'hostname=\"{hostname}\"' | sudo tee /etc/conf.d/hostname"


class AlpineProvisioner(GenericProvisioner):
    """Provisioner for Alpine hosts.

    The docker package is already present on the image; installing a package
    here means adding it to the boot runlevel.
    """

    os_release_id = "alpine"
    docker_options_dir = "/etc/docker"
    daemon_options_file = "/etc/conf.d/docker"
    packages = ("docker",)
    default_storage_driver = "overlay"
    supported_storage_drivers = ("overlay",)

    def __str__(self):
        return "alpine"

    async def service(self, name, action):
        await self.ssh_command(f"sudo rc-service {name} {action}")

    async def package(self, name, action):
        if name == "docker" and action == PackageAction.UPGRADE:
            return await self.upgrade()

        if action == PackageAction.INSTALL:
            command = f"sudo rc-update add {name} boot"
        elif action == PackageAction.REMOVE:
            command = f"sudo rc-update del {name} boot"
        else:
            raise UnsupportedActionError(str(self), action, name)

        await self.ssh_command(command)

    async def set_hostname(self, hostname):
        await self.ssh_command(HOSTS_CLEANUP_CMD)
        await super().set_hostname(hostname)
        await self.ssh_command(HOSTNAME_TMPL.format(hostname=hostname))

    async def install_engine(self, engine_options):
        if self.uses_default_install_url(engine_options):
            logger.debug(f"Skipping docker engine default: {engine_options.install_url}")
            return
        logger.debug(f"Selecting docker engine: {engine_options.install_url}")
        await select_docker(self, engine_options.install_url)

    async def upgrade(self):
        logger.info(f"[{self.driver.get_machine_name()}] Running upgrade")
        await self.ssh_command("sudo apk upgrade")

        logger.info(f"[{self.driver.get_machine_name()}] Upgrade succeeded, rebooting")
        try:
            await self.ssh_command("sudo reboot")
        except CommandError as e:
            # the reboot drops the SSH session, so its failure tells us nothing
            logger.debug(f"Ignoring reboot result: {e}")


register("AlpineLinux", AlpineProvisioner)
