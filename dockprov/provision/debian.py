"""Debian provisioner (apt + systemd)."""

import logging

from dockprov.provision.actions import PackageAction
from dockprov.provision.errors import UnsupportedActionError
from dockprov.provision.registry import register
from dockprov.provision.systemd import SystemdProvisioner

logger = logging.getLogger(__name__)

APT_TMPL = 'DEBIAN_FRONTEND=noninteractive sudo -E apt-get {action} -y -o Dpkg::Options::="--force-confnew" {name}'


class DebianProvisioner(SystemdProvisioner):
    os_release_id = "debian"
    packages = ("curl",)

    def __str__(self):
        return "debian"

    async def package(self, name, action):
        if action == PackageAction.INSTALL:
            # fresh cloud images often ship with an empty package index
            await self.ssh_command("sudo apt-get update")
            apt_action = "install"
        elif action == PackageAction.REMOVE:
            apt_action = "remove"
        elif action == PackageAction.UPGRADE:
            apt_action = "upgrade"
        else:
            raise UnsupportedActionError(str(self), action, name)

        logger.debug(f"package: action={action} name={name}")
        await self.ssh_command(APT_TMPL.format(action=apt_action, name=name))


register("debian", DebianProvisioner)
