"""Red Hat Enterprise Linux provisioner (yum + systemd)."""

from dockprov.provision.actions import PackageAction
from dockprov.provision.errors import UnsupportedActionError
from dockprov.provision.registry import register
from dockprov.provision.systemd import SystemdProvisioner


class RedHatProvisioner(SystemdProvisioner):
    os_release_id = "rhel"
    packages = ("curl",)
    package_manager = "yum"

    def __str__(self):
        return "redhat"

    async def package(self, name, action):
        if action == PackageAction.INSTALL:
            command = f"sudo -E {self.package_manager} install -y {name}"
        elif action == PackageAction.REMOVE:
            command = f"sudo -E {self.package_manager} remove -y {name}"
        elif action == PackageAction.UPGRADE:
            command = f"sudo -E {self.package_manager} -y update -y {name}"
        else:
            raise UnsupportedActionError(str(self), action, name)

        await self.ssh_command(command)


register("redhat", RedHatProvisioner)
