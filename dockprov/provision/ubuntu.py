"""Ubuntu provisioner for systemd releases (15.04 and later)."""

from dockprov.provision.debian import DebianProvisioner
from dockprov.provision.registry import register


def _version_tuple(version_id):
    try:
        return tuple(int(part) for part in version_id.split("."))
    except ValueError:
        return ()


class UbuntuSystemdProvisioner(DebianProvisioner):
    """Same apt handling as Debian; only systemd based releases are accepted."""

    os_release_id = "ubuntu"

    def __str__(self):
        return "ubuntu(systemd)"

    def compatible_with_host(self):
        info = self.os_release_info
        return info.id == self.os_release_id and _version_tuple(info.version_id) >= (15, 4)


register("ubuntu-systemd", UbuntuSystemdProvisioner)
