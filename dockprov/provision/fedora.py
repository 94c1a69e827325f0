"""Fedora provisioner (dnf)."""

from dockprov.provision.redhat import RedHatProvisioner
from dockprov.provision.registry import register


class FedoraProvisioner(RedHatProvisioner):
    os_release_id = "fedora"
    package_manager = "dnf"

    def __str__(self):
        return "fedora"


register("fedora", FedoraProvisioner)
