"""CentOS provisioner."""

from dockprov.provision.redhat import RedHatProvisioner
from dockprov.provision.registry import register


class CentOSProvisioner(RedHatProvisioner):
    os_release_id = "centos"

    def __str__(self):
        return "centos"


register("centos", CentOSProvisioner)
