"""OS provisioners, the registry that selects them, and their shared steps."""

from dockprov.provision.actions import PackageAction, ServiceAction
from dockprov.provision.errors import (
    AuthError,
    CommandError,
    DetectionError,
    DockerNotReadyError,
    InvalidHostnameError,
    ProvisionError,
    ProvisionerNotFoundError,
    SwarmConfigError,
    UnsupportedActionError,
    UnsupportedStorageDriverError,
)
from dockprov.provision.generic import GenericProvisioner
from dockprov.provision.os_release import OsRelease, parse_os_release
from dockprov.provision.registry import (
    detect_provisioner,
    get_provisioner_factory,
    new_provisioner,
    register,
    registered_provisioners,
)

# Registration order is detection order
from dockprov.provision.alpine import AlpineProvisioner  # noqa: E402
from dockprov.provision.boot2docker import Boot2DockerProvisioner  # noqa: E402
from dockprov.provision.debian import DebianProvisioner  # noqa: E402
from dockprov.provision.ubuntu import UbuntuSystemdProvisioner  # noqa: E402
from dockprov.provision.redhat import RedHatProvisioner  # noqa: E402
from dockprov.provision.centos import CentOSProvisioner  # noqa: E402
from dockprov.provision.fedora import FedoraProvisioner  # noqa: E402

__all__ = [
    "AlpineProvisioner",
    "AuthError",
    "Boot2DockerProvisioner",
    "CentOSProvisioner",
    "CommandError",
    "DebianProvisioner",
    "DetectionError",
    "DockerNotReadyError",
    "FedoraProvisioner",
    "GenericProvisioner",
    "InvalidHostnameError",
    "OsRelease",
    "PackageAction",
    "ProvisionError",
    "ProvisionerNotFoundError",
    "RedHatProvisioner",
    "ServiceAction",
    "SwarmConfigError",
    "UbuntuSystemdProvisioner",
    "UnsupportedActionError",
    "UnsupportedStorageDriverError",
    "detect_provisioner",
    "get_provisioner_factory",
    "new_provisioner",
    "parse_os_release",
    "register",
    "registered_provisioners",
]
