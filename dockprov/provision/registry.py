"""Registry of OS provisioners and host detection.

Each OS module calls :func:`register` when it is imported; importing
:mod:`dockprov.provision` imports them all in a fixed order, so the table is
complete before any lookup and never changes afterwards.
"""

import logging
from types import MappingProxyType

from dockprov.provision.errors import CommandError, DetectionError, ProvisionerNotFoundError
from dockprov.provision.os_release import parse_os_release

logger = logging.getLogger(__name__)

_provisioners = {}


def register(name, factory):
    """Register *factory* (callable taking a driver) under *name*."""
    if name in _provisioners:
        raise ValueError(f"Provisioner '{name}' is already registered")
    _provisioners[name] = factory


def registered_provisioners():
    """Read-only view of name -> factory, in registration order."""
    return MappingProxyType(_provisioners)


def get_provisioner_factory(name):
    try:
        return _provisioners[name]
    except KeyError:
        raise ProvisionerNotFoundError(name, list(_provisioners)) from None


def new_provisioner(name, driver):
    """Instantiate the provisioner registered as *name* bound to *driver*."""
    return get_provisioner_factory(name)(driver)


async def detect_provisioner(driver):
    """Pick the provisioner matching the host's /etc/os-release."""
    name = driver.get_machine_name()
    logger.debug(f"Detecting the provisioner for {name}")

    returncode, stdout, stderr = await driver.run_command("cat /etc/os-release")
    if returncode != 0:
        raise CommandError("cat /etc/os-release", returncode, stdout, stderr)

    release = parse_os_release(stdout)
    for registered_name, factory in _provisioners.items():
        provisioner = factory(driver)
        provisioner.set_os_release_info(release)
        if provisioner.compatible_with_host():
            logger.debug(f"Found compatible host ({registered_name}) for {name}")
            return provisioner

    raise DetectionError(
        f"Error detecting OS of {name}: no provisioner for ID={release.id or '<empty>'}"
    )
