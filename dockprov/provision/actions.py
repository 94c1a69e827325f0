"""Package and service action vocabularies."""

from enum import Enum


class PackageAction(Enum):
    INSTALL = "install"
    REMOVE = "remove"
    UPGRADE = "upgrade"

    def __str__(self):
        return self.value


class ServiceAction(Enum):
    """Service operations, rendered as the token passed to the service manager."""

    RESTART = "restart"
    START = "start"
    STOP = "stop"
    ENABLE = "enable"
    DISABLE = "disable"
    DAEMON_RELOAD = "daemon-reload"

    def __str__(self):
        return self.value
