"""Provisioning exceptions."""


class ProvisionError(Exception):
    """Base class for provisioning failures."""


class CommandError(ProvisionError):
    """A remote command exited non-zero or the transport failed.

    The message carries the remote output unchanged so the operator sees the
    host's own diagnostic.
    """

    def __init__(self, command, returncode, stdout="", stderr=""):
        self.command = command
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        output = (stderr or stdout).strip()
        super().__init__(
            f"ssh command error:\ncommand : {command}\nexit    : {returncode}\noutput  : {output}"
        )


class UnsupportedStorageDriverError(ProvisionError):
    def __init__(self, storage_driver, os_name=""):
        self.storage_driver = storage_driver
        self.os_name = os_name
        super().__init__(f"Unsupported storage driver: {storage_driver}")


class UnsupportedActionError(ProvisionError):
    """An action the OS family has no translation for."""

    def __init__(self, os_name, action, name=""):
        self.os_name = os_name
        self.action = action
        target = f" for {name}" if name else ""
        super().__init__(f"{os_name}: unsupported action {action!r}{target}")


class ProvisionerNotFoundError(ProvisionError):
    def __init__(self, name, available=()):
        self.name = name
        choices = ", ".join(available) if available else "none"
        super().__init__(f"Unknown provisioner '{name}'. Available: {choices}")


class DetectionError(ProvisionError):
    """No registered provisioner is compatible with the host."""


class AuthError(ProvisionError):
    """TLS material could not be read or installed."""


class DockerNotReadyError(ProvisionError):
    """The engine never started listening after configuration."""


class InvalidHostnameError(ProvisionError):
    def __init__(self, hostname):
        self.hostname = hostname
        super().__init__(f"Invalid machine name {hostname!r}: must be a valid host name")


class SwarmConfigError(ProvisionError):
    """Swarm options that cannot be turned into a container command."""
