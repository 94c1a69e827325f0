"""Behaviour shared by all OS provisioners and the provisioning sequence."""

import copy
import logging
import posixpath
import shlex
from abc import ABC, abstractmethod

from dockprov.drivers.base import DEFAULT_ENGINE_INSTALL_URL
from dockprov.drivers.types import is_valid_hostname
from dockprov.options import AuthOptions, EngineOptions, SwarmOptions
from dockprov.provision.actions import PackageAction
from dockprov.provision.auth import configure_auth
from dockprov.provision.commander import SSHCommander
from dockprov.provision.errors import InvalidHostnameError, UnsupportedStorageDriverError
from dockprov.provision.os_release import OsRelease
from dockprov.provision.swarm import configure_swarm, swarm_host_port
from dockprov.provision.utils import (
    DockerOptions,
    install_docker_generic,
    make_docker_options_dir,
    set_remote_auth_options,
)

logger = logging.getLogger(__name__)

# ubuntu/debian resolve non-localhost loopback hostnames through 127.0.1.1
HOSTS_ENTRY_TMPL = """
if ! grep -xq .*{hostname} /etc/hosts; then
    if grep -xq 127.0.1.1.* /etc/hosts; then
        sudo sed -i 's/^127.0.1.1.*/127.0.1.1 {hostname}/g' /etc/hosts;
    else
        echo '127.0.1.1 {hostname}' | sudo tee -a /etc/hosts;
    fi
fi"""


class GenericProvisioner(ABC):
    """Base for OS provisioners.

    Subclasses set the per-OS paths and package list, and implement
    :meth:`package` and :meth:`service`. Everything else has a working
    default that subclasses may override or wrap.
    """

    os_release_id = ""
    docker_options_dir = "/etc/docker"
    daemon_options_file = "/etc/default/docker"
    packages = ()
    default_storage_driver = "overlay2"
    # where files are staged before being installed with sudo
    staging_dir = "/tmp"
    # None accepts any explicitly requested driver
    supported_storage_drivers = None

    def __init__(self, driver):
        self.driver = driver
        self.ssh_commander = SSHCommander(driver)
        self.packages = list(self.packages)
        self.os_release_info = OsRelease()
        self.engine_options = EngineOptions()
        self.auth_options = AuthOptions()
        self.swarm_options = SwarmOptions()

    def __str__(self):
        return self.os_release_id

    def __repr__(self):
        return f"<{type(self).__name__} {self.driver.get_machine_name()}>"

    @abstractmethod
    async def package(self, name, action):
        """Install, remove or upgrade package *name*."""

    @abstractmethod
    async def service(self, name, action):
        """Apply a ServiceAction to service *name*."""

    async def ssh_command(self, command):
        return await self.ssh_commander.ssh_command(command)

    async def write_file(self, remote_path, content, mode="644"):
        """Install *content* as root-owned *remote_path* with permissions *mode*."""
        staged = posixpath.join(self.staging_dir, f"dockprov.{posixpath.basename(remote_path)}")
        await self.ssh_commander.write_file(staged, content)
        await self.ssh_command(
            f"sudo install -m {mode} {staged} {remote_path}; rc=$?; rm -f {staged}; [ $rc -eq 0 ]"
        )

    async def set_hostname(self, hostname):
        await self.ssh_command(
            f'sudo hostname {hostname} && echo "{hostname}" | sudo tee /etc/hostname'
        )
        await self.ssh_command(HOSTS_ENTRY_TMPL.format(hostname=hostname))

    def get_driver(self):
        return self.driver

    def get_docker_options_dir(self):
        return self.docker_options_dir

    def get_auth_options(self):
        return self.auth_options

    def get_swarm_options(self):
        return self.swarm_options

    def set_os_release_info(self, info):
        self.os_release_info = info

    def get_os_release_info(self):
        return self.os_release_info

    def compatible_with_host(self):
        return self.os_release_info.id == self.os_release_id

    def resolve_storage_driver(self, engine_options):
        """Default an empty storage driver; reject one this OS cannot run."""
        if not engine_options.storage_driver:
            engine_options.storage_driver = self.default_storage_driver
        elif (self.supported_storage_drivers is not None
                and engine_options.storage_driver not in self.supported_storage_drivers):
            raise UnsupportedStorageDriverError(engine_options.storage_driver, str(self))

    def daemon_flags(self, docker_port):
        """Engine daemon flags derived from the engine and auth options."""
        engine = self.engine_options
        auth = self.auth_options
        flags = [
            f"-H tcp://0.0.0.0:{docker_port}",
            "-H unix:///var/run/docker.sock",
            f"--storage-driver {engine.storage_driver}",
            "--tlsverify" if engine.tls_verify else "--tls",
            f"--tlscacert {auth.ca_cert_remote_path}",
            f"--tlscert {auth.server_cert_remote_path}",
            f"--tlskey {auth.server_key_remote_path}",
        ]
        if engine.graph_dir:
            flags.append(f"--data-root {engine.graph_dir}")
        if engine.log_level:
            flags.append(f"--log-level {engine.log_level}")
        if engine.ipv6:
            flags.append("--ipv6")
        if engine.selinux_enabled:
            flags.append("--selinux-enabled")
        labels = [*engine.labels, f"provider={self.driver.driver_name()}"]
        flags += [f"--label {label}" for label in labels]
        flags += [f"--dns {server}" for server in engine.dns]
        flags += [f"--insecure-registry {registry}" for registry in engine.insecure_registry]
        flags += [f"--registry-mirror {mirror}" for mirror in engine.registry_mirror]
        flags += [f"--{flag}" for flag in engine.arbitrary_flags]
        return flags

    def generate_docker_options(self, docker_port):
        """Render the daemon options file in the DOCKER_OPTS format."""
        body = "\n".join(self.daemon_flags(docker_port))
        exports = "".join(f"export {shlex.quote(env)}\n" for env in self.engine_options.env)
        return DockerOptions(
            engine_options=f"\nDOCKER_OPTS='\n{body}\n'\n{exports}",
            engine_options_path=self.daemon_options_file,
        )

    async def install_engine(self, engine_options):
        await install_docker_generic(self, engine_options.install_url)

    async def provision(self, swarm_options, auth_options, engine_options):
        """Bring the machine to a running, TLS-secured, optionally clustered engine.

        The caller's option objects are copied, never modified. Steps run in
        order and the first failure is raised unchanged.
        """
        name = self.driver.get_machine_name()
        if not is_valid_hostname(name):
            raise InvalidHostnameError(name)
        logger.debug(f"Running {self} provisioner on {name}")

        self.engine_options = copy.deepcopy(engine_options)
        self.auth_options = auth_options
        self.swarm_options = copy.deepcopy(swarm_options)
        self.swarm_options.env = list(self.engine_options.env)

        self.resolve_storage_driver(self.engine_options)
        if self.swarm_options.master:
            swarm_host_port(self.swarm_options.host)

        logger.debug(f"Setting hostname {name}")
        await self.set_hostname(name)

        for pkg in self.packages:
            logger.debug(f"Installing package {pkg}")
            await self.package(pkg, PackageAction.INSTALL)

        await self.install_engine(self.engine_options)

        await make_docker_options_dir(self)

        logger.debug("Preparing certificates")
        self.auth_options = set_remote_auth_options(self)

        logger.debug("Setting up certificates")
        await configure_auth(self)

        logger.debug("Configuring swarm")
        await configure_swarm(self, self.swarm_options, self.auth_options)

    def uses_default_install_url(self, engine_options):
        return engine_options.install_url == DEFAULT_ENGINE_INSTALL_URL
