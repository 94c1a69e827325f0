"""boot2docker provisioner.

boot2docker runs from a read-only image with the engine built in, so there
is no package manager and nothing to install. Persistent settings live
under /var/lib/boot2docker.
"""

import shlex

from dockprov.provision.errors import UnsupportedActionError
from dockprov.provision.generic import GenericProvisioner
from dockprov.provision.registry import register
from dockprov.provision.utils import DockerOptions


class Boot2DockerProvisioner(GenericProvisioner):
    os_release_id = "boot2docker"
    docker_options_dir = "/var/lib/boot2docker"
    daemon_options_file = "/var/lib/boot2docker/profile"
    packages = ()

    def __str__(self):
        return "boot2docker"

    async def service(self, name, action):
        await self.ssh_command(f"sudo /etc/init.d/{name} {action}")

    async def package(self, name, action):
        raise UnsupportedActionError(str(self), action, name)

    async def set_hostname(self, hostname):
        await self.ssh_command(
            f'sudo /usr/bin/sethostname {hostname} && echo "{hostname}"'
            " | sudo tee /var/lib/boot2docker/etc/hostname"
        )

    def generate_docker_options(self, docker_port):
        engine = self.engine_options
        auth = self.auth_options
        # the boot2docker init script adds the host, storage and TLS flags itself
        skip = ("-H ", "--storage-driver", "--tls")
        extra_args = "\n".join(
            flag for flag in self.daemon_flags(docker_port) if not flag.startswith(skip)
        )
        exports = "".join(f"export {shlex.quote(env)}\n" for env in engine.env)
        profile = (
            f"\nEXTRA_ARGS='\n{extra_args}\n'\n"
            f"CACERT={auth.ca_cert_remote_path}\n"
            f"DOCKER_HOST='-H tcp://0.0.0.0:{docker_port}'\n"
            f"DOCKER_STORAGE={engine.storage_driver}\n"
            f"DOCKER_TLS=auto\n"
            f"SERVERKEY={auth.server_key_remote_path}\n"
            f"SERVERCERT={auth.server_cert_remote_path}\n"
            f"\n{exports}"
        )
        return DockerOptions(engine_options=profile, engine_options_path=self.daemon_options_file)

    async def install_engine(self, engine_options):
        # the engine ships with the image
        return


register("boot2docker", Boot2DockerProvisioner)
