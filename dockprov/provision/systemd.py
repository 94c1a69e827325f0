"""Common base for systemd based distributions."""

from dockprov.provision.actions import ServiceAction
from dockprov.provision.generic import GenericProvisioner
from dockprov.provision.utils import DockerOptions


class SystemdProvisioner(GenericProvisioner):
    """Service control through systemctl; daemon options as a unit drop-in."""

    docker_options_dir = "/etc/docker"
    daemon_options_file = "/etc/systemd/system/docker.service.d/10-machine.conf"
    dockerd_binary = "/usr/bin/dockerd"

    async def service(self, name, action):
        # unit files may have changed on disk since the last start
        if action in (ServiceAction.START, ServiceAction.RESTART):
            await self.ssh_command("sudo systemctl daemon-reload")

        await self.ssh_command(f"sudo systemctl -f {action} {name}")

    def generate_docker_options(self, docker_port):
        flags = " ".join(self.daemon_flags(docker_port))
        lines = [
            "[Service]",
            "ExecStart=",
            f"ExecStart={self.dockerd_binary} {flags}",
        ]
        if self.engine_options.env:
            lines.append("Environment=" + " ".join(f'"{env}"' for env in self.engine_options.env))
        return DockerOptions(
            engine_options="\n".join(lines) + "\n",
            engine_options_path=self.daemon_options_file,
        )

    async def install_engine(self, engine_options):
        await super().install_engine(engine_options)
        await self.service("docker", ServiceAction.ENABLE)
