"""Steps shared by every provisioner."""

import asyncio
import dataclasses
import logging
import posixpath
from dataclasses import dataclass

from dockprov.provision.errors import CommandError, DockerNotReadyError

logger = logging.getLogger(__name__)

LISTENING_PORTS_CMD = "if ! type netstat 1>/dev/null; then ss -tln; else netstat -tln; fi"


@dataclass
class DockerOptions:
    """Rendered daemon configuration and where it goes on the host."""

    engine_options: str
    engine_options_path: str


async def make_docker_options_dir(p):
    docker_dir = p.get_docker_options_dir()
    await p.ssh_command(f"sudo mkdir -p {docker_dir}")


def set_remote_auth_options(p):
    """Return the provisioner's auth options pointed at the remote cert locations."""
    docker_dir = p.get_docker_options_dir()
    # posixpath, not os.path: these are paths on the provisioned host
    return dataclasses.replace(
        p.get_auth_options(),
        ca_cert_remote_path=posixpath.join(docker_dir, "ca.pem"),
        server_cert_remote_path=posixpath.join(docker_dir, "server.pem"),
        server_key_remote_path=posixpath.join(docker_dir, "server-key.pem"),
    )


async def select_docker(p, base_url):
    """Replace the image's engine with the build served by *base_url*."""
    await p.ssh_command(f"wget -O- {base_url} | sh -")


async def install_docker_generic(p, base_url):
    """Install the engine with the install script at *base_url* unless already present."""
    await p.ssh_command(f"if ! type docker; then curl -sSL {base_url} | sh -; fi")


async def wait_for_docker(p, docker_port, attempts=60, interval=3):
    """Poll until the engine listens on *docker_port*."""
    if p.get_driver().dry_run:
        logger.info(f"[dry-run] Waiting for docker to listen on :{docker_port}")
        return

    needle = f":{docker_port}"
    for attempt in range(1, attempts + 1):
        try:
            output = await p.ssh_command(LISTENING_PORTS_CMD)
        except CommandError as e:
            logger.debug(f"Error checking docker port (attempt {attempt}/{attempts}): {e}")
        else:
            if needle in output:
                return
        if attempt < attempts:
            await asyncio.sleep(interval)

    raise DockerNotReadyError(
        f"Daemon not responding on port {docker_port} after {attempts} attempts"
    )
