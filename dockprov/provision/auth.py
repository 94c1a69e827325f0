"""Install TLS material on the host and point the engine at it.

Certificates are produced elsewhere; this module only copies the CA
certificate and the server key pair to the remote paths held in the
provisioner's auth options, then rewrites the daemon options and restarts
the engine.
"""

import logging
import posixpath
from urllib.parse import urlsplit

from dockprov.drivers.base import DEFAULT_ENGINE_PORT
from dockprov.provision.actions import ServiceAction
from dockprov.provision.errors import AuthError
from dockprov.provision.utils import wait_for_docker
from dockprov.redact import register_secret

logger = logging.getLogger(__name__)


def _read_local(path, what):
    if not path:
        raise AuthError(f"No local path configured for the {what}")
    try:
        with open(path) as f:
            return f.read()
    except OSError as e:
        raise AuthError(f"Error reading {what} {path}: {e}") from e


def docker_port_from_url(url):
    """Port of a ``tcp://host:port`` engine URL, 2376 when absent."""
    port = urlsplit(url).port if url else None
    return port or DEFAULT_ENGINE_PORT


async def configure_auth(p):
    """Copy certs to the host, write daemon options, restart docker and wait for it."""
    driver = p.get_driver()
    auth = p.get_auth_options()

    ca_cert = _read_local(auth.ca_cert_path, "CA certificate")
    server_cert = _read_local(auth.server_cert_path, "server certificate")
    server_key = _read_local(auth.server_key_path, "server key")
    register_secret(server_key.strip())

    logger.info(f"[{driver.get_machine_name()}] Copying certs to the remote machine...")
    remote_dir = posixpath.dirname(auth.ca_cert_remote_path)
    await p.ssh_command(f"sudo mkdir -p {remote_dir}")

    remote_certs = [
        (ca_cert, auth.ca_cert_remote_path, "644"),
        (server_cert, auth.server_cert_remote_path, "644"),
        (server_key, auth.server_key_remote_path, "600"),
    ]
    for contents, remote_path, mode in remote_certs:
        await p.write_file(remote_path, contents, mode=mode)

    docker_port = docker_port_from_url(driver.get_url())
    options = p.generate_docker_options(docker_port)

    logger.info(f"[{driver.get_machine_name()}] Setting Docker configuration on the remote daemon...")
    options_dir = posixpath.dirname(options.engine_options_path)
    logger.debug(f"Docker options for {options.engine_options_path}:\n{options.engine_options}")
    await p.ssh_command(f"sudo mkdir -p {options_dir}")
    await p.write_file(options.engine_options_path, options.engine_options)

    await p.service("docker", ServiceAction.RESTART)

    await wait_for_docker(p, docker_port)
