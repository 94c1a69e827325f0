"""Start swarm master/agent containers on a provisioned host."""

import logging
import shlex
from urllib.parse import urlsplit

from dockprov.drivers.base import DEFAULT_ENGINE_PORT
from dockprov.provision.errors import SwarmConfigError
from dockprov.redact import register_secret

logger = logging.getLogger(__name__)

SWARM_MASTER_PORT = 3376
MASTER_CONTAINER = "swarm-agent-master"
AGENT_CONTAINER = "swarm-agent"


def _docker_run(name, image, env, cmd, extra_args=()):
    args = ["sudo", "docker", "run", "-d", "--restart=always", "--name", name, *extra_args]
    for value in env:
        args += ["-e", value]
    args.append(image)
    args += cmd
    return " ".join(shlex.quote(a) for a in args)


def swarm_host_port(host):
    """Port of the swarm manager listen address, 3376 when absent."""
    try:
        return urlsplit(host).port or SWARM_MASTER_PORT
    except ValueError as e:
        raise SwarmConfigError(f"Invalid swarm host '{host}': {e}") from e


def master_command(swarm, auth, ip, docker_dir):
    """``docker run`` command line for the swarm manager container."""
    port = swarm_host_port(swarm.host)
    cmd = [
        "manage",
        "--tlsverify",
        f"--tlscacert={auth.ca_cert_remote_path}",
        f"--tlscert={auth.server_cert_remote_path}",
        f"--tlskey={auth.server_key_remote_path}",
        "-H", swarm.host,
        "--strategy", swarm.strategy,
        "--advertise", f"{ip}:{SWARM_MASTER_PORT}",
    ]
    if swarm.heartbeat:
        cmd.append(f"--heartbeat={swarm.heartbeat}s")
    if swarm.overcommit:
        cmd.append(f"--cluster-opt=swarm.overcommit={swarm.overcommit}")
    if swarm.is_experimental:
        cmd.insert(0, "--experimental")
    cmd += [f"--{flag}" for flag in swarm.arbitrary_flags]
    # discovery must be last
    cmd.append(swarm.discovery)
    extra = ["-p", f"{port}:{SWARM_MASTER_PORT}", "-v", f"{docker_dir}:{docker_dir}"]
    return _docker_run(MASTER_CONTAINER, swarm.image, swarm.env, cmd, extra)


def agent_command(swarm, ip):
    """``docker run`` command line for the swarm join container."""
    cmd = ["join", "--advertise", f"{ip}:{DEFAULT_ENGINE_PORT}"]
    if swarm.is_experimental:
        cmd.insert(0, "--experimental")
    cmd += [f"--{flag}" for flag in swarm.arbitrary_join_flags]
    cmd.append(swarm.discovery)
    return _docker_run(AGENT_CONTAINER, swarm.image, swarm.env, cmd)


async def configure_swarm(p, swarm_options, auth_options):
    if not swarm_options.is_swarm:
        return

    if swarm_options.discovery.startswith("token://"):
        register_secret(swarm_options.discovery)

    driver = p.get_driver()
    ip = driver.get_ip()
    logger.info(f"[{driver.get_machine_name()}] Configuring swarm...")

    if swarm_options.master:
        await p.ssh_command(f"sudo docker rm -f {MASTER_CONTAINER} 2>/dev/null || true")
        await p.ssh_command(master_command(swarm_options, auth_options, ip, p.get_docker_options_dir()))

    if swarm_options.agent:
        await p.ssh_command(f"sudo docker rm -f {AGENT_CONTAINER} 2>/dev/null || true")
        await p.ssh_command(agent_command(swarm_options, ip))
