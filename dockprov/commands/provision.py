"""Provision command: install and secure the engine on one or many hosts."""

import asyncio
import logging
import sys

from dockprov.commands import add_host_args, make_driver, resolve_provisioner
from dockprov.config import load_machines
from dockprov.drivers.base import DEFAULT_ENGINE_INSTALL_URL
from dockprov.drivers.generic import GenericDriver
from dockprov.options import DEFAULT_CERT_DIR, AuthOptions, EngineOptions, SwarmOptions
from dockprov.provision.errors import ProvisionError

logger = logging.getLogger(__name__)


async def provision_machine(driver, os_name, swarm_options, auth_options, engine_options, wait_ssh=False):
    """Provision one machine. Returns True on success, logs and returns False on failure."""
    name = driver.get_machine_name()
    try:
        if wait_ssh and not await driver.wait_ready():
            return False
        provisioner = await resolve_provisioner(driver, os_name)
        logger.info(f"[{name}] Provisioning with {provisioner}...")
        await provisioner.provision(swarm_options, auth_options, engine_options)
    except ProvisionError as e:
        logger.error(f"[{name}] Error: {e}")
        return False

    logger.info(f"[{name}] Docker is up and running!")
    return True


# ── provision ssh ─────────────────────────────────────────────────


def _options_from_args(args):
    engine = EngineOptions(
        arbitrary_flags=args.engine_opt,
        env=args.engine_env,
        insecure_registry=args.engine_insecure_registry,
        labels=args.engine_label,
        registry_mirror=args.engine_registry_mirror,
        storage_driver=args.storage_driver,
        install_url=args.install_url,
    )
    auth = AuthOptions.from_cert_dir(args.cert_dir)
    swarm = SwarmOptions(
        is_swarm=args.swarm or args.swarm_master,
        master=args.swarm_master,
        agent=args.swarm or args.swarm_master,
        discovery=args.swarm_discovery,
        host=args.swarm_host,
        image=args.swarm_image,
        strategy=args.swarm_strategy,
        arbitrary_flags=args.swarm_opt,
        arbitrary_join_flags=args.swarm_join_opt,
        is_experimental=args.swarm_experimental,
    )
    return swarm, auth, engine


def handle_provision_ssh(args):
    """CLI handler for 'provision ssh'."""
    asyncio.run(_handle_provision_ssh(args))


async def _handle_provision_ssh(args):
    if (args.swarm or args.swarm_master) and not args.swarm_discovery:
        logger.error("Error: --swarm-discovery is required with --swarm/--swarm-master")
        sys.exit(1)

    driver = make_driver(args)
    swarm, auth, engine = _options_from_args(args)
    ok = await provision_machine(driver, args.os, swarm, auth, engine, wait_ssh=args.wait_ssh)
    if not ok:
        sys.exit(1)


# ── provision config ──────────────────────────────────────────────


def handle_provision_config(args):
    """CLI handler for 'provision config'."""
    asyncio.run(_handle_provision_config(args))


async def _handle_provision_config(args):
    try:
        machines = load_machines(args.config)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)

    if args.only:
        wanted = set(args.only)
        machines = [m for m in machines if m.name in wanted]
        if not machines:
            logger.error(f"Error: no machine named {', '.join(sorted(wanted))} in {args.config}")
            sys.exit(1)

    logger.info(f"Provisioning {len(machines)} machine(s) from {args.config}")

    tasks = []
    for machine in machines:
        driver = GenericDriver(machine.name, machine.host, dry_run=args.dry_run)
        tasks.append(provision_machine(
            driver, machine.os, machine.swarm, machine.auth, machine.engine, wait_ssh=args.wait_ssh,
        ))
    results = await asyncio.gather(*tasks)

    failed = [m.name for m, ok in zip(machines, results) if not ok]
    if failed:
        logger.info(f"\nFailed to provision {len(failed)} machine(s): {', '.join(failed)}")
        sys.exit(1)
    logger.info(f"\nAll {len(machines)} machine(s) provisioned.")


def register_provision_command(subparsers):
    """Register the 'provision' command with its ssh/config targets."""
    provision_parser = subparsers.add_parser("provision", help="Install and configure the Docker engine")
    targets = provision_parser.add_subparsers(dest="target", required=True)

    ssh_parser = targets.add_parser("ssh", help="Provision a single host reachable over SSH")
    add_host_args(ssh_parser)
    ssh_parser.add_argument("--wait-ssh", action="store_true", help="Wait for SSH before provisioning")
    ssh_parser.add_argument("--cert-dir", default=DEFAULT_CERT_DIR,
                            help=f"Directory with ca.pem, server.pem, server-key.pem (default: {DEFAULT_CERT_DIR})")
    ssh_parser.add_argument("--storage-driver", default="", help="Engine storage driver (default: per OS)")
    ssh_parser.add_argument("--install-url", default=DEFAULT_ENGINE_INSTALL_URL, help="Engine install script URL")
    ssh_parser.add_argument("--engine-env", action="append", default=[], help="KEY=VALUE for the engine (repeatable)")
    ssh_parser.add_argument("--engine-label", action="append", default=[], help="Engine label (repeatable)")
    ssh_parser.add_argument("--engine-opt", action="append", default=[],
                            help="Extra daemon flag without leading dashes, e.g. 'max-concurrent-downloads=6'")
    ssh_parser.add_argument("--engine-insecure-registry", action="append", default=[],
                            help="Insecure registry (repeatable)")
    ssh_parser.add_argument("--engine-registry-mirror", action="append", default=[],
                            help="Registry mirror (repeatable)")
    ssh_parser.add_argument("--swarm", action="store_true", help="Join a swarm cluster")
    ssh_parser.add_argument("--swarm-master", action="store_true", help="Run the swarm manager on this host")
    ssh_parser.add_argument("--swarm-discovery", default="", help="Swarm discovery URL")
    ssh_parser.add_argument("--swarm-host", default="tcp://0.0.0.0:3376", help="Swarm manager listen address")
    ssh_parser.add_argument("--swarm-image", default="swarm:latest", help="Swarm image")
    ssh_parser.add_argument("--swarm-strategy", default="spread", help="Swarm scheduling strategy")
    ssh_parser.add_argument("--swarm-opt", action="append", default=[], help="Extra swarm manage flag")
    ssh_parser.add_argument("--swarm-join-opt", action="append", default=[], help="Extra swarm join flag")
    ssh_parser.add_argument("--swarm-experimental", action="store_true", help="Enable swarm experimental features")
    ssh_parser.set_defaults(func=handle_provision_ssh)

    config_parser = targets.add_parser("config", help="Provision every machine listed in a YAML file")
    config_parser.add_argument("config", help="Path to the machines YAML file")
    config_parser.add_argument("--only", action="append", default=[], help="Provision only this machine (repeatable)")
    config_parser.add_argument("--wait-ssh", action="store_true", help="Wait for SSH before provisioning")
    config_parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")
    config_parser.set_defaults(func=handle_provision_config)
