"""Host maintenance commands: detect, upgrade, service."""

import asyncio
import logging
import sys

from dockprov.commands import add_host_args, make_driver, resolve_provisioner
from dockprov.provision.actions import PackageAction, ServiceAction
from dockprov.provision.errors import ProvisionError

logger = logging.getLogger(__name__)


async def _run(args, action):
    driver = make_driver(args)
    try:
        provisioner = await resolve_provisioner(driver, args.os)
        await action(provisioner)
    except ProvisionError as e:
        logger.error(f"[{driver.get_machine_name()}] Error: {e}")
        sys.exit(1)


# ── detect ────────────────────────────────────────────────────────


def handle_detect(args):
    """CLI handler for 'detect'."""

    async def _detect(provisioner):
        release = provisioner.get_os_release_info()
        logger.info(f"{provisioner.get_driver().get_machine_name()}: {provisioner}"
                    f" ({release.pretty_name or release.id})")

    asyncio.run(_run(args, _detect))


# ── upgrade ───────────────────────────────────────────────────────


def handle_upgrade(args):
    """CLI handler for 'upgrade'."""

    async def _upgrade(provisioner):
        logger.info(f"Upgrading {args.package} on {provisioner.get_driver().get_machine_name()} ({provisioner})...")
        await provisioner.package(args.package, PackageAction.UPGRADE)
        logger.info("Upgrade complete.")

    asyncio.run(_run(args, _upgrade))


# ── service ───────────────────────────────────────────────────────


def handle_service(args):
    """CLI handler for 'service'."""
    action = ServiceAction(args.action)

    async def _service(provisioner):
        await provisioner.service(args.name, action)
        logger.info(f"{args.name}: {action} done.")

    asyncio.run(_run(args, _service))


def register_host_commands(subparsers):
    """Register the detect, upgrade and service commands."""
    detect_parser = subparsers.add_parser("detect", help="Detect the OS family of a host")
    add_host_args(detect_parser)
    detect_parser.set_defaults(func=handle_detect)

    upgrade_parser = subparsers.add_parser("upgrade", help="Upgrade the Docker engine on a host")
    add_host_args(upgrade_parser)
    upgrade_parser.add_argument("--package", default="docker", help="Package to upgrade (default: docker)")
    upgrade_parser.set_defaults(func=handle_upgrade)

    service_parser = subparsers.add_parser("service", help="Control a service on a host")
    service_parser.add_argument("action", choices=[a.value for a in ServiceAction], help="Service action")
    add_host_args(service_parser)
    service_parser.add_argument("--name", default="docker", help="Service name (default: docker)")
    service_parser.set_defaults(func=handle_service)
