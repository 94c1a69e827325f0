"""Helpers shared by the CLI commands: host flags, driver and provisioner setup."""

import logging
import os

from dockprov.drivers.generic import GenericDriver
from dockprov.drivers.types import HostConnectionInfo
from dockprov.provision import detect_provisioner, new_provisioner
from dockprov.provision.errors import DetectionError

logger = logging.getLogger(__name__)


def add_host_args(parser):
    """Flags identifying a single SSH host."""
    parser.add_argument("--host", required=True, help="Host name or IP address")
    parser.add_argument("--user", default="root", help="SSH user (default: root)")
    parser.add_argument("--ssh-port", type=int, default=22, help="SSH port")
    parser.add_argument("--ssh-key", default="~/.ssh/id_ed25519", help="SSH private key path")
    parser.add_argument("--machine-name", default=None, help="Machine name / hostname (default: --host)")
    parser.add_argument("--os", default=None,
                        help="Registered provisioner name (e.g. AlpineLinux); detected when omitted")
    parser.add_argument("--dry-run", action="store_true", help="Print commands without executing")


def make_driver(args):
    conn = HostConnectionInfo(
        host=args.host,
        username=args.user,
        ssh_port=args.ssh_port,
        ssh_key=os.path.expanduser(args.ssh_key) if args.ssh_key else "",
    )
    return GenericDriver(args.machine_name or args.host, conn, dry_run=args.dry_run)


async def resolve_provisioner(driver, os_name=None):
    """Provisioner registered as *os_name*, or the one detected on the host."""
    if os_name:
        return new_provisioner(os_name, driver)
    if driver.dry_run:
        raise DetectionError("--os is required with --dry-run (nothing to detect)")
    return await detect_provisioner(driver)
