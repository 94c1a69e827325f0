"""'os list' command: show the registered provisioners."""

import logging

from dockprov.provision import registered_provisioners

logger = logging.getLogger(__name__)


class _ListingDriver:
    """Placeholder driver so provisioners can be instantiated for display."""

    dry_run = True

    def get_machine_name(self):
        return "-"

    def driver_name(self):
        return "none"


def handle_os_list(args):
    """CLI handler for 'os list'."""
    for name, factory in registered_provisioners().items():
        provisioner = factory(_ListingDriver())
        logger.info(f"{name:<16} {provisioner!s:<16} os-release ID={provisioner.os_release_id}")


def register_os_command(subparsers):
    """Register the 'os' command."""
    os_parser = subparsers.add_parser("os", help="Supported operating systems")
    actions = os_parser.add_subparsers(dest="action", required=True)
    list_parser = actions.add_parser("list", help="List registered provisioners")
    list_parser.set_defaults(func=handle_os_list)
