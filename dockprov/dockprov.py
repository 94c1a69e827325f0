#!/usr/bin/env python3
"""Docker engine provisioning tools: CLI entrypoint."""

import argparse

from dockprov.commands.host import register_host_commands
from dockprov.commands.provision import register_provision_command
from dockprov.commands.registry import register_os_command
from dockprov.logging_setup import setup_cli_logging


def main():
    parser = argparse.ArgumentParser(description="Provision the Docker engine on remote hosts over SSH")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every remote command")
    subparsers = parser.add_subparsers(dest="command", required=True)

    register_provision_command(subparsers)
    register_host_commands(subparsers)
    register_os_command(subparsers)

    args = parser.parse_args()
    setup_cli_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
