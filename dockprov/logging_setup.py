"""CLI logging setup: plain %(message)s format."""

import logging
import sys

from dockprov.redact import SecretRedactingFilter


def setup_cli_logging(verbose=False):
    """Configure the root logger with a plain message format for CLI commands.

    With *verbose* every remote command and its output is logged at DEBUG.
    The redacting filter sits on the handler so records from every logger
    pass through it.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
