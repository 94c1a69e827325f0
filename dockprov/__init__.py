"""Provision the Docker engine onto remote hosts over SSH."""

__version__ = "0.1.0"
