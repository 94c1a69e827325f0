"""Parsing of /etc/os-release."""

import logging
import shlex
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class OsRelease:
    """Identification fields from os-release(5)."""

    id: str = ""
    id_like: str = ""
    name: str = ""
    pretty_name: str = ""
    version: str = ""
    version_id: str = ""
    ansi_color: str = ""
    home_url: str = ""
    support_url: str = ""
    bug_report_url: str = ""
    fields: dict[str, str] = field(default_factory=dict)


def parse_os_release(text: str) -> OsRelease:
    """Parse os-release content into an OsRelease.

    Blank lines and comments are skipped; values may be single or double
    quoted. Every key is kept in ``fields``; known keys also populate the
    matching attribute.
    """
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, raw = line.split("=", 1)
        try:
            parts = shlex.split(raw)
        except ValueError:
            logger.debug(f"Unparseable os-release line: {line}")
            continue
        values[key.strip()] = " ".join(parts)

    release = OsRelease(fields=values)
    for key, value in values.items():
        attr = key.lower()
        if attr != "fields" and hasattr(release, attr):
            setattr(release, attr, value)
    return release
