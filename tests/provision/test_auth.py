"""Tests for TLS material installation."""

import logging
import os
import stat

import pytest

from dockprov.drivers.generic import GenericDriver
from dockprov.drivers.types import HostConnectionInfo
from dockprov.options import AuthOptions, EngineOptions
from dockprov.provision import auth as auth_module
from dockprov.provision.alpine import AlpineProvisioner
from dockprov.provision.auth import configure_auth, docker_port_from_url
from dockprov.provision.errors import AuthError, CommandError
from dockprov.provision.utils import LISTENING_PORTS_CMD, set_remote_auth_options
from dockprov.redact import redact_secrets


def _local(cert_dir, name):
    with open(os.path.join(cert_dir, name)) as f:
        return f.read()


def _prepared(driver, cert_dir):
    p = AlpineProvisioner(driver)
    p.engine_options = EngineOptions(storage_driver="overlay")
    p.auth_options = AuthOptions.from_cert_dir(cert_dir)
    p.auth_options = set_remote_auth_options(p)
    return p


def _install(name, remote_path, mode):
    staged = f"/tmp/dockprov.{name}"
    return f"sudo install -m {mode} {staged} {remote_path}; rc=$?; rm -f {staged}; [ $rc -eq 0 ]"


async def test_configure_auth_command_sequence(make_driver, cert_dir):
    driver = make_driver()
    p = _prepared(driver, cert_dir)

    await configure_auth(p)

    assert driver.commands == [
        "sudo mkdir -p /etc/docker",
        "scp -> /tmp/dockprov.ca.pem",
        _install("ca.pem", "/etc/docker/ca.pem", "644"),
        "scp -> /tmp/dockprov.server.pem",
        _install("server.pem", "/etc/docker/server.pem", "644"),
        "scp -> /tmp/dockprov.server-key.pem",
        _install("server-key.pem", "/etc/docker/server-key.pem", "600"),
        "sudo mkdir -p /etc/conf.d",
        "scp -> /tmp/dockprov.docker",
        _install("docker", "/etc/conf.d/docker", "644"),
        "sudo rc-service docker restart",
        LISTENING_PORTS_CMD,
    ]


async def test_configure_auth_copies_local_files(make_driver, cert_dir):
    driver = make_driver()
    p = _prepared(driver, cert_dir)

    await configure_auth(p)

    assert driver.files["/tmp/dockprov.ca.pem"] == _local(cert_dir, "ca.pem")
    assert driver.files["/tmp/dockprov.server-key.pem"] == _local(cert_dir, "server-key.pem")
    assert "--tlscacert /etc/docker/ca.pem" in driver.files["/tmp/dockprov.docker"]


async def test_configure_auth_keeps_key_off_command_lines(make_driver, cert_dir):
    driver = make_driver()
    p = _prepared(driver, cert_dir)

    await configure_auth(p)

    assert not any("MIIEfake" in c for c in driver.commands)


async def test_configure_auth_missing_cert(make_driver, tmp_path):
    driver = make_driver()
    p = _prepared(driver, str(tmp_path / "nope"))

    with pytest.raises(AuthError, match="CA certificate"):
        await configure_auth(p)
    assert driver.commands == []


async def test_configure_auth_no_path_configured(make_driver):
    driver = make_driver()
    p = AlpineProvisioner(driver)

    with pytest.raises(AuthError, match="No local path"):
        await configure_auth(p)


async def test_configure_auth_stops_on_copy_failure(make_driver, cert_dir):
    driver = make_driver(responses={"scp -> /tmp/dockprov.server.pem": (1, "", "scp: /tmp: No space left on device")})
    p = _prepared(driver, cert_dir)

    with pytest.raises(CommandError, match="No space left"):
        await configure_auth(p)
    assert driver.commands[-1] == "scp -> /tmp/dockprov.server.pem"
    assert not any("rc-service" in c for c in driver.commands)


async def test_configure_auth_registers_key_for_redaction(make_driver, cert_dir):
    p = _prepared(make_driver(), cert_dir)

    await configure_auth(p)

    assert redact_secrets(_local(cert_dir, "server-key.pem")) == "***\n"


# ── verbose run through the real ssh/scp transport ────────────────


def _fake_bin(tmp_path):
    """ssh runs the remote command locally, scp copies locally, sudo just runs."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    scripts = {
        "ssh": '#!/bin/sh\nfor last; do :; done\nexec sh -c "$last"\n',
        "scp": '#!/bin/sh\nfor arg; do src=$dst; dst=$arg; done\nexec cp "$src" "${dst#*:}"\n',
        "sudo": '#!/bin/sh\nexec "$@"\n',
    }
    for name, body in scripts.items():
        path = bin_dir / name
        path.write_text(body)
        path.chmod(0o755)
    return str(bin_dir)


async def test_verbose_transport_never_logs_key(tmp_path, cert_dir, monkeypatch, caplog):
    monkeypatch.setenv("PATH", f"{_fake_bin(tmp_path)}:{os.environ['PATH']}")

    async def _no_wait(p, port):
        return None

    monkeypatch.setattr(auth_module, "wait_for_docker", _no_wait)

    remote = tmp_path / "remote"
    p = AlpineProvisioner(GenericDriver("node1", HostConnectionInfo(host="h")))
    p.docker_options_dir = str(remote / "docker")
    p.daemon_options_file = str(remote / "conf.d" / "docker")
    p.staging_dir = str(tmp_path)
    p.engine_options = EngineOptions(storage_driver="overlay")
    p.auth_options = AuthOptions.from_cert_dir(cert_dir)
    p.auth_options = set_remote_auth_options(p)

    async def _service(name, action):
        return None

    p.service = _service

    with caplog.at_level(logging.DEBUG):
        await configure_auth(p)

    key_path = remote / "docker" / "server-key.pem"
    assert key_path.read_text() == _local(cert_dir, "server-key.pem")
    assert stat.S_IMODE(key_path.stat().st_mode) == 0o600
    assert not (tmp_path / "dockprov.server-key.pem").exists()
    assert "MIIEfakeServerKeyMaterial" not in caplog.text


@pytest.mark.parametrize("url,port", [
    ("tcp://10.0.0.5:2376", 2376),
    ("tcp://10.0.0.5:12376", 12376),
    ("tcp://10.0.0.5", 2376),
    ("", 2376),
])
def test_docker_port_from_url(url, port):
    assert docker_port_from_url(url) == port
