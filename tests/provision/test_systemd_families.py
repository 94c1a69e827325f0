"""Tests for the systemd based provisioners: Debian, Ubuntu, Red Hat, CentOS, Fedora."""

import pytest

from dockprov.options import AuthOptions, EngineOptions, SwarmOptions
from dockprov.provision.actions import PackageAction, ServiceAction
from dockprov.provision.centos import CentOSProvisioner
from dockprov.provision.debian import DebianProvisioner
from dockprov.provision.errors import UnsupportedActionError
from dockprov.provision.fedora import FedoraProvisioner
from dockprov.provision.os_release import OsRelease
from dockprov.provision.redhat import RedHatProvisioner
from dockprov.provision.ubuntu import UbuntuSystemdProvisioner
from dockprov.provision.utils import set_remote_auth_options

APT_OPTS = '-y -o Dpkg::Options::="--force-confnew"'


# ── service ───────────────────────────────────────────────────────


@pytest.mark.parametrize("action", [ServiceAction.START, ServiceAction.RESTART])
async def test_service_start_reloads_units_first(make_driver, action):
    driver = make_driver()
    await DebianProvisioner(driver).service("docker", action)
    assert driver.commands == ["sudo systemctl daemon-reload", f"sudo systemctl -f {action} docker"]


@pytest.mark.parametrize("action,token", [
    (ServiceAction.STOP, "stop"),
    (ServiceAction.ENABLE, "enable"),
    (ServiceAction.DISABLE, "disable"),
    (ServiceAction.DAEMON_RELOAD, "daemon-reload"),
])
async def test_service_other_actions(make_driver, action, token):
    driver = make_driver()
    await CentOSProvisioner(driver).service("docker", action)
    assert driver.commands == [f"sudo systemctl -f {token} docker"]


# ── apt ───────────────────────────────────────────────────────────


async def test_debian_install_updates_index_first(make_driver):
    driver = make_driver()
    await DebianProvisioner(driver).package("curl", PackageAction.INSTALL)
    assert driver.commands == [
        "sudo apt-get update",
        f"DEBIAN_FRONTEND=noninteractive sudo -E apt-get install {APT_OPTS} curl",
    ]


@pytest.mark.parametrize("action,verb", [(PackageAction.REMOVE, "remove"), (PackageAction.UPGRADE, "upgrade")])
async def test_debian_remove_and_upgrade(make_driver, action, verb):
    driver = make_driver()
    await UbuntuSystemdProvisioner(driver).package("docker-ce", action)
    assert driver.commands == [f"DEBIAN_FRONTEND=noninteractive sudo -E apt-get {verb} {APT_OPTS} docker-ce"]


async def test_debian_unknown_action(make_driver):
    driver = make_driver()
    with pytest.raises(UnsupportedActionError):
        await DebianProvisioner(driver).package("curl", "purge")
    assert driver.commands == []


@pytest.mark.parametrize("version_id,compatible", [("14.04", False), ("15.04", True), ("16.04", True), ("24.04", True), ("", False)])
def test_ubuntu_requires_systemd_release(make_driver, version_id, compatible):
    p = UbuntuSystemdProvisioner(make_driver())
    p.set_os_release_info(OsRelease(id="ubuntu", version_id=version_id))
    assert p.compatible_with_host() is compatible


# ── yum / dnf ─────────────────────────────────────────────────────


@pytest.mark.parametrize("cls,manager", [
    (RedHatProvisioner, "yum"),
    (CentOSProvisioner, "yum"),
    (FedoraProvisioner, "dnf"),
])
async def test_rpm_family_package_commands(make_driver, cls, manager):
    driver = make_driver()
    p = cls(driver)

    await p.package("curl", PackageAction.INSTALL)
    await p.package("curl", PackageAction.REMOVE)
    await p.package("docker-ce", PackageAction.UPGRADE)

    assert driver.commands == [
        f"sudo -E {manager} install -y curl",
        f"sudo -E {manager} remove -y curl",
        f"sudo -E {manager} -y update -y docker-ce",
    ]


def test_family_names(make_driver):
    driver = make_driver()
    assert str(DebianProvisioner(driver)) == "debian"
    assert str(UbuntuSystemdProvisioner(driver)) == "ubuntu(systemd)"
    assert str(RedHatProvisioner(driver)) == "redhat"
    assert str(CentOSProvisioner(driver)) == "centos"
    assert str(FedoraProvisioner(driver)) == "fedora"


# ── daemon options ────────────────────────────────────────────────


def test_systemd_drop_in(make_driver):
    p = DebianProvisioner(make_driver())
    p.engine_options = EngineOptions(storage_driver="overlay2", env=["HTTP_PROXY=http://proxy:3128"])
    p.auth_options = set_remote_auth_options(p)

    options = p.generate_docker_options(2376)

    assert options.engine_options_path == "/etc/systemd/system/docker.service.d/10-machine.conf"
    lines = options.engine_options.splitlines()
    assert lines[0] == "[Service]"
    assert lines[1] == "ExecStart="
    assert lines[2].startswith("ExecStart=/usr/bin/dockerd -H tcp://0.0.0.0:2376 -H unix:///var/run/docker.sock")
    assert "--tlscacert /etc/docker/ca.pem" in lines[2]
    assert "--label provider=generic" in lines[2]
    assert lines[3] == 'Environment="HTTP_PROXY=http://proxy:3128"'


def test_systemd_drop_in_without_env(make_driver):
    p = CentOSProvisioner(make_driver())
    p.engine_options = EngineOptions(storage_driver="overlay2")
    options = p.generate_docker_options(2376)
    assert "Environment=" not in options.engine_options


# ── provision ─────────────────────────────────────────────────────


async def test_debian_provision_sequence(make_driver, cert_dir):
    driver = make_driver(machine_name="deb-1")
    p = DebianProvisioner(driver)

    await p.provision(SwarmOptions(), AuthOptions.from_cert_dir(cert_dir), EngineOptions())

    cmds = driver.commands
    assert cmds[0] == 'sudo hostname deb-1 && echo "deb-1" | sudo tee /etc/hostname'
    assert cmds[2] == "sudo apt-get update"
    assert cmds[3].endswith("apt-get install " + APT_OPTS + " curl")
    assert cmds[4] == "if ! type docker; then curl -sSL https://get.docker.com | sh -; fi"
    assert cmds[5] == "sudo systemctl -f enable docker"
    assert cmds[6] == "sudo mkdir -p /etc/docker"
    assert "scp -> /tmp/dockprov.10-machine.conf" in cmds
    assert any(
        c.startswith("sudo install -m 644 /tmp/dockprov.10-machine.conf /etc/systemd/system/docker.service.d/10-machine.conf")
        for c in cmds
    )
    assert cmds.index("sudo systemctl -f restart docker") > cmds.index("sudo systemctl -f enable docker")
    assert p.engine_options.storage_driver == "overlay2"
