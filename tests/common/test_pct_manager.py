from unittest.mock import MagicMock

import pytest

from common.proxmox.pct_manager import PctManager
from common.targets import ContainerTarget


@pytest.fixture
def mock_elevated(mocker):
    return mocker.patch(
        "common.proxmox.pct_manager.run_elevated_command",
        return_value=MagicMock(returncode=0, stdout=""),
    )


@pytest.fixture
def pct(app_settings, mock_logger):
    return PctManager(100, app_settings, mock_logger)


def test_build_create_command(pct, app_settings):
    assert pct.build_create_command(app_settings.lxc) == [
        "pct", "create", "100",
        "local:vztmpl/debian-12-standard_12.7-1_amd64.tar.zst",
        "--unprivileged", "1",
        "--features", "nesting=1",
        "--hostname", "sogo-server",
        "--storage", "local-lvm",
        "--rootfs", "local-lvm:32",
        "--cores", "2",
        "--memory", "8192",
        "--swap", "2048",
        "--net0", "name=eth0,bridge=vmbr0,ip=dhcp,type=veth",
    ]


def test_build_create_command_static_ip(pct, app_settings):
    app_settings.lxc.ip = "192.168.1.50/24"
    app_settings.lxc.nesting = False

    command = pct.build_create_command(app_settings.lxc)

    assert "nesting=0" in command
    assert command[-1] == "name=eth0,bridge=vmbr0,ip=192.168.1.50/24,type=veth"


def test_update_and_download_template(pct, mock_elevated):
    pct.update_templates()
    pct.download_template("local", "debian-12.tar.zst")

    assert [c.args[0] for c in mock_elevated.call_args_list] == [
        ["pveam", "update"],
        ["pveam", "download", "local", "debian-12.tar.zst"],
    ]


def test_template_exists(pct, tmp_path):
    assert pct.template_exists(str(tmp_path), "debian.tar.zst") is False
    (tmp_path / "debian.tar.zst").write_bytes(b"")
    assert pct.template_exists(str(tmp_path), "debian.tar.zst") is True


def test_create_container(pct, app_settings, mock_elevated):
    mock_elevated.side_effect = [
        MagicMock(returncode=2),  # pct status: unknown CTID
        MagicMock(returncode=0),
    ]

    pct.create_container(app_settings.lxc)

    assert mock_elevated.call_args_list[0].args[0] == ["pct", "status", "100"]
    assert mock_elevated.call_args_list[1].args[0][:3] == ["pct", "create", "100"]


def test_create_container_refuses_existing_ctid(pct, app_settings, mock_elevated):
    with pytest.raises(RuntimeError, match="already exists"):
        pct.create_container(app_settings.lxc)
    assert mock_elevated.call_count == 1


def test_start_and_wait(pct, mock_elevated, mocker):
    sleep_mock = mocker.patch("common.proxmox.pct_manager.time.sleep")

    pct.start()
    pct.wait_for_boot(10)

    mock_elevated.assert_called_once()
    assert mock_elevated.call_args.args[0] == ["pct", "start", "100"]
    sleep_mock.assert_called_once_with(10)


def test_target(pct):
    target = pct.target()
    assert isinstance(target, ContainerTarget)
    assert target.ctid == 100


def test_get_ip_address(pct, mocker):
    run_mock = mocker.patch(
        "common.targets.run_elevated_command",
        return_value=MagicMock(
            returncode=0,
            stdout="2: eth0@if7: <UP>\n    inet 10.1.2.3/24 brd 10.1.2.255 scope global eth0\n",
        ),
    )

    assert pct.get_ip_address("eth0") == "10.1.2.3"
    assert run_mock.call_args.args[0] == [
        "pct", "exec", "100", "--", "ip", "-4", "addr", "show", "eth0",
    ]


def test_get_ip_address_failure(pct, mocker, mock_logger):
    mocker.patch(
        "common.targets.run_elevated_command",
        return_value=MagicMock(returncode=1, stdout=""),
    )

    assert pct.get_ip_address() is None
    mock_logger.warning.assert_called_once()
