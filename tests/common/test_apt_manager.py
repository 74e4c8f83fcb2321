import subprocess
from unittest.mock import MagicMock

import pytest

from common.debian.apt_manager import APT_GET, AptManager


@pytest.fixture
def apt(mock_target, mock_logger):
    return AptManager(mock_target, mock_logger)


def test_update_and_upgrade(apt, mock_target):
    apt.update()
    apt.upgrade()

    assert [c.args[0] for c in mock_target.run.call_args_list] == [
        ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "update", "-yq"],
        ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get", "upgrade", "-yq"],
    ]


@pytest.mark.parametrize(
    "stdout, returncode, expected",
    [
        ("installed", 0, True),
        ("not-installed", 0, False),
        ("config-files", 0, False),
        ("", 1, False),
    ],
)
def test_is_installed(apt, mock_target, stdout, returncode, expected):
    mock_target.run.return_value = MagicMock(returncode=returncode, stdout=stdout)

    assert apt.is_installed("ufw") is expected
    mock_target.run.assert_called_once_with(
        ["dpkg-query", "-W", "-f=${db:Status-Status}", "ufw"],
        check=False,
        capture_output=True,
    )


def test_install_skips_installed_packages(apt, mock_target, mocker):
    mocker.patch.object(apt, "is_installed", side_effect=lambda pkg: pkg == "curl")

    installed = apt.install(["curl", "apache2", "php"])

    assert installed == ["apache2", "php"]
    mock_target.run.assert_called_once_with(APT_GET + ["install", "-yq", "apache2", "php"])


def test_install_nothing_to_do(apt, mock_target, mocker):
    mocker.patch.object(apt, "is_installed", return_value=True)

    assert apt.install("ufw") == []
    mock_target.run.assert_not_called()


def test_install_with_update_first(apt, mock_target, mocker):
    mocker.patch.object(apt, "is_installed", return_value=False)

    apt.install(["ufw"], update_first=True)

    assert mock_target.run.call_args_list[0].args[0] == APT_GET + ["update", "-yq"]
    assert mock_target.run.call_args_list[-1].args[0] == APT_GET + ["install", "-yq", "ufw"]


def test_install_failure_propagates(apt, mock_target, mocker):
    mocker.patch.object(apt, "is_installed", return_value=False)
    mock_target.run.side_effect = subprocess.CalledProcessError(100, "apt-get")

    with pytest.raises(subprocess.CalledProcessError):
        apt.install(["sogo"])


def test_add_repository_writes_deb822_file(apt, mock_target):
    path = apt.add_repository(
        "mysql",
        {
            "Types": "deb",
            "URIs": "http://repo.mysql.com/apt/debian",
            "Suites": "bookworm",
            "Components": "mysql-8.0",
            "Signed-By": "/usr/share/keyrings/mysql.gpg",
        },
    )

    assert path == "/etc/apt/sources.list.d/mysql.sources"
    mock_target.write_file.assert_called_once_with(
        "/etc/apt/sources.list.d/mysql.sources",
        "Types: deb\n"
        "URIs: http://repo.mysql.com/apt/debian\n"
        "Suites: bookworm\n"
        "Components: mysql-8.0\n"
        "Signed-By: /usr/share/keyrings/mysql.gpg\n",
        mode="644",
    )
    mock_target.run.assert_called_once_with(APT_GET + ["update", "-yq"])


def test_add_repository_without_update(apt, mock_target):
    apt.add_repository("sogo", {"Types": "deb"}, update_after=False)
    mock_target.run.assert_not_called()


def test_add_gpg_key_from_url(apt, mock_target):
    apt.add_gpg_key_from_url("https://example.org/key.asc", "/usr/share/keyrings/sogo.gpg")

    assert [c.args[0] for c in mock_target.run.call_args_list] == [
        ["install", "-m", "0755", "-d", "/usr/share/keyrings"],
        ["curl", "-fsSL", "https://example.org/key.asc", "-o", "/tmp/sogo.gpg.download"],
        [
            "gpg", "--batch", "--yes", "--dearmor",
            "-o", "/usr/share/keyrings/sogo.gpg", "/tmp/sogo.gpg.download",
        ],
        ["chmod", "a+r", "/usr/share/keyrings/sogo.gpg"],
        ["rm", "-f", "/tmp/sogo.gpg.download"],
    ]


def test_add_gpg_key_removes_download_when_dearmor_fails(apt, mock_target):
    def run(command, **kwargs):
        if command[0] == "gpg":
            raise subprocess.CalledProcessError(2, command)
        return MagicMock(returncode=0)

    mock_target.run.side_effect = run

    with pytest.raises(subprocess.CalledProcessError):
        apt.add_gpg_key_from_url("https://example.org/key.asc", "/usr/share/keyrings/sogo.gpg")

    assert mock_target.run.call_args_list[-1].args[0] == ["rm", "-f", "/tmp/sogo.gpg.download"]


def test_cleanup_commands(apt, mock_target):
    apt.autoremove(purge=True)
    apt.autoclean()
    apt.clean()

    assert [c.args[0] for c in mock_target.run.call_args_list] == [
        APT_GET + ["autoremove", "-yq", "--purge"],
        APT_GET + ["autoclean", "-yq"],
        APT_GET + ["clean"],
    ]
