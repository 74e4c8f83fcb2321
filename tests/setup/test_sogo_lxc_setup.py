from unittest.mock import MagicMock

from common.proxmox.pct_manager import PctManager
from common.targets import ContainerTarget
from setup.sogo_lxc_setup import (
    build_sogo_orchestrator,
    configure_database_task,
    install_prerequisites_task,
    report_task,
    start_services_task,
)


def test_build_sogo_orchestrator(app_settings, mock_logger):
    app_settings.lxc.ctid = 142

    orchestrator = build_sogo_orchestrator(app_settings, mock_logger)

    assert orchestrator.task_names() == [
        "Preflight checks",
        "Prepare container template",
        "Create and start container",
        "Install prerequisites",
        "Add SOGo repository",
        "Install SOGo and dependencies",
        "Configure MySQL",
        "Configure SOGo",
        "Enable and start services",
        "Configure Apache2",
        "Report access information",
        "Clean up",
    ]
    assert isinstance(orchestrator.context["pct"], PctManager)
    target = orchestrator.context["target"]
    assert isinstance(target, ContainerTarget)
    assert target.ctid == 142


def test_install_prerequisites_task(mocker, app_settings, mock_target, mock_logger):
    update_mock = mocker.patch("setup.sogo_lxc_setup.update_system")
    install_mock = mocker.patch("setup.sogo_lxc_setup.install_packages")

    install_prerequisites_task(app_settings, {"target": mock_target, "logger": mock_logger})

    update_mock.assert_called_once_with(mock_target, mock_logger)
    install_mock.assert_called_once_with(
        mock_target,
        ["wget", "gnupg2", "curl", "apt-transport-https", "ca-certificates"],
        mock_logger,
    )


def test_configure_database_task(mocker, app_settings, mock_target, mock_logger):
    provision_mock = mocker.patch("setup.sogo_lxc_setup.provision_application_database")
    context = {"target": mock_target, "logger": mock_logger}

    configure_database_task(app_settings, context)

    provision_mock.assert_called_once_with(
        mock_target, "sogo", "sogo", "/root/sogo.creds", "SOGo MySQL Credentials", mock_logger
    )
    assert context["credentials"] is provision_mock.return_value


def test_start_services_task(mocker, app_settings, mock_target, mock_logger):
    services_mock = mocker.patch("setup.sogo_lxc_setup.systemd_enable_and_start")

    start_services_task(app_settings, {"target": mock_target, "logger": mock_logger})

    services_mock.assert_called_once_with(
        mock_target, ["mysql", "apache2", "memcached", "sogo"], mock_logger
    )


def test_report_task_with_address(app_settings, mock_logger):
    pct = MagicMock()
    pct.get_ip_address.return_value = "192.168.1.77"

    url = report_task(app_settings, {"pct": pct, "logger": mock_logger})

    assert url == "http://192.168.1.77/SOGo"
    logged = [c.args[0] for c in mock_logger.info.call_args_list]
    assert "Access the SOGo web interface at: http://192.168.1.77/SOGo" in logged


def test_report_task_without_address(app_settings, mock_logger):
    pct = MagicMock()
    pct.get_ip_address.return_value = None

    assert report_task(app_settings, {"pct": pct, "logger": mock_logger}) is None
    logged = " ".join(c.args[0] for c in mock_logger.info.call_args_list)
    assert "pct exec 100 -- ip addr show eth0" in logged
