# setup/sogo_lxc_setup.py
# -*- coding: utf-8 -*-
"""
SOGo groupware installation inside a new Proxmox LXC container.

Runs on the Proxmox host. Host-side tasks use pveam/pct directly; everything
after the container boots runs inside it through `pct exec`.
"""

import logging
from typing import Any, Dict, Optional

from common.command_utils import get_symbols, log_provision
from common.orchestrator import Orchestrator
from common.proxmox.pct_manager import PctManager
from common.system_utils import ensure_proxmox_host, ensure_root, systemd_enable_and_start
from configure.apache_configurator import configure_sogo_proxy
from configure.mysql_configurator import provision_application_database
from configure.sogo_configurator import write_sogo_config
from installer.lxc_installer import create_and_start_container, ensure_container_template
from installer.prerequisites_installer import (
    cleanup_packages,
    install_packages,
    update_system,
)
from installer.sogo_installer import add_sogo_repository, install_sogo_packages
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

CREDENTIALS_TITLE = "SOGo MySQL Credentials"


def preflight_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    ensure_root(app_settings, context["logger"])
    ensure_proxmox_host(app_settings, context["logger"])


def prepare_template_task(app_settings: AppSettings, context: Dict[str, Any]) -> bool:
    return ensure_container_template(context["pct"], context["logger"])


def create_container_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    create_and_start_container(context["pct"], context["logger"])


def install_prerequisites_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    target = context["target"]
    update_system(target, context["logger"])
    install_packages(target, list(app_settings.sogo.prerequisite_packages), context["logger"])


def add_repository_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    add_sogo_repository(context["target"], context["logger"])


def install_sogo_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    install_sogo_packages(context["target"], context["logger"])


def configure_database_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    sogo = app_settings.sogo
    context["credentials"] = provision_application_database(
        context["target"],
        sogo.db_name,
        sogo.db_user,
        sogo.credentials_file,
        CREDENTIALS_TITLE,
        context["logger"],
    )


def configure_sogo_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    write_sogo_config(context["target"], context["credentials"], context["logger"])


def start_services_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    systemd_enable_and_start(
        context["target"], list(app_settings.sogo.services), context["logger"]
    )


def configure_apache_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    configure_sogo_proxy(context["target"], context["logger"])


def report_task(app_settings: AppSettings, context: Dict[str, Any]) -> Optional[str]:
    """Logs how to reach SOGo. Returns the web URL, or None without an address."""
    symbols = get_symbols(app_settings)
    logger_to_use = context["logger"]
    lxc = app_settings.lxc
    ip_address = context["pct"].get_ip_address("eth0")
    url = f"http://{ip_address}/SOGo" if ip_address else None

    lines = [
        f"{symbols.get('rocket', '🚀')} Setup complete!",
        f"SOGo is installed in LXC container {lxc.ctid} ({lxc.hostname})",
        f"Access the SOGo web interface at: {url}"
        if url
        else f"Container address unknown; run 'pct exec {lxc.ctid} -- ip addr show eth0'",
        f"MySQL SOGo user: {app_settings.sogo.db_user}, "
        f"credentials in container file {app_settings.sogo.credentials_file}",
    ]
    if app_settings.log_file:
        lines.append(f"Log file: {app_settings.log_file}")
    for line in lines:
        log_provision(line, "success", logger_to_use, app_settings)
    return url


def cleanup_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    cleanup_packages(context["target"], autoclean=False, current_logger=context["logger"])


def build_sogo_orchestrator(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> Orchestrator:
    """Returns an orchestrator holding the full SOGo LXC flow."""
    logger_to_use = current_logger if current_logger else module_logger
    pct = PctManager(app_settings.lxc.ctid, app_settings, logger_to_use)

    orchestrator = Orchestrator(app_settings, logger_to_use)
    orchestrator.context["logger"] = logger_to_use
    orchestrator.context["pct"] = pct
    orchestrator.context["target"] = pct.target()

    orchestrator.add_task("Preflight checks", preflight_task)
    orchestrator.add_task("Prepare container template", prepare_template_task)
    orchestrator.add_task("Create and start container", create_container_task)
    orchestrator.add_task("Install prerequisites", install_prerequisites_task)
    orchestrator.add_task("Add SOGo repository", add_repository_task)
    orchestrator.add_task("Install SOGo and dependencies", install_sogo_task)
    orchestrator.add_task("Configure MySQL", configure_database_task)
    orchestrator.add_task("Configure SOGo", configure_sogo_task)
    orchestrator.add_task("Enable and start services", start_services_task)
    orchestrator.add_task("Configure Apache2", configure_apache_task)
    orchestrator.add_task("Report access information", report_task)
    orchestrator.add_task("Clean up", cleanup_task)
    return orchestrator


def run_sogo_lxc_setup(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return build_sogo_orchestrator(app_settings, current_logger).run()
