# setup/typo3_setup.py
# -*- coding: utf-8 -*-
"""
TYPO3 CMS installation on the local Debian host.

Builds the ordered task list: preflight, packages, MySQL, database and
credentials, Apache site, TYPO3 release, TYPO3 settings, firewall, cleanup,
access report.
"""

import logging
from typing import Any, Dict, Optional

from common.command_utils import get_symbols, log_provision
from common.network_utils import check_internet_connectivity, get_primary_ip_address
from common.orchestrator import Orchestrator
from common.system_utils import ensure_root
from common.targets import HostTarget
from configure.apache_configurator import configure_typo3_site
from configure.mysql_configurator import provision_application_database
from configure.typo3_configurator import write_typo3_settings
from configure.ufw_configurator import apply_ufw_rules
from installer.mysql_installer import install_mysql_server
from installer.prerequisites_installer import (
    cleanup_packages,
    install_packages,
    update_system,
)
from installer.typo3_installer import install_typo3
from setup.config import TYPO3_DEPENDENCY_PACKAGES
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

CREDENTIALS_TITLE = "TYPO3 MySQL Credentials"


def preflight_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    ensure_root(app_settings, context["logger"])
    check_internet_connectivity(app_settings, context["logger"])


def update_system_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    update_system(context["target"], context["logger"])


def install_dependencies_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    install_packages(context["target"], TYPO3_DEPENDENCY_PACKAGES, context["logger"])


def install_mysql_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    install_mysql_server(context["target"], context["logger"])


def configure_database_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    typo3 = app_settings.typo3
    context["credentials"] = provision_application_database(
        context["target"],
        typo3.db_name,
        typo3.db_user,
        typo3.credentials_file,
        CREDENTIALS_TITLE,
        context["logger"],
    )


def configure_apache_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    ip_address = get_primary_ip_address(app_settings, context["logger"])
    if not ip_address:
        raise RuntimeError("Could not determine the host IP address for ServerName.")
    context["ip_address"] = ip_address
    configure_typo3_site(context["target"], ip_address, context["logger"])


def install_typo3_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    context["install_dir"] = install_typo3(context["target"], context["logger"])


def configure_typo3_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    write_typo3_settings(context["target"], context["credentials"], context["logger"])


def configure_firewall_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    apply_ufw_rules(context["target"], context["logger"])


def cleanup_task(app_settings: AppSettings, context: Dict[str, Any]) -> None:
    cleanup_packages(context["target"], autoclean=True, current_logger=context["logger"])


def report_task(app_settings: AppSettings, context: Dict[str, Any]) -> str:
    """Logs where TYPO3 can be reached. Returns the frontend URL."""
    symbols = get_symbols(app_settings)
    logger_to_use = context["logger"]
    ip_address = context.get("ip_address") or get_primary_ip_address(app_settings, logger_to_use)
    site_url = f"http://{ip_address}/{app_settings.typo3.install_dir_name}"

    for line in (
        f"{symbols.get('rocket', '🚀')} Installation complete!",
        f"TYPO3 is installed and accessible at: {site_url}",
        f"Backend: {site_url}/install.php",
        f"Credentials stored in: {app_settings.typo3.credentials_file}",
        "Please complete the TYPO3 setup via the web interface",
    ):
        log_provision(line, "success", logger_to_use, app_settings)
    return site_url


def build_typo3_orchestrator(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> Orchestrator:
    """Returns an orchestrator holding the full TYPO3 host flow."""
    logger_to_use = current_logger if current_logger else module_logger
    orchestrator = Orchestrator(app_settings, logger_to_use)
    orchestrator.context["logger"] = logger_to_use
    orchestrator.context["target"] = HostTarget(app_settings, logger_to_use)

    orchestrator.add_task("Preflight checks", preflight_task)
    orchestrator.add_task("Update system", update_system_task)
    orchestrator.add_task("Install dependencies", install_dependencies_task)
    orchestrator.add_task("Install MySQL", install_mysql_task)
    orchestrator.add_task("Configure MySQL", configure_database_task)
    orchestrator.add_task("Configure Apache", configure_apache_task)
    orchestrator.add_task("Install TYPO3", install_typo3_task)
    orchestrator.add_task("Configure TYPO3", configure_typo3_task)
    orchestrator.add_task("Configure firewall", configure_firewall_task)
    orchestrator.add_task("Clean up", cleanup_task)
    orchestrator.add_task("Report access information", report_task)
    return orchestrator


def run_typo3_setup(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> bool:
    return build_typo3_orchestrator(app_settings, current_logger).run()
