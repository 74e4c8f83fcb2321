# setup/cli_handler.py
# -*- coding: utf-8 -*-
"""
Handles Command Line Interface (CLI) output for the provisioner.
"""

import logging
from typing import Optional

from common.command_utils import log_provision
from setup import config as static_config
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def format_configuration(app_config: AppSettings) -> str:
    """
    Returns the effective configuration as text.

    Passwords are generated during provisioning and never part of the
    configuration, so nothing here needs masking.
    """
    symbols = app_config.symbols
    typo3 = app_config.typo3
    lxc = app_config.lxc
    sogo = app_config.sogo

    config_text = f"{symbols.get('info', 'ℹ️')} Current effective configuration values (CLI > YAML > ENV > Defaults):\n\n"
    config_text += f"  Log Prefix:                    {app_config.log_prefix}\n"
    config_text += f"  Log File:                      {app_config.log_file or '[console only]'}\n"
    config_text += f"  Connectivity Check Host:       {app_config.connectivity_check_host}\n"
    config_text += f"  Firewall Ports:                {', '.join(str(p) for p in app_config.firewall.allowed_ports)}\n\n"

    config_text += "  MySQL Settings (mysql.*):\n"
    config_text += f"    Repository:                  {app_config.mysql.apt_repo_url} {app_config.mysql.apt_suite} {app_config.mysql.apt_component}\n"
    config_text += f"    Host:Port:                   {app_config.mysql.host}:{app_config.mysql.port}\n\n"

    config_text += "  TYPO3 Settings (typo3.*):\n"
    config_text += f"    Version:                     {typo3.version}\n"
    config_text += f"    Install Directory:           {typo3.web_root_parent}/{typo3.install_dir_name}\n"
    config_text += f"    Database / User:             {typo3.db_name} / {typo3.db_user}\n"
    config_text += f"    Credentials File:            {typo3.credentials_file}\n"
    config_text += f"    Server Admin:                {app_config.apache.server_admin}\n\n"

    config_text += "  LXC Settings (lxc.*):\n"
    config_text += f"    CTID / Hostname:             {lxc.ctid} / {lxc.hostname}\n"
    config_text += f"    Template:                    {lxc.template_storage}:vztmpl/{lxc.template}\n"
    config_text += f"    Storage / Disk:              {lxc.storage} / {lxc.disk_size}G\n"
    config_text += f"    Cores / Memory / Swap:       {lxc.cores} / {lxc.memory}MB / {lxc.swap}MB\n"
    config_text += f"    Network:                     bridge={lxc.bridge}, ip={lxc.ip}\n\n"

    config_text += "  SOGo Settings (sogo.*):\n"
    config_text += f"    Repository:                  {sogo.apt_repo_url} {sogo.apt_suite}\n"
    config_text += f"    Database / User:             {sogo.db_name} / {sogo.db_user}\n"
    config_text += f"    Mail Domain / Time Zone:     {sogo.mail_domain} / {sogo.time_zone}\n\n"

    config_text += f"  Script Version:                {static_config.SCRIPT_VERSION}\n"
    return config_text


def view_configuration(
    app_config: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """Logs the effective configuration."""
    logger_to_use = current_logger if current_logger else module_logger
    log_provision(format_configuration(app_config), "info", logger_to_use, app_config)
