# configure/sogo_configurator.py
# -*- coding: utf-8 -*-
"""
Writes sogo.conf so SOGo keeps its profiles, folders and sessions in MySQL.

SOGo creates the tables named in the URLs on first start.
"""
import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.db_utils import DatabaseCredentials
from common.targets import HostTarget
from setup.config import APP_CONFIG_FILE_MODE
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def render_sogo_config(
    app_settings: AppSettings, credentials: DatabaseCredentials
) -> str:
    sogo = app_settings.sogo
    return sogo.config_template.format(
        db_host=app_settings.mysql.host,
        db_port=app_settings.mysql.port,
        db_name=credentials.name,
        db_user=credentials.user,
        db_password=credentials.password,
        mail_domain=sogo.mail_domain,
        time_zone=sogo.time_zone,
    )


def write_sogo_config(
    target: HostTarget,
    credentials: DatabaseCredentials,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """Writes the SOGo configuration, readable by the sogo group only."""
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    config_path = app_settings.sogo.config_path

    log_provision(
        f"{get_symbols(app_settings).get('step', '➡️')} Writing SOGo configuration {config_path}...",
        "info",
        logger_to_use,
        app_settings,
    )
    target.write_file(
        config_path,
        render_sogo_config(app_settings, credentials),
        mode=APP_CONFIG_FILE_MODE,
        owner="root",
        group="sogo",
    )
    return config_path
