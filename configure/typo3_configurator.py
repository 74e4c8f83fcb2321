# configure/typo3_configurator.py
# -*- coding: utf-8 -*-
"""
Writes the TYPO3 database connection settings.
"""
import logging
import os
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.db_utils import DatabaseCredentials
from common.targets import HostTarget
from setup.config import APP_CONFIG_FILE_MODE, TYPO3_SETTINGS_RELATIVE_PATH
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def typo3_settings_path(app_settings: AppSettings) -> str:
    typo3 = app_settings.typo3
    return os.path.join(
        typo3.web_root_parent, typo3.install_dir_name, TYPO3_SETTINGS_RELATIVE_PATH
    )


def render_typo3_settings(
    app_settings: AppSettings, credentials: DatabaseCredentials
) -> str:
    return app_settings.typo3.settings_template.format(
        db_host=app_settings.mysql.host,
        db_port=app_settings.mysql.port,
        db_name=credentials.name,
        db_user=credentials.user,
        db_password=credentials.password,
    )


def write_typo3_settings(
    target: HostTarget,
    credentials: DatabaseCredentials,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Renders settings.yaml and writes it owned by the web server user.

    Returns:
        The path of the written file.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    symbols = get_symbols(app_settings)
    settings_path = typo3_settings_path(app_settings)

    log_provision(
        f"{symbols.get('step', '➡️')} Writing TYPO3 configuration {settings_path}...",
        "info",
        logger_to_use,
        app_settings,
    )
    target.write_file(
        settings_path,
        render_typo3_settings(app_settings, credentials),
        mode=APP_CONFIG_FILE_MODE,
        owner=app_settings.typo3.web_user,
        group=app_settings.typo3.web_group,
    )
    log_provision(
        f"{symbols.get('success', '✅')} TYPO3 configured.",
        "success",
        logger_to_use,
        app_settings,
    )
    return settings_path
