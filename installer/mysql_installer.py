# installer/mysql_installer.py
# -*- coding: utf-8 -*-
"""
MySQL server installation from the upstream MySQL apt repository.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.debian.apt_manager import AptManager
from common.system_utils import systemd_enable_and_start
from common.targets import HostTarget
from setup.config import MYSQL_SERVER_PACKAGES, MYSQL_SERVICE

module_logger = logging.getLogger(__name__)

MYSQL_REPO_NAME = "mysql"


def add_mysql_repository(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> str:
    """Installs the MySQL signing key and a signed deb822 source."""
    logger_to_use = current_logger if current_logger else module_logger
    mysql = target.app_settings.mysql
    log_provision(
        f"{get_symbols(target.app_settings).get('step', '➡️')} Setting up MySQL repository...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    apt = AptManager(target, logger_to_use)
    apt.add_gpg_key_from_url(mysql.gpg_key_url, mysql.keyring_path)
    return apt.add_repository(
        MYSQL_REPO_NAME,
        {
            "Types": "deb",
            "URIs": mysql.apt_repo_url,
            "Suites": mysql.apt_suite,
            "Components": mysql.apt_component,
            "Signed-By": mysql.keyring_path,
        },
        update_after=True,
    )


def install_mysql_server(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> None:
    """Adds the repository, installs mysql-server and starts it."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)

    add_mysql_repository(target, logger_to_use)
    log_provision(
        f"{symbols.get('package', '📦')} Installing MySQL...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    AptManager(target, logger_to_use).install(MYSQL_SERVER_PACKAGES)
    systemd_enable_and_start(target, [MYSQL_SERVICE], logger_to_use)
    log_provision(
        f"{symbols.get('success', '✅')} MySQL installed and running.",
        "success",
        logger_to_use,
        target.app_settings,
    )
