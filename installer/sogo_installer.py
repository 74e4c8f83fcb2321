# installer/sogo_installer.py
# -*- coding: utf-8 -*-
"""
SOGo stack installation inside the container.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.debian.apt_manager import AptManager
from common.targets import HostTarget

module_logger = logging.getLogger(__name__)

SOGO_REPO_NAME = "sogo"


def add_sogo_repository(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> str:
    """Installs the SOGo signing key and a signed deb822 source."""
    logger_to_use = current_logger if current_logger else module_logger
    sogo = target.app_settings.sogo
    log_provision(
        f"{get_symbols(target.app_settings).get('step', '➡️')} Adding SOGo repository...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    apt = AptManager(target, logger_to_use)
    apt.add_gpg_key_from_url(sogo.gpg_key_url, sogo.keyring_path)
    return apt.add_repository(
        SOGO_REPO_NAME,
        {
            "Types": "deb",
            "URIs": sogo.apt_repo_url,
            "Suites": sogo.apt_suite,
            "Components": sogo.apt_suite,
            "Signed-By": sogo.keyring_path,
        },
        update_after=True,
    )


def install_sogo_packages(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> None:
    """Installs SOGo, MySQL, Apache and memcached, then empties the apt cache."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('package', '📦')} Installing SOGo and dependencies...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    apt = AptManager(target, logger_to_use)
    apt.install(list(target.app_settings.sogo.packages))
    apt.clean()
    log_provision(
        f"{symbols.get('success', '✅')} SOGo packages installed.",
        "success",
        logger_to_use,
        target.app_settings,
    )
