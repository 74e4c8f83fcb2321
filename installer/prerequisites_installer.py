# installer/prerequisites_installer.py
# -*- coding: utf-8 -*-
"""
System update and base package installation.
"""

import logging
from typing import List, Optional

from common.command_utils import get_symbols, log_provision
from common.debian.apt_manager import AptManager
from common.targets import HostTarget

module_logger = logging.getLogger(__name__)


def update_system(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> None:
    """Runs apt-get update and apt-get upgrade on the target."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('step', '➡️')} Updating system on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    apt = AptManager(target, logger_to_use)
    apt.update()
    apt.upgrade()
    log_provision(
        f"{symbols.get('success', '✅')} System updated.",
        "success",
        logger_to_use,
        target.app_settings,
    )


def install_packages(
    target: HostTarget,
    packages: List[str],
    current_logger: Optional[logging.Logger] = None,
) -> List[str]:
    """Installs the given packages; returns those that were newly installed."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('package', '📦')} Installing {len(packages)} package(s) on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    installed = AptManager(target, logger_to_use).install(packages)
    log_provision(
        f"{symbols.get('success', '✅')} Dependencies installed.",
        "success",
        logger_to_use,
        target.app_settings,
    )
    return installed


def cleanup_packages(
    target: HostTarget,
    autoclean: bool = True,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Removes unused packages and, optionally, stale archives."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('step', '➡️')} Cleaning up on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    apt = AptManager(target, logger_to_use)
    apt.autoremove()
    if autoclean:
        apt.autoclean()
    log_provision(
        f"{symbols.get('success', '✅')} Cleanup completed.",
        "success",
        logger_to_use,
        target.app_settings,
    )
