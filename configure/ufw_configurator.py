# configure/ufw_configurator.py
# -*- coding: utf-8 -*-
"""
Handles configuration of UFW (Uncomplicated Firewall) rules and activation.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.debian.apt_manager import AptManager
from common.targets import HostTarget
from setup.config import FIREWALL_PACKAGES

module_logger = logging.getLogger(__name__)


def apply_ufw_rules(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Installs UFW, allows the configured ports and enables the firewall.

    SSH (22) stays in the default port list so enabling UFW never locks out
    the session running the installer.

    Raises:
        ValueError: If a configured port is outside 1-65535.
        subprocess.CalledProcessError: If any UFW command fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    symbols = get_symbols(app_settings)
    ports = app_settings.firewall.allowed_ports

    invalid = [port for port in ports if not (1 <= port <= 65535)]
    if invalid:
        msg = f"UFW rule application aborted: invalid port(s) {invalid}."
        log_provision(
            f"{symbols.get('error', '❌')} {msg}",
            "error",
            logger_to_use,
            app_settings,
        )
        raise ValueError(msg)

    log_provision(
        f"{symbols.get('step', '➡️')} Configuring firewall...",
        "info",
        logger_to_use,
        app_settings,
    )
    AptManager(target, logger_to_use).install(FIREWALL_PACKAGES)

    for port in ports:
        log_provision(
            f"{symbols.get('info', 'ℹ️')} Allowing port {port} via UFW...",
            "info",
            logger_to_use,
            app_settings,
        )
        target.run(["ufw", "allow", str(port)])

    target.run(["ufw", "--force", "enable"])
    log_provision(
        f"{symbols.get('success', '✅')} Firewall configured.",
        "success",
        logger_to_use,
        app_settings,
    )
