# common/system_utils.py
# -*- coding: utf-8 -*-
"""
System-level utility functions.

Preflight checks (privileges, Proxmox tooling) and systemd service handling.
Service helpers take a target so they work on the host and inside a container.
"""

import logging
import os
from typing import List, Optional

from common.command_utils import command_exists, get_symbols, log_provision
from common.targets import HostTarget
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def ensure_root(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Raises PermissionError unless the process runs as root.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    if os.geteuid() != 0:
        log_provision(
            f"{symbols.get('error', '❌')} This script must be run as root.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise PermissionError("This script must be run as root")
    log_provision(
        f"{symbols.get('success', '✅')} Running as root.",
        "debug",
        logger_to_use,
        app_settings,
    )


def ensure_proxmox_host(
    app_settings: AppSettings, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Raises EnvironmentError when the Proxmox VE tools are not on PATH.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    for tool in ("pveam", "pct"):
        if not command_exists(tool):
            log_provision(
                f"{symbols.get('error', '❌')} Proxmox VE tool '{tool}' not found. Is this a Proxmox host?",
                "error",
                logger_to_use,
                app_settings,
            )
            raise EnvironmentError(
                "Proxmox VE tools not found. Is this a Proxmox host?"
            )


def systemd_enable_and_start(
    target: HostTarget,
    services: List[str],
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Enables and starts the given services on the target."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('gear', '⚙️')} Enabling and starting {', '.join(services)} on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    target.run(["systemctl", "enable"] + list(services))
    target.run(["systemctl", "start"] + list(services))


def systemd_restart(
    target: HostTarget,
    service: str,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Restarts a single service on the target."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('gear', '⚙️')} Restarting {service} on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    target.run(["systemctl", "restart", service])
