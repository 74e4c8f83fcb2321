# installer/lxc_installer.py
# -*- coding: utf-8 -*-
"""
Proxmox LXC container preparation: template, creation, boot.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.network_utils import validate_container_ip_config
from common.proxmox.pct_manager import PctManager

module_logger = logging.getLogger(__name__)


def ensure_container_template(
    pct: PctManager, current_logger: Optional[logging.Logger] = None
) -> bool:
    """
    Refreshes the template index and downloads the template if it is not cached.

    Returns:
        True if the template was downloaded, False if it was already present.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = pct.app_settings
    lxc = app_settings.lxc
    symbols = get_symbols(app_settings)

    pct.update_templates()
    if pct.template_exists(lxc.template_cache_dir, lxc.template):
        log_provision(
            f"{symbols.get('info', 'ℹ️')} Template {lxc.template} already exists.",
            "info",
            logger_to_use,
            app_settings,
        )
        return False
    pct.download_template(lxc.template_storage, lxc.template)
    return True


def create_and_start_container(
    pct: PctManager, current_logger: Optional[logging.Logger] = None
) -> None:
    """
    Creates the container, starts it and waits the configured boot delay.

    Raises:
        ValueError: If the configured IP setting is neither 'dhcp' nor a CIDR.
        RuntimeError: If the CTID is already taken.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = pct.app_settings
    lxc = app_settings.lxc
    symbols = get_symbols(app_settings)

    if not validate_container_ip_config(lxc.ip, app_settings, logger_to_use):
        raise ValueError(f"Invalid container IP setting '{lxc.ip}'; use 'dhcp' or a CIDR.")

    pct.create_container(lxc)
    pct.start()
    pct.wait_for_boot(lxc.boot_wait_seconds)
    log_provision(
        f"{symbols.get('success', '✅')} Container {lxc.ctid} ({lxc.hostname}) is running.",
        "success",
        logger_to_use,
        app_settings,
    )
