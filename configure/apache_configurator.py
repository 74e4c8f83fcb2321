# configure/apache_configurator.py
# -*- coding: utf-8 -*-
"""
Handles configuration of the Apache webserver for TYPO3 and SOGo.
"""
import logging
import os
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.system_utils import systemd_restart
from common.targets import HostTarget
from setup.config import APACHE_SERVICE
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def typo3_document_root(app_settings: AppSettings) -> str:
    typo3 = app_settings.typo3
    return os.path.join(typo3.web_root_parent, typo3.install_dir_name, "public")


def render_typo3_vhost(app_settings: AppSettings, server_name: str) -> str:
    """Renders the TYPO3 virtual host from the configured template."""
    return app_settings.typo3.vhost_template.format(
        server_admin=app_settings.apache.server_admin,
        server_name=server_name,
        document_root=typo3_document_root(app_settings),
        site_name=app_settings.typo3.site_name,
    )


def configure_typo3_site(
    target: HostTarget,
    server_name: str,
    current_logger: Optional[logging.Logger] = None,
) -> str:
    """
    Writes the TYPO3 site, enables it together with mod_rewrite and restarts Apache.

    Returns:
        The path of the written site configuration.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    symbols = get_symbols(app_settings)
    site_file = f"{app_settings.typo3.site_name}.conf"
    site_path = os.path.join(app_settings.apache.sites_available_dir, site_file)

    log_provision(
        f"{symbols.get('step', '➡️')} Configuring Apache site {site_path} (ServerName {server_name})...",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        vhost_content = render_typo3_vhost(app_settings, server_name)
    except KeyError as e_key:
        log_provision(
            f"{symbols.get('error', '❌')} Unknown placeholder {e_key} in the TYPO3 vhost template.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise

    target.write_file(site_path, vhost_content, mode="644")
    target.run(["a2ensite", site_file])
    target.run(["a2enmod", "rewrite"])
    systemd_restart(target, APACHE_SERVICE, logger_to_use)

    log_provision(
        f"{symbols.get('success', '✅')} Apache configured.",
        "success",
        logger_to_use,
        app_settings,
    )
    return site_path


def configure_sogo_proxy(
    target: HostTarget,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Enables the proxy modules and the SOGo conf shipped by the package."""
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    sogo = app_settings.sogo
    symbols = get_symbols(app_settings)

    log_provision(
        f"{symbols.get('step', '➡️')} Configuring Apache2 for SOGo on {target.description}...",
        "info",
        logger_to_use,
        app_settings,
    )
    target.run(["a2enmod"] + list(sogo.apache_modules))
    if sogo.apache_conf:
        target.run(["a2enconf", sogo.apache_conf])
    systemd_restart(target, APACHE_SERVICE, logger_to_use)
