#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the stack provisioner.

Subcommands:
    typo3       Install TYPO3 with Apache and MySQL on this Debian host.
    sogo-lxc    Create a Proxmox LXC container and install SOGo inside it.
    view-config Show the effective configuration and exit.
"""

import argparse
import logging
import sys
from typing import List, Optional

from common.core_utils import setup_logging
from setup.cli_handler import view_configuration
from setup.config_loader import load_app_settings
from setup.config_models import SOGO_LOG_FILE_DEFAULT, AppSettings
from setup.sogo_lxc_setup import run_sogo_lxc_setup
from setup.typo3_setup import run_typo3_setup

logger = logging.getLogger("stack_installer")


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Provisioner for TYPO3 (host) and SOGo (Proxmox LXC) stacks"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config",
        default="config.yaml",
        help="Path to the YAML configuration file (default: config.yaml)",
    )
    parser.add_argument("--log-file", help="Append log output to this file")
    parser.add_argument("--log-prefix", help="Prefix for every log line")

    subparsers = parser.add_subparsers(
        dest="command", help="Command to execute", required=True
    )

    typo3_parser = subparsers.add_parser(
        "typo3", help="Install TYPO3 CMS with Apache and MySQL on this host"
    )
    typo3_parser.add_argument("--typo3-version", help="TYPO3 release to install")
    typo3_parser.add_argument("--server-admin", help="ServerAdmin e-mail for the Apache site")

    sogo_parser = subparsers.add_parser(
        "sogo-lxc", help="Create a Proxmox LXC container and install SOGo in it"
    )
    sogo_parser.add_argument("--ctid", type=int, help="Container ID")
    sogo_parser.add_argument("--hostname", help="Container hostname")
    sogo_parser.add_argument("--storage", help="Storage for the container root filesystem")
    sogo_parser.add_argument("--bridge", help="Network bridge")
    sogo_parser.add_argument("--ip", help="'dhcp' or an IPv4 CIDR for eth0")
    sogo_parser.add_argument("--memory", type=int, help="Memory in MB")
    sogo_parser.add_argument("--cores", type=int, help="CPU cores")
    sogo_parser.add_argument("--mail-domain", help="SOGo mail domain")

    subparsers.add_parser(
        "view-config", help="Show the effective configuration and exit"
    )

    return parser.parse_args(args)


def configure_logging(
    parsed_args: argparse.Namespace, app_settings: AppSettings
) -> None:
    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=app_settings.log_file or None,
        log_to_console=True,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    parsed_args = parse_args(args)
    app_settings = load_app_settings(parsed_args, parsed_args.config, logger)

    if parsed_args.command == "sogo-lxc" and not app_settings.log_file:
        app_settings.log_file = SOGO_LOG_FILE_DEFAULT
    configure_logging(parsed_args, app_settings)

    if parsed_args.command == "view-config":
        view_configuration(app_settings, logger)
        return 0
    if parsed_args.command == "typo3":
        logger.info("Starting TYPO3 installation")
        run_typo3_setup(app_settings, logger)
        return 0
    if parsed_args.command == "sogo-lxc":
        logger.info("Starting SOGo LXC setup")
        run_sogo_lxc_setup(app_settings, logger)
        logger.info("Script execution completed")
        return 0

    logger.error(f"Unknown command: {parsed_args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
