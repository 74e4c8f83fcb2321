# common/network_utils.py
# -*- coding: utf-8 -*-
"""
Network-related utility functions.
"""
import logging
import re
import socket
from typing import Optional

from common.command_utils import get_symbols, log_provision, run_command
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)

_INET_LINE = re.compile(r"^\s*inet\s+(\d{1,3}(?:\.\d{1,3}){3})/\d{1,2}\b", re.MULTILINE)


def validate_cidr(
        cidr: str,
        app_settings: Optional[AppSettings],
        current_logger: Optional[logging.Logger] = None,
) -> bool:
    """Returns True for a well-formed IPv4 CIDR such as 192.168.1.10/24."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if not isinstance(cidr, str):
        log_provision(
            f"{symbols.get('error', '❌')} Invalid input for CIDR validation: not a string.",
            "error",
            logger_to_use,
            app_settings,
        )
        return False

    if not re.fullmatch(r"\d{1,3}\.\d{1,3}\.\d{1,3}\.\d{1,3}/\d{1,2}", cidr):
        log_provision(
            f"{symbols.get('warning', '!')} CIDR '{cidr}' has invalid format.",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False

    ip_part, prefix_str = cidr.split("/")
    if not (0 <= int(prefix_str) <= 32):
        log_provision(
            f"{symbols.get('warning', '!')} CIDR prefix '/{prefix_str}' is out of range (0-32).",
            "warning",
            logger_to_use,
            app_settings,
        )
        return False

    for octet in ip_part.split("."):
        if not (0 <= int(octet) <= 255):
            log_provision(
                f"{symbols.get('warning', '!')} CIDR IP octet '{octet}' is out of range (0-255).",
                "warning",
                logger_to_use,
                app_settings,
            )
            return False
    return True


def validate_container_ip_config(
        ip_config: str,
        app_settings: Optional[AppSettings],
        current_logger: Optional[logging.Logger] = None,
) -> bool:
    """Accepts 'dhcp' or an IPv4 CIDR, the two forms pct accepts for ip=."""
    if ip_config == "dhcp":
        return True
    return validate_cidr(ip_config, app_settings, current_logger)


def check_internet_connectivity(
        app_settings: AppSettings,
        current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Pings the configured connectivity host once.

    Raises:
        ConnectionError: If the host does not answer.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    host = app_settings.connectivity_check_host

    log_provision(
        f"{symbols.get('step', '➡️')} Checking network connectivity ({host})...",
        "info",
        logger_to_use,
        app_settings,
    )
    result = run_command(
        ["ping", "-c", "1", host],
        app_settings,
        check=False,
        capture_output=True,
        current_logger=logger_to_use,
    )
    if result.returncode != 0:
        log_provision(
            f"{symbols.get('error', '❌')} No internet connection.",
            "error",
            logger_to_use,
            app_settings,
        )
        raise ConnectionError("No internet connection")
    log_provision(
        f"{symbols.get('success', '✅')} Network connectivity confirmed.",
        "success",
        logger_to_use,
        app_settings,
    )


def get_primary_ip_address(
        app_settings: Optional[AppSettings] = None,
        current_logger: Optional[logging.Logger] = None,
) -> Optional[str]:
    """
    Get the primary IP address of the machine.

    Uses the first address reported by `hostname -I`, falling back to the
    source address of a UDP socket pointed at the connectivity host (no
    packets are sent).

    Returns:
        The primary IP address as a string, or None if it cannot be determined.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    try:
        result = run_command(
            ["hostname", "-I"],
            app_settings,
            check=False,
            capture_output=True,
            current_logger=logger_to_use,
        )
        if result.returncode == 0 and result.stdout.split():
            return result.stdout.split()[0]
    except FileNotFoundError:
        pass

    probe_host = (
        app_settings.connectivity_check_host if app_settings else "8.8.8.8"
    )
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            s.connect((probe_host, 80))
            return str(s.getsockname()[0])
    except OSError as e:
        log_provision(
            f"{symbols.get('warning', '!')} Could not determine primary IP address: {e}",
            "warning",
            logger_to_use,
            app_settings,
        )
        return None


def parse_ipv4_address(ip_addr_output: str) -> Optional[str]:
    """Returns the first IPv4 address from `ip addr show` output."""
    match = _INET_LINE.search(ip_addr_output or "")
    return match.group(1) if match else None
