# setup/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the application.

Handles loading settings from Pydantic model defaults, environment variables,
YAML files and command-line arguments, applying this order of precedence:
1. Pydantic Model Defaults
2. Environment Variables (via Pydantic's BaseSettings)
3. YAML Configuration File (config.yaml, plus config_files/<section>.yaml)
4. Command-Line Arguments
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from .config_models import AppSettings

module_logger = logging.getLogger(__name__)

CONFIG_DIR = "config_files"
SECTIONS = ["mysql", "apache", "typo3", "firewall", "lxc", "sogo"]

# CLI argument name -> (settings section or None for top level, field name)
CLI_FIELD_MAP: Dict[str, Tuple[Optional[str], str]] = {
    "log_prefix": (None, "log_prefix"),
    "log_file": (None, "log_file"),
    "typo3_version": ("typo3", "version"),
    "server_admin": ("apache", "server_admin"),
    "ctid": ("lxc", "ctid"),
    "hostname": ("lxc", "hostname"),
    "storage": ("lxc", "storage"),
    "bridge": ("lxc", "bridge"),
    "ip": ("lxc", "ip"),
    "memory": ("lxc", "memory"),
    "cores": ("lxc", "cores"),
    "mail_domain": ("sogo", "mail_domain"),
}


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates `source` with values from `overrides`.

    Nested dictionaries are merged; other values replace the existing ones.
    None in `overrides` never replaces an existing value.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
        elif key not in source:
            source[key] = value
    return source


def _read_yaml_dict(
    path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    """Returns the YAML mapping stored at path, or {} if missing or not a mapping."""
    if not (path.exists() and path.is_file()):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger_to_use.warning(f"Could not parse YAML config file '{path}': {e}. Ignoring it.")
        return {}
    except OSError as e:
        logger_to_use.warning(f"Could not read config file '{path}': {e}. Ignoring it.")
        return {}

    if yaml_data is None:
        return {}
    if not isinstance(yaml_data, dict):
        logger_to_use.warning(
            f"Config file '{path}' does not contain a valid YAML dictionary. Ignoring."
        )
        return {}
    return yaml_data


def load_service_config(
    section: str,
    config_dir: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Dict[str, Any]:
    """
    Loads config_files/<section>.yaml. Returns {} when the file does not exist.
    """
    logger_to_use = current_logger if current_logger else module_logger
    service_config_path = config_dir / f"{section}.yaml"
    service_config = _read_yaml_dict(service_config_path, logger_to_use)
    if service_config:
        logger_to_use.info(
            f"Loaded configuration for {section} from {service_config_path}"
        )
    return service_config


def cli_overrides(cli_args: argparse.Namespace) -> Dict[str, Any]:
    """Maps parsed CLI arguments onto the nested settings layout."""
    overrides: Dict[str, Any] = {}
    for cli_key, cli_value in vars(cli_args).items():
        if cli_value is None or cli_key not in CLI_FIELD_MAP:
            continue
        section, field_name = CLI_FIELD_MAP[cli_key]
        if section is None:
            overrides[field_name] = cli_value
        else:
            overrides.setdefault(section, {})[field_name] = cli_value
    return overrides


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: str = "config.yaml",
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Loads application settings.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: Path to the main YAML configuration file. Per-section
            files are looked up in a config_files directory next to it.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        SystemExit: If the merged configuration fails validation.
    """
    logger_to_use = current_logger if current_logger else module_logger

    # Defaults < environment variables, as resolved by BaseSettings.
    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    yaml_config_path = Path(config_file_path)
    yaml_data = _read_yaml_dict(yaml_config_path, logger_to_use)
    if yaml_data:
        current_values_dict = _deep_update(current_values_dict, yaml_data)
        logger_to_use.info(f"Loaded main configuration from {yaml_config_path}")
    else:
        logger_to_use.info(
            f"Configuration file '{yaml_config_path}' not found or empty. Using defaults, environment variables, and CLI args."
        )

    config_dir = yaml_config_path.parent / CONFIG_DIR
    for section in SECTIONS:
        service_config = load_service_config(section, config_dir, logger_to_use)
        if service_config:
            current_values_dict[section] = _deep_update(
                current_values_dict.get(section) or {}, service_config
            )

    if cli_args:
        current_values_dict = _deep_update(
            current_values_dict, cli_overrides(cli_args)
        )

    try:
        final_settings = AppSettings(**current_values_dict)
    except ValidationError as e:
        logger_to_use.error(f"Configuration validation failed: {e}")
        raise SystemExit(f"Configuration error: {e}") from e

    logger_to_use.debug("Successfully loaded and validated application settings")
    return final_settings
