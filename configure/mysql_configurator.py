# configure/mysql_configurator.py
# -*- coding: utf-8 -*-
"""
Creates the application database, its user and the root-only credentials file.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_provision
from common.db_utils import (
    DatabaseCredentials,
    build_provisioning_statements,
    run_mysql_statement,
)
from common.secret_utils import generate_password
from common.targets import HostTarget
from setup.config import CREDENTIALS_FILE_MODE

module_logger = logging.getLogger(__name__)


def create_application_database(
    target: HostTarget,
    credentials: DatabaseCredentials,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Creates the database and a localhost user with all privileges on it.

    Each statement runs on its own, so a failure names the exact step.

    Raises:
        subprocess.CalledProcessError: If any statement fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(target.app_settings)
    log_provision(
        f"{symbols.get('step', '➡️')} Creating database '{credentials.name}' and user '{credentials.user}' on {target.description}...",
        "info",
        logger_to_use,
        target.app_settings,
    )
    for statement in build_provisioning_statements(credentials):
        run_mysql_statement(
            target,
            statement,
            current_logger=logger_to_use,
            contains_secret="IDENTIFIED BY" in statement,
        )
    log_provision(
        f"{symbols.get('success', '✅')} Database '{credentials.name}' ready.",
        "success",
        logger_to_use,
        target.app_settings,
    )


def write_credentials_file(
    target: HostTarget,
    credentials: DatabaseCredentials,
    path: str,
    title: str,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """Writes the credential record to a root-owned file with mode 600."""
    logger_to_use = current_logger if current_logger else module_logger
    target.write_file(
        path,
        credentials.render(title),
        mode=CREDENTIALS_FILE_MODE,
        owner="root",
        group="root",
    )
    log_provision(
        f"{get_symbols(target.app_settings).get('success', '✅')} Credentials stored in {path} (mode {CREDENTIALS_FILE_MODE}).",
        "success",
        logger_to_use,
        target.app_settings,
    )


def provision_application_database(
    target: HostTarget,
    db_name: str,
    db_user: str,
    credentials_file: str,
    title: str,
    current_logger: Optional[logging.Logger] = None,
) -> DatabaseCredentials:
    """
    Generates a password, creates the database and user, and records the
    credentials. Returns the credential record for later templating.
    """
    credentials = DatabaseCredentials(
        name=db_name, user=db_user, password=generate_password()
    )
    create_application_database(target, credentials, current_logger)
    write_credentials_file(
        target, credentials, credentials_file, title, current_logger
    )
    return credentials
