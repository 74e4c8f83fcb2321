# common/db_utils.py
# -*- coding: utf-8 -*-
"""
MySQL helpers driven through the `mysql` command-line client.

Statements run as the MySQL root user over the local socket on the given
target, so no client library or root password is needed.
"""

import logging
import re
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from common.targets import HostTarget

module_logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9_]{1,64}$")


class DatabaseCredentials(BaseModel):
    """The credential record written once during provisioning."""

    name: str = Field(description="Database name.")
    user: str = Field(description="Database user.")
    password: str = Field(description="Generated password.", repr=False)

    @field_validator("name", "user")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not IDENTIFIER_PATTERN.match(value):
            raise ValueError(
                f"'{value}' is not a valid MySQL identifier (letters, digits and underscore, max 64)."
            )
        return value

    def render(self, title: str) -> str:
        """Returns the content of the credentials file."""
        return (
            f"{title}\n"
            f"Database Name: {self.name}\n"
            f"Database User: {self.user}\n"
            f"Database Password: {self.password}\n"
        )


def quote_literal(value: str) -> str:
    """Quotes a value as a MySQL string literal."""
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def build_provisioning_statements(credentials: DatabaseCredentials) -> List[str]:
    """
    Returns the statements creating the database, the local user and its grant.
    """
    account = f"{quote_literal(credentials.user)}@'localhost'"
    return [
        f"CREATE DATABASE {credentials.name};",
        f"CREATE USER {account} IDENTIFIED BY {quote_literal(credentials.password)};",
        f"GRANT ALL PRIVILEGES ON {credentials.name}.* TO {account};",
        "FLUSH PRIVILEGES;",
    ]


def run_mysql_statement(
    target: HostTarget,
    statement: str,
    current_logger: Optional[logging.Logger] = None,
    contains_secret: bool = False,
) -> None:
    """Executes one statement as the MySQL root user on the target."""
    logger_to_use = current_logger if current_logger else module_logger
    logger_to_use.debug(
        "Running MySQL statement: "
        + (statement.split(" IDENTIFIED BY ")[0] + " ..." if contains_secret else statement)
    )
    target.run(
        ["mysql", "-u", "root", "-e", statement],
        log_input=not contains_secret,
    )
