# common/secret_utils.py
# -*- coding: utf-8 -*-
"""
Credential generation helpers.
"""

import secrets
import string

PASSWORD_LENGTH_DEFAULT = 13
PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_password(length: int = PASSWORD_LENGTH_DEFAULT) -> str:
    """
    Returns a random alphanumeric password drawn from the OS CSPRNG.

    Alphanumeric only, so the value is safe inside SQL string literals,
    YAML scalars and mysql:// URLs without escaping.
    """
    if length < 1:
        raise ValueError("Password length must be at least 1")
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))
