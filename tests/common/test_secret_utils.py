import string

import pytest

from common.secret_utils import generate_password


def test_generate_password_default_length():
    password = generate_password()
    assert len(password) == 13
    assert set(password) <= set(string.ascii_letters + string.digits)


def test_generate_password_is_random():
    assert len({generate_password() for _ in range(20)}) == 20


def test_generate_password_rejects_zero_length():
    with pytest.raises(ValueError):
        generate_password(0)
