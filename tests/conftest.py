# tests/conftest.py
import logging
from unittest.mock import MagicMock

import pytest

from setup.config_models import AppSettings


@pytest.fixture
def app_settings():
    """Default settings, resolved the same way the CLI resolves them."""
    return AppSettings()


@pytest.fixture
def mock_logger():
    return MagicMock(spec=logging.Logger)


@pytest.fixture
def mock_target(app_settings):
    """A stand-in for HostTarget/ContainerTarget that records commands."""
    target = MagicMock()
    target.app_settings = app_settings
    target.description = "host"
    target.run.return_value = MagicMock(returncode=0, stdout="", stderr="")
    return target
