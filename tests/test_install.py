import pytest

import install
from setup.config_models import SOGO_LOG_FILE_DEFAULT, AppSettings


@pytest.fixture
def patched_main(mocker):
    settings = AppSettings()
    mocker.patch("install.load_app_settings", return_value=settings)
    mocker.patch("install.setup_logging")
    return settings


def test_parse_args_sogo():
    args = install.parse_args(["-v", "sogo-lxc", "--ctid", "150", "--ip", "10.0.0.9/24"])

    assert args.command == "sogo-lxc"
    assert args.verbose is True
    assert args.ctid == 150
    assert args.ip == "10.0.0.9/24"
    assert args.config == "config.yaml"


def test_parse_args_typo3():
    args = install.parse_args(["--log-file", "/tmp/t.log", "typo3", "--typo3-version", "12.4.20"])

    assert args.command == "typo3"
    assert args.typo3_version == "12.4.20"
    assert args.log_file == "/tmp/t.log"


def test_parse_args_requires_command():
    with pytest.raises(SystemExit):
        install.parse_args([])


def test_main_view_config(mocker, patched_main):
    view_mock = mocker.patch("install.view_configuration")

    assert install.main(["view-config"]) == 0
    view_mock.assert_called_once_with(patched_main, install.logger)


def test_main_typo3(mocker, patched_main):
    run_mock = mocker.patch("install.run_typo3_setup", return_value=True)

    assert install.main(["typo3"]) == 0
    run_mock.assert_called_once_with(patched_main, install.logger)
    assert patched_main.log_file == ""
    assert install.setup_logging.call_args.kwargs["symbols"] == patched_main.symbols


def test_main_sogo_defaults_log_file(mocker, patched_main):
    run_mock = mocker.patch("install.run_sogo_lxc_setup", return_value=True)

    assert install.main(["sogo-lxc"]) == 0

    run_mock.assert_called_once_with(patched_main, install.logger)
    assert patched_main.log_file == SOGO_LOG_FILE_DEFAULT
    assert install.setup_logging.call_args.kwargs["log_file"] == SOGO_LOG_FILE_DEFAULT


def test_main_fatal_task_exits(mocker, patched_main):
    mocker.patch("install.run_sogo_lxc_setup", side_effect=SystemExit(1))

    with pytest.raises(SystemExit) as exc_info:
        install.main(["sogo-lxc"])
    assert exc_info.value.code == 1
