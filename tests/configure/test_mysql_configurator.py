from unittest.mock import call

from common.db_utils import DatabaseCredentials
from configure.mysql_configurator import (
    create_application_database,
    provision_application_database,
    write_credentials_file,
)


def test_create_application_database_runs_each_statement(mock_target, mock_logger):
    credentials = DatabaseCredentials(name="sogo", user="sogo", password="Pw123")

    create_application_database(mock_target, credentials, mock_logger)

    assert mock_target.run.call_args_list == [
        call(["mysql", "-u", "root", "-e", "CREATE DATABASE sogo;"], log_input=True),
        call(
            ["mysql", "-u", "root", "-e", "CREATE USER 'sogo'@'localhost' IDENTIFIED BY 'Pw123';"],
            log_input=False,
        ),
        call(
            ["mysql", "-u", "root", "-e", "GRANT ALL PRIVILEGES ON sogo.* TO 'sogo'@'localhost';"],
            log_input=True,
        ),
        call(["mysql", "-u", "root", "-e", "FLUSH PRIVILEGES;"], log_input=True),
    ]


def test_write_credentials_file(mock_target, mock_logger):
    credentials = DatabaseCredentials(name="typo3", user="typo3", password="Pw123")

    write_credentials_file(
        mock_target, credentials, "/root/typo3.creds", "TYPO3 MySQL Credentials", mock_logger
    )

    mock_target.write_file.assert_called_once_with(
        "/root/typo3.creds",
        "TYPO3 MySQL Credentials\n"
        "Database Name: typo3\n"
        "Database User: typo3\n"
        "Database Password: Pw123\n",
        mode="600",
        owner="root",
        group="root",
    )
    logged = " ".join(str(c.args[0]) for c in mock_logger.info.call_args_list)
    assert "Pw123" not in logged


def test_provision_application_database(mocker, mock_target, mock_logger):
    mocker.patch("configure.mysql_configurator.generate_password", return_value="Gen3rated0001")

    credentials = provision_application_database(
        mock_target, "typo3", "typo3", "/root/typo3.creds", "TYPO3 MySQL Credentials", mock_logger
    )

    assert credentials.password == "Gen3rated0001"
    assert mock_target.run.call_count == 4
    assert mock_target.write_file.call_args.args[0] == "/root/typo3.creds"
