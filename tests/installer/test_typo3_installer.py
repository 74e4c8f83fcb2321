import io
import tarfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from installer.typo3_installer import (
    download_typo3_release,
    extract_typo3_release,
    install_typo3,
    typo3_download_url,
)


def _make_release(path: Path, top_dir: str = "typo3_src-13.4.9") -> Path:
    with tarfile.open(path, "w:gz") as tar:
        for name, data in (
            (f"{top_dir}/index.php", b"<?php\n"),
            (f"{top_dir}/typo3/sysext/core/ext_emconf.php", b"<?php\n"),
        ):
            info = tarfile.TarInfo(name)
            info.size = len(data)
            tar.addfile(info, io.BytesIO(data))
    return path


@pytest.fixture
def mock_get(mocker):
    get_mock = mocker.patch("installer.typo3_installer.requests.get")
    response = MagicMock()
    response.iter_content.return_value = [b"abc", b"", b"def"]
    get_mock.return_value.__enter__.return_value = response
    get_mock.return_value.__exit__.return_value = False
    return get_mock


def test_typo3_download_url(app_settings):
    assert typo3_download_url(app_settings) == "https://get.typo3.org/13.4.9"
    app_settings.typo3.version = "12.4.20"
    assert typo3_download_url(app_settings) == "https://get.typo3.org/12.4.20"


def test_download_typo3_release(tmp_path, mock_get, mock_logger):
    destination = tmp_path / "typo3.tar.gz"

    result = download_typo3_release("https://get.typo3.org/13.4.9", destination, 30, mock_logger)

    assert result == destination
    assert destination.read_bytes() == b"abcdef"
    mock_get.assert_called_once_with("https://get.typo3.org/13.4.9", stream=True, timeout=30)


def test_download_typo3_release_connection_error(tmp_path, mock_get, mock_logger):
    mock_get.side_effect = requests.exceptions.ConnectionError("unreachable")

    with pytest.raises(RuntimeError, match="Failed to download TYPO3"):
        download_typo3_release("https://get.typo3.org/13.4.9", tmp_path / "t.tar.gz", 30, mock_logger)


def test_download_typo3_release_http_error(tmp_path, mock_get, mock_logger):
    response = mock_get.return_value.__enter__.return_value
    response.raise_for_status.side_effect = requests.exceptions.HTTPError("404 Not Found")

    with pytest.raises(RuntimeError, match="Failed to download TYPO3"):
        download_typo3_release("https://get.typo3.org/0.0.0", tmp_path / "t.tar.gz", 30, mock_logger)


def test_extract_typo3_release(tmp_path, mock_logger):
    archive = _make_release(tmp_path / "typo3.tar.gz")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    extracted = extract_typo3_release(archive, out_dir, mock_logger)

    assert extracted == out_dir / "typo3_src-13.4.9"
    assert (extracted / "index.php").read_bytes() == b"<?php\n"


def test_extract_typo3_release_without_source_dir(tmp_path, mock_logger):
    archive = _make_release(tmp_path / "typo3.tar.gz", top_dir="something-else")

    with pytest.raises(RuntimeError, match="typo3_src-"):
        extract_typo3_release(archive, tmp_path, mock_logger)


def test_extract_typo3_release_corrupt_archive(tmp_path, mock_logger):
    archive = tmp_path / "typo3.tar.gz"
    archive.write_bytes(b"<html>not an archive</html>")

    with pytest.raises(RuntimeError, match="Could not extract"):
        extract_typo3_release(archive, tmp_path, mock_logger)


def test_install_typo3(mocker, tmp_path, mock_target, mock_logger):
    mock_target.app_settings.typo3.web_root_parent = str(tmp_path)
    download_mock = mocker.patch(
        "installer.typo3_installer.download_typo3_release",
        side_effect=lambda url, destination, **kwargs: _make_release(destination),
    )

    install_dir = install_typo3(mock_target, mock_logger)

    assert install_dir == tmp_path / "typo3"
    assert (install_dir / "index.php").is_file()
    assert not (tmp_path / "typo3_src-13.4.9").exists()
    assert not (tmp_path / "typo3.tar.gz").exists()
    assert download_mock.call_args.args[0] == "https://get.typo3.org/13.4.9"
    mock_target.run.assert_called_once_with(
        ["chown", "-R", "www-data:www-data", str(tmp_path / "typo3")]
    )


def test_install_typo3_refuses_existing_install(mocker, tmp_path, mock_target, mock_logger):
    mock_target.app_settings.typo3.web_root_parent = str(tmp_path)
    (tmp_path / "typo3").mkdir()
    download_mock = mocker.patch("installer.typo3_installer.download_typo3_release")

    with pytest.raises(FileExistsError):
        install_typo3(mock_target, mock_logger)

    download_mock.assert_not_called()


def test_install_typo3_removes_archive_on_failure(mocker, tmp_path, mock_target, mock_logger):
    mock_target.app_settings.typo3.web_root_parent = str(tmp_path)

    def broken_download(url, destination, **kwargs):
        destination.write_bytes(b"partial")
        return destination

    mocker.patch("installer.typo3_installer.download_typo3_release", side_effect=broken_download)

    with pytest.raises(RuntimeError):
        install_typo3(mock_target, mock_logger)

    assert not (tmp_path / "typo3.tar.gz").exists()
    mock_target.run.assert_not_called()


def test_install_typo3_removes_extracted_sources_when_move_fails(
    mocker, tmp_path, mock_target, mock_logger
):
    mock_target.app_settings.typo3.web_root_parent = str(tmp_path)
    (tmp_path / "typo3_src-12.4.20").mkdir()
    mocker.patch(
        "installer.typo3_installer.download_typo3_release",
        side_effect=lambda url, destination, **kwargs: _make_release(destination),
    )
    mocker.patch("installer.typo3_installer.shutil.move", side_effect=OSError("disk full"))

    with pytest.raises(OSError):
        install_typo3(mock_target, mock_logger)

    assert not (tmp_path / "typo3_src-13.4.9").exists()
    assert not (tmp_path / "typo3").exists()
    assert (tmp_path / "typo3_src-12.4.20").is_dir()
    assert not (tmp_path / "typo3.tar.gz").exists()
    mock_target.run.assert_not_called()
