# installer/typo3_installer.py
# -*- coding: utf-8 -*-
"""
Downloads and unpacks a TYPO3 release into the web root.
"""

import logging
import shutil
import tarfile
from pathlib import Path
from typing import Optional, Set

import requests

from common.command_utils import get_symbols, log_provision
from common.targets import HostTarget
from setup.config import TYPO3_ARCHIVE_NAME, TYPO3_EXTRACTED_PREFIX
from setup.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def typo3_download_url(app_settings: AppSettings) -> str:
    typo3 = app_settings.typo3
    return typo3.download_url_template.format(version=typo3.version)


def download_typo3_release(
    url: str,
    destination: Path,
    timeout: int = 300,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Streams the release archive to destination.

    Raises:
        RuntimeError: On any HTTP, connection or timeout error.
    """
    logger_to_use = current_logger if current_logger else module_logger
    logger_to_use.info(f"Downloading TYPO3 from {url} to {destination}")
    try:
        with requests.get(url, stream=True, timeout=timeout) as response:
            response.raise_for_status()
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=65536):
                    if chunk:
                        f.write(chunk)
    except requests.exceptions.RequestException as req_err:
        logger_to_use.error(f"Failed to download TYPO3: {req_err}")
        raise RuntimeError("Failed to download TYPO3") from req_err
    return destination


def extract_typo3_release(
    archive_path: Path,
    extract_to: Path,
    current_logger: Optional[logging.Logger] = None,
) -> Path:
    """
    Extracts the archive and returns the unpacked typo3_src-* directory.

    Raises:
        RuntimeError: If the archive is unreadable or has no typo3_src-* directory.
    """
    logger_to_use = current_logger if current_logger else module_logger
    try:
        with tarfile.open(archive_path, "r:gz") as tar:
            top_level = {
                Path(member.name).parts[0]
                for member in tar.getmembers()
                if Path(member.name).parts
            }
            source_dirs = sorted(
                name for name in top_level if name.startswith(TYPO3_EXTRACTED_PREFIX)
            )
            if not source_dirs:
                raise RuntimeError(
                    f"Archive {archive_path} does not contain a {TYPO3_EXTRACTED_PREFIX}* directory."
                )
            tar.extractall(extract_to, filter="data")
    except tarfile.TarError as e:
        logger_to_use.error(f"Could not extract {archive_path}: {e}")
        raise RuntimeError(f"Could not extract {archive_path}") from e

    extracted = extract_to / source_dirs[-1]
    logger_to_use.info(f"Extracted TYPO3 sources to {extracted}")
    return extracted


def _remove_partial_install(
    install_dir: Path, preexisting: Set[Path], current_logger: logging.Logger
) -> None:
    """Removes what a failed download, extraction or move left in the web root."""
    leftovers = [
        path
        for path in install_dir.parent.glob(f"{TYPO3_EXTRACTED_PREFIX}*")
        if path not in preexisting
    ]
    if install_dir.exists():
        leftovers.append(install_dir)
    for path in leftovers:
        current_logger.warning(f"Removing partial TYPO3 files at {path}")
        shutil.rmtree(path, ignore_errors=True)


def install_typo3(
    target: HostTarget, current_logger: Optional[logging.Logger] = None
) -> Path:
    """
    Downloads the configured release into web_root_parent/install_dir_name
    and hands it to the web server user.

    Raises:
        FileExistsError: If the install directory already exists.
    """
    logger_to_use = current_logger if current_logger else module_logger
    app_settings = target.app_settings
    typo3 = app_settings.typo3
    symbols = get_symbols(app_settings)

    web_root_parent = Path(typo3.web_root_parent)
    install_dir = web_root_parent / typo3.install_dir_name
    archive_path = web_root_parent / TYPO3_ARCHIVE_NAME

    log_provision(
        f"{symbols.get('step', '➡️')} Installing TYPO3 {typo3.version} into {install_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    if install_dir.exists():
        raise FileExistsError(f"{install_dir} already exists; refusing to overwrite it.")

    web_root_parent.mkdir(parents=True, exist_ok=True)
    preexisting = set(web_root_parent.glob(f"{TYPO3_EXTRACTED_PREFIX}*"))
    try:
        download_typo3_release(
            typo3_download_url(app_settings),
            archive_path,
            timeout=typo3.download_timeout,
            current_logger=logger_to_use,
        )
        extracted = extract_typo3_release(archive_path, web_root_parent, logger_to_use)
        shutil.move(str(extracted), str(install_dir))
    except Exception:
        _remove_partial_install(install_dir, preexisting, logger_to_use)
        raise
    finally:
        archive_path.unlink(missing_ok=True)

    target.run(["chown", "-R", f"{typo3.web_user}:{typo3.web_group}", str(install_dir)])
    log_provision(
        f"{symbols.get('success', '✅')} TYPO3 installed.",
        "success",
        logger_to_use,
        app_settings,
    )
    return install_dir
