# common/debian/apt_manager.py
# -*- coding: utf-8 -*-
import logging
import os
from typing import Dict, List, Optional, Union

from common.targets import HostTarget
from setup.config import APT_SOURCES_DIR

# apt must never stop to ask questions (mysql-server, tzdata, ...).
APT_GET = ["env", "DEBIAN_FRONTEND=noninteractive", "apt-get"]


class AptManager:
    """
    A thin wrapper around apt-get and dpkg-query that runs on a target.

    The target is either the host or an LXC container; every method raises
    on failure so the surrounding provisioning run stops at the first error.
    """

    def __init__(
        self,
        target: HostTarget,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initializes the AptManager.
        Args:
            target: Where apt commands are executed.
            logger: An optional logging object.
        """
        self.target = target
        self.logger = logger or logging.getLogger(__name__)

    def update(self) -> None:
        """Updates the package lists via 'apt-get update'."""
        self.logger.info(
            f"Updating apt package lists on {self.target.description}..."
        )
        self.target.run(APT_GET + ["update", "-yq"])

    def upgrade(self) -> None:
        """Upgrades installed packages via 'apt-get upgrade'."""
        self.logger.info(
            f"Upgrading installed packages on {self.target.description}..."
        )
        self.target.run(APT_GET + ["upgrade", "-yq"])

    def is_installed(self, package_name: str) -> bool:
        """
        Returns True if dpkg reports the package as installed on the target.
        """
        result = self.target.run(
            ["dpkg-query", "-W", "-f=${db:Status-Status}", package_name],
            check=False,
            capture_output=True,
        )
        return (
            result.returncode == 0
            and "installed" in result.stdout
            and "not-installed" not in result.stdout
        )

    def install(
        self,
        packages: Union[List[str], str],
        update_first: bool = False,
    ) -> List[str]:
        """
        Installs one or more packages using 'apt-get install'.

        Packages that are already installed are skipped.

        Args:
            packages: A single package name or a list of package names.
            update_first: Whether to update the package lists before installing.

        Returns:
            The packages that were actually handed to apt-get.
        """
        if not isinstance(packages, list):
            packages = [packages]

        if update_first:
            self.update()

        packages_to_install = []
        for pkg_name in packages:
            if self.is_installed(pkg_name):
                self.logger.info(
                    f"Package '{pkg_name}' is already installed. Skipping."
                )
            else:
                self.logger.info(
                    f"Marking package for installation: {pkg_name}"
                )
                packages_to_install.append(pkg_name)

        if not packages_to_install:
            self.logger.info("All requested packages are already installed.")
            return []

        self.logger.info(
            f"Committing installation for: {', '.join(packages_to_install)}"
        )
        self.target.run(APT_GET + ["install", "-yq"] + packages_to_install)
        self.logger.info("Packages installed successfully.")
        return packages_to_install

    def add_repository(
        self,
        repo_name: str,
        repo_details: Dict[str, str],
        update_after: bool = True,
    ) -> str:
        """
        Adds an apt repository by writing a deb822-style .sources file.

        Args:
            repo_name: The name for the repository file.
            repo_details: The deb822 fields (Types, URIs, Suites, ...).
            update_after: Whether to update package lists after adding.

        Returns:
            The path of the written .sources file.
        """
        repo_file_path = os.path.join(APT_SOURCES_DIR, f"{repo_name}.sources")
        self.logger.info(
            f"Adding repository '{repo_name}' at {repo_file_path}..."
        )

        deb822_content = "".join(
            f"{key}: {value}\n" for key, value in repo_details.items()
        )
        self.target.write_file(repo_file_path, deb822_content, mode="644")

        if update_after:
            self.update()
        return repo_file_path

    def add_gpg_key_from_url(
        self, key_url: str, keyring_path: str, dearmor: bool = True
    ) -> None:
        """
        Downloads a signing key and stores it as a keyring file.

        Args:
            key_url: The URL of the key.
            keyring_path: Final path of the keyring file.
            dearmor: Convert an ASCII-armored key to a binary keyring.
        """
        self.logger.info(f"Adding GPG key from {key_url} to {keyring_path}")
        keyring_dir = os.path.dirname(keyring_path)
        temp_key_path = f"/tmp/{os.path.basename(keyring_path)}.download"

        self.target.run(["install", "-m", "0755", "-d", keyring_dir])
        self.target.run(["curl", "-fsSL", key_url, "-o", temp_key_path])
        try:
            if dearmor:
                self.target.run(
                    [
                        "gpg",
                        "--batch",
                        "--yes",
                        "--dearmor",
                        "-o",
                        keyring_path,
                        temp_key_path,
                    ]
                )
            else:
                self.target.run(["mv", temp_key_path, keyring_path])
            self.target.run(["chmod", "a+r", keyring_path])
        finally:
            self.target.run(["rm", "-f", temp_key_path], check=False)
        self.logger.info("GPG key added and permissions set.")

    def autoremove(self, purge: bool = False) -> None:
        """Removes automatically installed packages that are no longer needed."""
        self.logger.info("Running autoremove to clean up unused packages...")
        cmd = APT_GET + ["autoremove", "-yq"]
        if purge:
            cmd.append("--purge")
        self.target.run(cmd)

    def autoclean(self) -> None:
        """Removes obsolete package archives from the local cache."""
        self.target.run(APT_GET + ["autoclean", "-yq"])

    def clean(self) -> None:
        """Empties the local package archive cache."""
        self.target.run(APT_GET + ["clean"])
