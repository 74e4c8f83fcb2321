# common/proxmox/pct_manager.py
# -*- coding: utf-8 -*-
import logging
import os
import time
from typing import List, Optional

from common.command_utils import run_elevated_command
from common.network_utils import parse_ipv4_address
from common.targets import ContainerTarget
from setup.config_models import AppSettings, LxcSettings


class PctManager:
    """
    Manages one Proxmox LXC container through the `pveam` and `pct` CLIs.
    """

    def __init__(
        self,
        ctid: int,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.ctid = ctid
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)

    def _run(self, command: List[str], check: bool = True, capture_output: bool = False):
        return run_elevated_command(
            command,
            self.app_settings,
            check=check,
            capture_output=capture_output,
            current_logger=self.logger,
        )

    def update_templates(self) -> None:
        """Refreshes the container template index via 'pveam update'."""
        self.logger.info("Updating Proxmox container templates...")
        self._run(["pveam", "update"])

    def template_exists(self, cache_dir: str, template: str) -> bool:
        return os.path.isfile(os.path.join(cache_dir, template))

    def download_template(self, storage: str, template: str) -> None:
        self.logger.info(f"Downloading template {template} to {storage}...")
        self._run(["pveam", "download", storage, template])

    def container_exists(self) -> bool:
        """True when `pct status` knows the CTID."""
        result = self._run(
            ["pct", "status", str(self.ctid)], check=False, capture_output=True
        )
        return result.returncode == 0

    def build_create_command(self, lxc: LxcSettings) -> List[str]:
        """Returns the `pct create` command line for the given settings."""
        return [
            "pct",
            "create",
            str(self.ctid),
            f"{lxc.template_storage}:vztmpl/{lxc.template}",
            "--unprivileged",
            "1" if lxc.unprivileged else "0",
            "--features",
            f"nesting={1 if lxc.nesting else 0}",
            "--hostname",
            lxc.hostname,
            "--storage",
            lxc.storage,
            "--rootfs",
            f"{lxc.storage}:{lxc.disk_size}",
            "--cores",
            str(lxc.cores),
            "--memory",
            str(lxc.memory),
            "--swap",
            str(lxc.swap),
            "--net0",
            f"name=eth0,bridge={lxc.bridge},ip={lxc.ip},type=veth",
        ]

    def create_container(self, lxc: LxcSettings) -> None:
        """
        Creates the container.

        Raises:
            RuntimeError: If a container with this CTID already exists.
        """
        if self.container_exists():
            raise RuntimeError(
                f"Container {self.ctid} already exists; choose another CTID or remove it first."
            )
        self.logger.info(f"Creating LXC container with CTID {self.ctid}...")
        self._run(self.build_create_command(lxc))

    def start(self) -> None:
        self.logger.info(f"Starting LXC container {self.ctid}...")
        self._run(["pct", "start", str(self.ctid)])

    def wait_for_boot(self, seconds: int) -> None:
        self.logger.info(
            f"Waiting {seconds}s for container {self.ctid} to initialize..."
        )
        time.sleep(seconds)

    def target(self) -> ContainerTarget:
        """Returns a target that runs commands inside this container."""
        return ContainerTarget(self.ctid, self.app_settings, self.logger)

    def get_ip_address(self, interface: str = "eth0") -> Optional[str]:
        result = self.target().run(
            ["ip", "-4", "addr", "show", interface],
            check=False,
            capture_output=True,
        )
        if result.returncode != 0:
            self.logger.warning(
                f"Could not read address of {interface} in container {self.ctid}."
            )
            return None
        return parse_ipv4_address(result.stdout)
