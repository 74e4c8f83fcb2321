# common/targets.py
# -*- coding: utf-8 -*-
"""
Execution targets for provisioning commands.

A target decides where a command runs: directly on the host, or inside a
Proxmox LXC container through `pct exec`. Helpers that install packages,
write configuration files or talk to MySQL take a target, so the same code
provisions the host (TYPO3) and the container (SOGo).
"""

import logging
import os
import subprocess
from typing import List, Optional

from common.command_utils import run_elevated_command
from setup.config_models import AppSettings


class HostTarget:
    """Runs commands on the local host, elevated when needed."""

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(__name__)

    @property
    def description(self) -> str:
        return "host"

    def wrap(self, command: List[str]) -> List[str]:
        """Returns the command as it is handed to run_elevated_command."""
        return list(command)

    def run(
        self,
        command: List[str],
        check: bool = True,
        capture_output: bool = False,
        cmd_input: Optional[str] = None,
        log_input: bool = True,
    ) -> subprocess.CompletedProcess:
        return run_elevated_command(
            self.wrap(command),
            self.app_settings,
            check=check,
            capture_output=capture_output,
            cmd_input=cmd_input,
            current_logger=self.logger,
            log_input=log_input,
        )

    def write_file(
        self,
        path: str,
        content: str,
        mode: str = "644",
        owner: Optional[str] = None,
        group: Optional[str] = None,
    ) -> None:
        """
        Writes content to path with the given mode and ownership.

        The file is created by `install` reading from stdin, so it never exists
        with broader permissions than requested and the content never reaches
        the log.
        """
        parent = os.path.dirname(path)
        if parent:
            self.run(["mkdir", "-p", parent])
        command = ["install", "-m", mode]
        if owner:
            command += ["-o", owner]
        if group:
            command += ["-g", group]
        command += ["/dev/stdin", path]
        self.run(command, cmd_input=content, log_input=True)


class ContainerTarget(HostTarget):
    """Runs commands inside a Proxmox LXC container via `pct exec`."""

    def __init__(
        self,
        ctid: int,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        super().__init__(app_settings, logger)
        self.ctid = ctid

    @property
    def description(self) -> str:
        return f"container {self.ctid}"

    def wrap(self, command: List[str]) -> List[str]:
        return ["pct", "exec", str(self.ctid), "--"] + list(command)
