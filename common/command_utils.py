# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Running external commands with consistent logging.

Every command is logged before it runs. Failures are logged with their
captured output and re-raised, which is what stops a provisioning run at the
first failing step.
"""

import logging
import os
import shutil
import subprocess
from typing import Dict, List, Optional, Union

from setup.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

_LOG_METHODS = {
    "debug": "debug",
    "info": "info",
    "success": "info",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Return the symbol map from app_settings, or the defaults."""
    if app_settings is not None and getattr(app_settings, "symbols", None):
        return app_settings.symbols
    return SYMBOLS_DEFAULT


def log_provision(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a provisioning message.

    Args:
        message: The text to log.
        level: "debug", "info", "success", "warning", "error" or "critical".
            "success" and unknown levels go out at INFO.
        current_logger: Logger to use instead of the module logger.
        app_settings: Accepted so every helper shares one call signature.
        exc_info: Attach the active exception to the record.
    """
    effective_logger = current_logger if current_logger else module_logger
    method = getattr(effective_logger, _LOG_METHODS.get(level, "info"))
    method(message, exc_info=exc_info)


def _get_elevated_command_prefix() -> List[str]:
    """Returns ["sudo"] unless the process already runs as root."""
    return [] if os.geteuid() == 0 else ["sudo"]


def _mask_command(command: Union[List[str], str]) -> str:
    parts = command.split() if isinstance(command, str) else command
    return f"{parts[0] if parts else ''} [arguments hidden]"


def _stream_text(stream) -> str:
    if stream and hasattr(stream, "strip"):
        return stream.strip()
    return ""


def run_command(
    command: Union[List[str], str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    shell: bool = False,
    capture_output: bool = False,
    text: bool = True,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    log_input: bool = True,
) -> subprocess.CompletedProcess:
    """
    Executes a system command, logging the command line and its output.

    Args:
        command: Argument list, or a string when shell is True. A string
            without shell is split on whitespace.
        app_settings: Settings providing logging symbols.
        check: Raise CalledProcessError on a non-zero exit code.
        shell: Run through the shell.
        capture_output: Capture stdout and stderr; both are logged at DEBUG.
        text: Treat the streams as text.
        cmd_input: Data written to the command's stdin. Never logged.
        current_logger: Logger to use.
        cwd: Working directory for the command.
        env: Environment for the command.
        log_input: When False only the program name is logged, for command
            lines that carry secrets.

    Raises:
        subprocess.CalledProcessError: On non-zero exit when check is True.
        FileNotFoundError: If the executable is not found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    if shell:
        command_to_run = " ".join(command) if isinstance(command, list) else command
        printable = command_to_run
    elif isinstance(command, str):
        log_provision(
            f"{symbols.get('warning', '!')} Splitting string command '{command}'; pass a list instead.",
            "warning",
            effective_logger,
            app_settings,
        )
        command_to_run = command.split()
        printable = command
    else:
        command_to_run = command
        printable = subprocess.list2cmdline(command)

    if not log_input:
        printable = _mask_command(command_to_run)

    location = f"(in {cwd})" if cwd else ""
    log_provision(
        f"{symbols.get('gear', '⚙️')} Executing: {printable} {location}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command_to_run,
            check=check,
            shell=shell,
            capture_output=capture_output,
            text=text,
            input=cmd_input,
            cwd=cwd,
            env=env,
        )
    except subprocess.CalledProcessError as e:
        log_provision(
            f"{symbols.get('error', '❌')} Command `{printable}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        for label, stream in (("stdout", e.stdout), ("stderr", e.stderr)):
            if _stream_text(stream):
                log_provision(
                    f"   {label}: {_stream_text(stream)}",
                    "error",
                    effective_logger,
                    app_settings,
                )
        if not log_input:
            raise subprocess.CalledProcessError(
                e.returncode, printable, e.output, e.stderr
            ) from None
        raise
    except FileNotFoundError as e:
        log_provision(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Is it installed and on PATH?",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        for label, stream in (("stdout", result.stdout), ("stderr", result.stderr)):
            if _stream_text(stream):
                log_provision(
                    f"   {label}: {_stream_text(stream)}",
                    "debug",
                    effective_logger,
                    app_settings,
                )
    return result


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
    log_input: bool = True,
) -> subprocess.CompletedProcess:
    """
    Executes a command with elevated permissions (sudo when not root).

    Accepts the same arguments as run_command, minus shell mode.
    """
    prefix = _get_elevated_command_prefix()
    elevated_command_list = prefix + list(command)
    return run_command(
        elevated_command_list,
        app_settings,
        check=check,
        shell=False,
        capture_output=capture_output,
        text=True,
        cmd_input=cmd_input,
        current_logger=current_logger,
        cwd=cwd,
        env=env,
        log_input=log_input,
    )


def command_exists(command_name: str) -> bool:
    """
    Check if a command exists in the system's PATH.
    """
    return shutil.which(command_name) is not None
