#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup shared by both provisioning flows.

Every record carries a level symbol and, optionally, a fixed prefix such as
[STACK-SETUP], so console output and the SOGo log file read the same.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from setup.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
PROVISION_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"

# logging level -> key in the symbols map
LEVEL_SYMBOL_KEYS: Dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class SymbolFormatter(logging.Formatter):
    """
    Formatter exposing %(symbol)s, the configured symbol for the record's level.
    """

    def __init__(self, fmt=None, datefmt=None, symbols=None):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record):
        key = LEVEL_SYMBOL_KEYS.get(record.levelno)
        record.symbol = self.symbols.get(key, "") if key else ""
        return super().format(record)


def _build_format(log_format_str: Optional[str], log_prefix: Optional[str]) -> str:
    prefix = f"{log_prefix.strip()} " if log_prefix and log_prefix.strip() else ""
    # the prefix is literal text inside a %-style format
    prefix = prefix.replace("%", "%%")
    base = log_format_str or PROVISION_LOG_FORMAT
    if "{log_prefix}" in base:
        return base.format(log_prefix=prefix)
    return prefix + base


def _open_log_file(log_file: str) -> Optional[logging.Handler]:
    """Returns an appending file handler, or None if the file cannot be opened."""
    path = Path(log_file)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        return logging.FileHandler(path, mode="a", encoding="utf-8")
    except OSError as e:
        print(f"Warning: cannot log to {log_file}: {e}", file=sys.stderr)
        return None


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_to_console: bool = True,
    log_format_str: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Configures the root logger, replacing any handlers it already has.

    Args:
        log_level: Root logger level.
        log_file: Log file appended to across runs. Parent directories are
            created as needed.
        log_to_console: Also log to stdout.
        log_format_str: Custom format; may contain a {log_prefix} placeholder.
        log_prefix: Text put in front of every line.
        symbols: Level symbol map for %(symbol)s; defaults to SYMBOLS_DEFAULT.
    """
    handlers: List[logging.Handler] = []
    if log_file:
        file_handler = _open_log_file(log_file)
        if file_handler:
            handlers.append(file_handler)
    if log_to_console or not handlers:
        handlers.append(logging.StreamHandler(sys.stdout))

    final_format = _build_format(log_format_str, log_prefix)
    formatter = SymbolFormatter(
        fmt=final_format, datefmt=LOG_DATE_FORMAT, symbols=symbols
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured at {logging.getLevelName(log_level)} with format '{final_format}'"
    )
