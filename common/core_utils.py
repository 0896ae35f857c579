#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Logging setup shared by the command-line entry point and the provisioning
steps.
"""

import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional

from provisioning.config_models import SYMBOLS_DEFAULT

module_logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(symbol)s %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# log level -> key in the symbols mapping
LEVEL_SYMBOL_KEYS: Dict[int, str] = {
    logging.DEBUG: "debug",
    logging.INFO: "info",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "critical",
}


class SymbolFormatter(logging.Formatter):
    """Formatter exposing a per-level `%(symbol)s` field to the format string."""

    def __init__(
        self,
        fmt: Optional[str] = None,
        datefmt: Optional[str] = None,
        symbols: Optional[Dict[str, str]] = None,
    ):
        super().__init__(fmt, datefmt)
        self.symbols = symbols or SYMBOLS_DEFAULT

    def format(self, record: logging.LogRecord) -> str:
        symbol_key = LEVEL_SYMBOL_KEYS.get(record.levelno)
        record.symbol = self.symbols.get(symbol_key, "") if symbol_key else ""
        return super().format(record)


def setup_logging(
    log_level: int = logging.INFO,
    log_file: Optional[str] = None,
    log_prefix: Optional[str] = None,
    symbols: Optional[Dict[str, str]] = None,
) -> None:
    """
    Route all log records to stdout and, optionally, a log file.

    Replaces any handlers already attached to the root logger, so it can be
    called again once the settings (prefix, symbols) are known. A log file
    that cannot be opened is reported on stderr and skipped.

    Parameters:
    log_level: int
        Level for the root logger.
    log_file: Optional[str]
        File to append to; its parent directory is created.
    log_prefix: Optional[str]
        Text put in front of every line.
    symbols: Optional[Dict[str, str]]
        Per-level symbols for SymbolFormatter.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_file_path = Path(log_file)
        try:
            log_file_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file_path, mode="a"))
        except OSError as e:
            print(
                f"Warning: Could not open log file {log_file}: {e}",
                file=sys.stderr,
            )

    prefix = log_prefix.strip() + " " if log_prefix and log_prefix.strip() else ""
    formatter = SymbolFormatter(
        fmt=prefix + LOG_FORMAT, datefmt=LOG_DATE_FORMAT, symbols=symbols
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    module_logger.debug(
        f"Logging configured. Level: {logging.getLevelName(log_level)}."
    )
