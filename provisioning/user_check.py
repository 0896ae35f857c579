# provisioning/user_check.py
# -*- coding: utf-8 -*-
"""
Detection of an already provisioned account.
"""

import logging
from typing import Iterable, Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def registry_contains_user(
    registry_lines: Iterable[str], username: str, match_mode: str = "exact"
) -> bool:
    """
    Check passwd-format lines for `username`.

    In "exact" mode only the first `:`-separated field is compared. In
    "substring" mode any line containing the name matches, so "solana2"
    (or a home directory mentioning "solana") counts as "solana".
    """
    for line in registry_lines:
        if match_mode == "substring":
            if username in line:
                return True
        elif line.split(":", 1)[0] == username:
            return True
    return False


def user_exists(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> bool:
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    found = registry_contains_user(
        state.read_user_registry(),
        app_settings.username,
        app_settings.user_match_mode,
    )
    if found:
        log_message(
            f"{symbols.get('info', 'ℹ️')} User {app_settings.username} already exists",
            "info",
            logger_to_use,
            app_settings,
        )
    else:
        log_message(
            f"User {app_settings.username} not found in {app_settings.passwd_path} ({app_settings.user_match_mode} match).",
            "debug",
            logger_to_use,
            app_settings,
        )
    return found
