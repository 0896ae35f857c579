# provisioning/account.py
# -*- coding: utf-8 -*-
"""
Creation of the service account and its administrative privileges.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def provision_account(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Create the account, add it to the configured groups and append an
    unrestricted NOPASSWD rule to the sudoers file.

    Command failures propagate unchanged; nothing already done is undone.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    username = app_settings.username

    log_message(
        f"{symbols.get('user', '👤')} Creating user {username}...",
        "info",
        logger_to_use,
        app_settings,
    )
    state.create_user(username)

    for group in app_settings.groups:
        state.add_user_to_group(username, group)

    state.append_line(app_settings.sudoers_path, app_settings.sudoers_rule)

    identity = state.describe_user(username)
    if identity:
        log_message(
            f"   {identity}",
            "info",
            logger_to_use,
            app_settings,
        )
    log_message(
        f"{symbols.get('success', '✅')} User {username} created with groups: {', '.join(app_settings.groups) or 'none'}.",
        "success",
        logger_to_use,
        app_settings,
    )
