# provisioning/preflight.py
# -*- coding: utf-8 -*-
"""
Preflight checks run before anything on the host is touched.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings
from provisioning.errors import PreflightError

module_logger = logging.getLogger(__name__)

REQUIRED_OS = "Linux"
REQUIRED_USER = "root"


def validate_environment(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Ensure the host runs Linux and the effective user is root.

    Raises:
        PreflightError: With exit code 1 when either condition fails.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    os_name = state.os_name()
    if os_name != REQUIRED_OS:
        raise PreflightError(
            f"Unsupported operating system '{os_name}'; {REQUIRED_OS} is required."
        )

    username = state.effective_username()
    if username != REQUIRED_USER:
        raise PreflightError(
            f"Running as '{username}'; this must be run as {REQUIRED_USER}."
        )

    log_message(
        f"{symbols.get('success', '✅')} Preflight passed: {os_name} host, running as {username}.",
        "success",
        logger_to_use,
        app_settings,
    )
