# provisioning/status.py
# -*- coding: utf-8 -*-
"""
Read-only report on how far an account has been provisioned.
"""

import logging
from typing import Dict, Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings
from provisioning.user_check import registry_contains_user

module_logger = logging.getLogger(__name__)


def collect_status(
    state: SystemState, app_settings: AppSettings
) -> Dict[str, bool]:
    """
    Return one boolean per provisioning outcome, keyed by a short label.
    Unreadable files count as not provisioned.
    """
    username = app_settings.username
    ssh = app_settings.ssh
    status: Dict[str, bool] = {}

    status["account"] = registry_contains_user(
        state.read_user_registry(), username, "exact"
    )
    groups = state.user_groups(username) if status["account"] else []
    for group in app_settings.groups:
        status[f"group:{group}"] = group in groups

    try:
        sudoers_lines = state.read_text(app_settings.sudoers_path).splitlines()
    except OSError:
        sudoers_lines = []
    status["sudoers"] = app_settings.sudoers_rule in (
        line.strip() for line in sudoers_lines
    )

    for name in (ssh.authorized_keys_name, ssh.private_key_name, ssh.config_name):
        status[f"ssh:{name}"] = state.path_exists(
            f"{app_settings.ssh_dir}/{name}"
        )
    return status


def report_status(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> int:
    """Log the status of each outcome. Returns 0 if all are in place, else 1."""
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    status = collect_status(state, app_settings)
    for label, present in status.items():
        if present:
            log_message(
                f"{symbols.get('success', '✅')} {label}",
                "info",
                logger_to_use,
                app_settings,
            )
        else:
            log_message(
                f"{symbols.get('warning', '⚠️')} {label} missing",
                "warning",
                logger_to_use,
                app_settings,
            )
    return 0 if all(status.values()) else 1
