# provisioning/ssh_bootstrap.py
# -*- coding: utf-8 -*-
"""
Installation of the SSH key pair and client configuration for the account.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)


def _install_ssh_files(
    user_state: SystemState, app_settings: AppSettings
) -> None:
    ssh = app_settings.ssh
    ssh_dir = app_settings.ssh_dir

    user_state.make_directory(ssh_dir)
    user_state.copy_file(
        ssh.public_key_source, f"{ssh_dir}/{ssh.authorized_keys_name}"
    )
    user_state.copy_file(
        ssh.private_key_source,
        f"{ssh_dir}/{ssh.private_key_name}",
        umask=ssh.private_key_umask,
    )
    user_state.write_file(
        f"{ssh_dir}/{ssh.config_name}",
        app_settings.render_ssh_client_config(),
        umask=ssh.private_key_umask,
    )


def bootstrap_ssh(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    As the new account: create ~/.ssh, install the public key as
    authorized_keys, then copy the private key and write the non-interactive
    client configuration, both under the restrictive umask.

    A failure part way leaves the files written so far in place.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    username = app_settings.username

    log_message(
        f"{symbols.get('key', '🔑')} Installing SSH key pair for {username} in {app_settings.ssh_dir}...",
        "info",
        logger_to_use,
        app_settings,
    )
    state.run_as(
        username, lambda user_state: _install_ssh_files(user_state, app_settings)
    )
    log_message(
        f"{symbols.get('success', '✅')} SSH key pair and client configuration installed for {username}.",
        "success",
        logger_to_use,
        app_settings,
    )
