# provisioning/key_material.py
# -*- coding: utf-8 -*-
"""
Gate on the pre-staged SSH key files.
"""

import logging
from typing import Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings
from provisioning.errors import KeyMaterialError

module_logger = logging.getLogger(__name__)


def verify_key_material(
    state: SystemState,
    app_settings: AppSettings,
    current_logger: Optional[logging.Logger] = None,
) -> None:
    """
    Require both key sources to exist and be readable.

    Raises:
        KeyMaterialError: For the first path that fails the check.
    """
    logger_to_use = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)

    for label, path in (
        ("private key", app_settings.ssh.private_key_source),
        ("public key", app_settings.ssh.public_key_source),
    ):
        if not state.is_readable(path):
            raise KeyMaterialError(
                f"SSH {label} {path} is missing or unreadable.", path
            )
        log_message(
            f"{symbols.get('key', '🔑')} Found {label}: {path}",
            "debug",
            logger_to_use,
            app_settings,
        )
