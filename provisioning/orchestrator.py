# provisioning/orchestrator.py
# -*- coding: utf-8 -*-
"""
Runs the provisioning steps in order and turns their results into an exit
status.
"""

import logging
from typing import List, Optional, Tuple

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.account import provision_account
from provisioning.config_models import AppSettings
from provisioning.key_material import verify_key_material
from provisioning.preflight import validate_environment
from provisioning.ssh_bootstrap import bootstrap_ssh
from provisioning.step_executor import StepFunction, StepResult, execute_step
from provisioning.user_check import user_exists

# Steps run only when the account does not exist yet.
PROVISIONING_STEPS: List[Tuple[str, str, StepFunction]] = [
    ("ACCOUNT", "Create account and grant sudo", provision_account),
    ("KEY_MATERIAL", "Verify pre-staged SSH keys", verify_key_material),
    ("SSH_BOOTSTRAP", "Install SSH keys and client config", bootstrap_ssh),
]


class ProvisioningOrchestrator:
    """
    Sequences preflight, the idempotency check and the provisioning steps.

    Every step result is inspected; the first failure ends the run with
    that step's exit code.
    """

    def __init__(
        self,
        state: SystemState,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
    ):
        self.state = state
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.results: List[StepResult] = []

    def _execute(
        self, step_tag: str, description: str, step_function: StepFunction
    ) -> StepResult:
        result = execute_step(
            step_tag,
            description,
            step_function,
            self.state,
            self.app_settings,
            self.logger,
        )
        self.results.append(result)
        return result

    def run(self) -> int:
        """Provision the account. Returns the process exit status."""
        symbols = get_symbols(self.app_settings)

        result = self._execute(
            "PREFLIGHT", "Check host and invoking user", validate_environment
        )
        if not result.success:
            return result.exit_code

        result = self._execute(
            "USER_CHECK", "Check for existing account", user_exists
        )
        if not result.success:
            return result.exit_code
        if result.value:
            log_message(
                f"{symbols.get('info', 'ℹ️')} Nothing to do.",
                "info",
                self.logger,
                self.app_settings,
            )
            return 0

        for step_tag, description, step_function in PROVISIONING_STEPS:
            result = self._execute(step_tag, description, step_function)
            if not result.success:
                return result.exit_code

        log_message(
            f"{symbols.get('rocket', '🚀')} User {self.app_settings.username} provisioned.",
            "success",
            self.logger,
            self.app_settings,
        )
        return 0
