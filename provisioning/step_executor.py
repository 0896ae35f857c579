# provisioning/step_executor.py
# -*- coding: utf-8 -*-
"""
Provides functionality to execute individual provisioning steps.

Each step is a callable taking the system state, the settings and a logger.
`execute_step` runs it, converts any failure into a `StepResult` carrying
the exit status, and logs the outcome. Callers inspect the result and stop
at the first failure.
"""

import logging
import subprocess
from dataclasses import dataclass
from typing import Any, Callable, Optional

from common.command_utils import get_symbols, log_message
from common.system_state import SystemState
from provisioning.config_models import AppSettings
from provisioning.errors import CommandFailedError, ProvisioningError

module_logger = logging.getLogger(__name__)

StepFunction = Callable[
    [SystemState, AppSettings, Optional[logging.Logger]], Any
]


@dataclass
class StepResult:
    """Outcome of one provisioning step."""

    step_tag: str
    success: bool
    exit_code: int = 0
    message: str = ""
    value: Any = None


def execute_step(
    step_tag: str,
    step_description: str,
    step_function: StepFunction,
    state: SystemState,
    app_settings: AppSettings,
    current_logger_instance: Optional[logging.Logger] = None,
) -> StepResult:
    """
    Execute a single provisioning step.

    Args:
        step_tag: A unique string identifier for the step.
        step_description: A human-readable description of the step.
        step_function: The function to call. Its return value is kept in
            `StepResult.value`; raising marks the step as failed.
        state: The system state the step operates on.
        app_settings: The provisioner settings.
        current_logger_instance: The logger instance to use.

    Returns:
        A successful StepResult, or a failed one whose `exit_code` is the
        exit status the process should end with.
    """
    logger_to_use = (
        current_logger_instance if current_logger_instance else module_logger
    )
    symbols = get_symbols(app_settings)

    log_message(
        f"--- {symbols.get('step', '➡️')} Executing: {step_description} ({step_tag}) ---",
        "info",
        logger_to_use,
        app_settings,
    )
    try:
        value = step_function(state, app_settings, logger_to_use)
    except subprocess.CalledProcessError as e:
        error: ProvisioningError = CommandFailedError.from_called_process_error(
            e
        )
    except OSError as e:
        error = ProvisioningError(str(e))
    except ProvisioningError as e:
        error = e
    else:
        log_message(
            f"--- {symbols.get('success', '✅')} Completed: {step_description} ({step_tag}) ---",
            "success",
            logger_to_use,
            app_settings,
        )
        return StepResult(step_tag=step_tag, success=True, value=value)

    log_message(
        f"{symbols.get('error', '❌')} FAILED: {step_description} ({step_tag})",
        "error",
        logger_to_use,
        app_settings,
    )
    log_message(
        f"   Error details: {error}",
        "error",
        logger_to_use,
        app_settings,
    )
    return StepResult(
        step_tag=step_tag,
        success=False,
        exit_code=error.exit_code,
        message=str(error),
    )
