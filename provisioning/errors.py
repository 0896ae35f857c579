# provisioning/errors.py
# -*- coding: utf-8 -*-
"""
Exceptions raised by the provisioning steps.

Every exception carries the process exit status the run should end with.
"""

import subprocess
from typing import Optional


class ProvisioningError(Exception):
    """Base exception for provisioning failures."""

    def __init__(self, message: str, exit_code: int = 1):
        self.exit_code = exit_code
        super().__init__(message)


class PreflightError(ProvisioningError):
    """The host or invoking identity does not meet the preconditions."""


class KeyMaterialError(ProvisioningError):
    """A pre-staged SSH key file is missing or unreadable."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message, exit_code=1)


class CommandFailedError(ProvisioningError):
    """An underlying OS command failed; its return code becomes the exit code."""

    def __init__(
        self,
        message: str,
        returncode: int,
        original_error: Optional[Exception] = None,
    ):
        self.returncode = returncode
        self.original_error = original_error
        super().__init__(message, exit_code=returncode if returncode > 0 else 1)

    @classmethod
    def from_called_process_error(
        cls, error: subprocess.CalledProcessError
    ) -> "CommandFailedError":
        cmd_str = (
            subprocess.list2cmdline(error.cmd)
            if isinstance(error.cmd, list)
            else str(error.cmd)
        )
        return cls(
            f"Command `{cmd_str}` failed (rc {error.returncode}).",
            returncode=error.returncode,
            original_error=error,
        )


class ConfigFileError(ProvisioningError):
    """An explicitly requested configuration file cannot be used."""

    def __init__(self, message: str, path: str):
        self.path = path
        super().__init__(message, exit_code=1)
