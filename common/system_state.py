# common/system_state.py
# -*- coding: utf-8 -*-
"""
Access to the host state the provisioner reads and mutates.

`SystemState` is the single seam between the provisioning steps and the
operating system: user registry, group membership, sudoers, and the files
under the new account's home directory. `HostSystemState` performs the
operations with real commands; `DryRunSystemState` logs and records the
mutations instead of executing them while still answering read-only
queries from the host.
"""

import logging
import os
import platform
import pwd
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, List, Optional, TypeVar

from common.command_utils import (
    get_symbols,
    log_message,
    run_command,
    run_command_as_user,
    run_elevated_command,
)
from provisioning.config_models import AppSettings

module_logger = logging.getLogger(__name__)

T = TypeVar("T")


class SystemState(ABC):
    """
    Interface to the operating-system state touched by the provisioner.

    Mutating operations raise `subprocess.CalledProcessError` or
    `FileNotFoundError` when the underlying command fails. Instances
    returned by `run_as` perform file operations as the target account.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        acting_user: Optional[str] = None,
    ):
        self.app_settings = app_settings
        self.logger = logger or logging.getLogger(self.__class__.__name__)
        self.acting_user = acting_user

    # --- read-only queries ---

    def os_name(self) -> str:
        return platform.system()

    def effective_username(self) -> str:
        return pwd.getpwuid(os.geteuid()).pw_name

    def read_user_registry(self) -> List[str]:
        """Return the lines of the user registry (passwd file)."""
        registry_path = Path(self.app_settings.passwd_path)
        return registry_path.read_text(encoding="utf-8").splitlines()

    def is_readable(self, path: str) -> bool:
        return os.path.exists(path) and os.access(path, os.R_OK)

    def path_exists(self, path: str) -> bool:
        return os.path.exists(path)

    def read_text(self, path: str) -> str:
        return Path(path).read_text(encoding="utf-8")

    def user_groups(self, username: str) -> List[str]:
        """Return the group names of `username`, or [] if it is unknown."""
        result = run_command(
            ["id", "-nG", username],
            self.app_settings,
            check=False,
            capture_output=True,
            current_logger=self.logger,
        )
        if result.returncode != 0 or not result.stdout:
            return []
        return result.stdout.split()

    # --- mutations ---

    @abstractmethod
    def create_user(self, username: str) -> None:
        """Create a password-less account with empty GECOS metadata."""

    @abstractmethod
    def add_user_to_group(self, username: str, group: str) -> None:
        """Add an existing account to a supplementary group."""

    @abstractmethod
    def append_line(self, path: str, line: str) -> None:
        """Append a single line to a root-owned file."""

    @abstractmethod
    def describe_user(self, username: str) -> str:
        """Return the `id` output of the account."""

    @abstractmethod
    def make_directory(self, path: str) -> None:
        """Create a directory and any missing parents."""

    @abstractmethod
    def copy_file(
        self, source: str, destination: str, umask: Optional[int] = None
    ) -> None:
        """Copy a file, optionally under a restrictive umask."""

    @abstractmethod
    def write_file(
        self, path: str, content: str, umask: Optional[int] = None
    ) -> None:
        """Write `content` to `path`, optionally under a restrictive umask."""

    @abstractmethod
    def run_as(self, username: str, work: Callable[["SystemState"], T]) -> T:
        """
        Run `work` with a state whose file operations execute as `username`.
        """


class HostSystemState(SystemState):
    """Performs each operation with a real command on this host."""

    def _run_file_command(
        self,
        command: List[str],
        cmd_input: Optional[str] = None,
        umask: Optional[int] = None,
    ) -> None:
        if self.acting_user:
            run_command_as_user(
                self.acting_user,
                command,
                self.app_settings,
                capture_output=True,
                cmd_input=cmd_input,
                current_logger=self.logger,
                umask=umask,
            )
        else:
            run_command(
                command,
                self.app_settings,
                capture_output=True,
                cmd_input=cmd_input,
                current_logger=self.logger,
                umask=umask,
            )

    def create_user(self, username: str) -> None:
        run_elevated_command(
            [
                "adduser",
                username,
                "--gecos",
                "",
                "--disabled-password",
                "--quiet",
            ],
            self.app_settings,
            current_logger=self.logger,
        )

    def add_user_to_group(self, username: str, group: str) -> None:
        run_elevated_command(
            ["adduser", username, group],
            self.app_settings,
            current_logger=self.logger,
        )

    def append_line(self, path: str, line: str) -> None:
        run_elevated_command(
            ["tee", "-a", path],
            self.app_settings,
            capture_output=True,
            cmd_input=line.rstrip("\n") + "\n",
            current_logger=self.logger,
        )

    def describe_user(self, username: str) -> str:
        result = run_command(
            ["id", username],
            self.app_settings,
            capture_output=True,
            current_logger=self.logger,
        )
        return (result.stdout or "").strip()

    def make_directory(self, path: str) -> None:
        self._run_file_command(["mkdir", "-p", path])

    def copy_file(
        self, source: str, destination: str, umask: Optional[int] = None
    ) -> None:
        self._run_file_command(["cp", source, destination], umask=umask)

    def write_file(
        self, path: str, content: str, umask: Optional[int] = None
    ) -> None:
        self._run_file_command(["tee", path], cmd_input=content, umask=umask)

    def run_as(self, username: str, work: Callable[[SystemState], T]) -> T:
        symbols = get_symbols(self.app_settings)
        log_message(
            f"{symbols.get('user', '👤')} Switching to account '{username}'",
            "debug",
            self.logger,
            self.app_settings,
        )
        return work(
            HostSystemState(
                self.app_settings, self.logger, acting_user=username
            )
        )


class DryRunSystemState(SystemState):
    """
    Records and logs each mutation without executing it.

    Read-only queries still consult the host. All scopes created through
    `run_as` share one `planned_actions` list.
    """

    def __init__(
        self,
        app_settings: AppSettings,
        logger: Optional[logging.Logger] = None,
        acting_user: Optional[str] = None,
        planned_actions: Optional[List[str]] = None,
    ):
        super().__init__(app_settings, logger, acting_user)
        self.planned_actions: List[str] = (
            planned_actions if planned_actions is not None else []
        )

    def _plan(self, action: str) -> None:
        if self.acting_user:
            action = f"[as {self.acting_user}] {action}"
        self.planned_actions.append(action)
        log_message(
            f"[dry-run] Would {action}",
            "info",
            self.logger,
            self.app_settings,
        )

    def create_user(self, username: str) -> None:
        self._plan(f"create user '{username}' (no password, empty GECOS)")

    def add_user_to_group(self, username: str, group: str) -> None:
        self._plan(f"add user '{username}' to group '{group}'")

    def append_line(self, path: str, line: str) -> None:
        self._plan(f"append '{line}' to {path}")

    def describe_user(self, username: str) -> str:
        self._plan(f"describe user '{username}'")
        return ""

    def make_directory(self, path: str) -> None:
        self._plan(f"create directory {path}")

    def copy_file(
        self, source: str, destination: str, umask: Optional[int] = None
    ) -> None:
        umask_info = f" with umask {umask:04o}" if umask is not None else ""
        self._plan(f"copy {source} to {destination}{umask_info}")

    def write_file(
        self, path: str, content: str, umask: Optional[int] = None
    ) -> None:
        umask_info = f" with umask {umask:04o}" if umask is not None else ""
        self._plan(f"write {len(content)} bytes to {path}{umask_info}")

    def run_as(self, username: str, work: Callable[[SystemState], T]) -> T:
        return work(
            DryRunSystemState(
                self.app_settings,
                self.logger,
                acting_user=username,
                planned_actions=self.planned_actions,
            )
        )


def build_system_state(
    app_settings: AppSettings, logger: Optional[logging.Logger] = None
) -> SystemState:
    """Return the dry-run or host implementation according to the settings."""
    if app_settings.dry_run:
        return DryRunSystemState(app_settings, logger)
    return HostSystemState(app_settings, logger)
