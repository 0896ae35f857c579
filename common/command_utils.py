# common/command_utils.py
# -*- coding: utf-8 -*-
"""
Utilities for executing system commands and logging their output.

Commands are always given as argument lists and never go through a shell.
"""

import logging
import os
import subprocess
from typing import Any, Dict, List, Optional

from provisioning.config_models import SYMBOLS_DEFAULT, AppSettings

module_logger = logging.getLogger(__name__)

# message level -> Logger method; "success" is an INFO message with its own symbol
_LEVEL_METHODS: Dict[str, str] = {
    "debug": "debug",
    "info": "info",
    "success": "info",
    "warning": "warning",
    "error": "error",
    "critical": "critical",
}


def get_symbols(app_settings: Optional[AppSettings]) -> Dict[str, str]:
    """Return the log symbols of `app_settings`, or the defaults."""
    return (
        app_settings.symbols
        if app_settings and app_settings.symbols
        else SYMBOLS_DEFAULT
    )


def log_message(
    message: str,
    level: str = "info",
    current_logger: Optional[logging.Logger] = None,
    app_settings: Optional[AppSettings] = None,
    exc_info: bool = False,
) -> None:
    """
    Logs a provisioner message at the given level.

    Args:
        message (str): The log message to be recorded.
        level (str): One of "debug", "info", "success", "warning", "error"
            or "critical". Unknown levels are logged at INFO.
        current_logger (Optional[logging.Logger]): Logger to use. Defaults to
            the module logger.
        app_settings (Optional[AppSettings]): Provisioner settings of the
            caller.
        exc_info (bool): Include exception details in the record.
    """
    effective_logger = current_logger if current_logger else module_logger
    method_name = _LEVEL_METHODS.get(level, "info")
    getattr(effective_logger, method_name)(message, exc_info=exc_info)


def _log_streams(
    result: Any,
    level: str,
    current_logger: logging.Logger,
    app_settings: Optional[AppSettings],
) -> None:
    for stream_name in ("stdout", "stderr"):
        output = getattr(result, stream_name, None)
        if output and hasattr(output, "strip") and output.strip():
            log_message(
                f"   {stream_name}: {output.strip()}",
                level,
                current_logger,
                app_settings,
            )


def _get_elevated_command_prefix() -> List[str]:
    """Returns ["sudo"] when the process is not root, otherwise []."""
    return [] if os.geteuid() == 0 else ["sudo"]


def run_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    umask: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """
    Run `command` to completion and log what happened.

    Args:
        command (List[str]): Executable and arguments.
        app_settings (Optional[AppSettings]): Provisioner settings, used for
            logging symbols.
        check (bool): Raise CalledProcessError on a non-zero exit code.
        capture_output (bool): Capture stdout and stderr as text; both are
            logged.
        cmd_input (Optional[str]): Text written to the command's stdin.
        current_logger (Optional[logging.Logger]): Logger to use.
        umask (Optional[int]): Umask set in the child before exec.

    Returns:
        subprocess.CompletedProcess: The completed process.

    Raises:
        subprocess.CalledProcessError: Non-zero exit code with `check=True`,
            after the failure and any captured output have been logged.
        FileNotFoundError: The executable was not found.
    """
    effective_logger = current_logger if current_logger else module_logger
    symbols = get_symbols(app_settings)
    command_str = subprocess.list2cmdline(command)

    run_kwargs: Dict[str, Any] = {}
    umask_info = ""
    if umask is not None:
        run_kwargs["umask"] = umask
        umask_info = f" (umask {umask:04o})"

    log_message(
        f"{symbols.get('gear', '⚙️')} Executing: {command_str}{umask_info}",
        "info",
        effective_logger,
        app_settings,
    )
    try:
        result = subprocess.run(
            command,
            check=check,
            capture_output=capture_output,
            text=True,
            input=cmd_input,
            **run_kwargs,
        )
    except subprocess.CalledProcessError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command `{command_str}` failed (rc {e.returncode}).",
            "error",
            effective_logger,
            app_settings,
        )
        _log_streams(e, "error", effective_logger, app_settings)
        raise
    except FileNotFoundError as e:
        log_message(
            f"{symbols.get('error', '❌')} Command not found: {e.filename}. Ensure it's installed and in PATH.",
            "error",
            effective_logger,
            app_settings,
        )
        raise

    if capture_output:
        _log_streams(result, "info", effective_logger, app_settings)
    return result


def run_elevated_command(
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> subprocess.CompletedProcess:
    """
    Run `command` as root, prefixing it with sudo when the process is not
    already root. See `run_command` for the arguments.
    """
    return run_command(
        _get_elevated_command_prefix() + list(command),
        app_settings,
        check=check,
        capture_output=capture_output,
        cmd_input=cmd_input,
        current_logger=current_logger,
    )


def run_command_as_user(
    username: str,
    command: List[str],
    app_settings: Optional[AppSettings],
    check: bool = True,
    capture_output: bool = False,
    cmd_input: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
    umask: Optional[int] = None,
) -> subprocess.CompletedProcess:
    """
    Run `command` as another account via `sudo -u <user> -H --`.

    The command gets the target account's identity and HOME, so files it
    creates are owned by that account. `umask` is applied to the sudo
    process; sudo combines it with its own default, which only ever removes
    further permission bits.
    """
    return run_command(
        ["sudo", "-u", username, "-H", "--"] + list(command),
        app_settings,
        check=check,
        capture_output=capture_output,
        cmd_input=cmd_input,
        current_logger=current_logger,
        umask=umask,
    )
