# provisioning/config_loader.py
# -*- coding: utf-8 -*-
"""
Configuration loader for the provisioner.

Settings are resolved in this order of precedence:
1. Pydantic Model Defaults
2. YAML Configuration File, only when one is named explicitly
3. Command-Line Arguments

Nothing is read from the environment or the working directory, so a plain
run always provisions the built-in defaults.
"""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .config_models import AppSettings
from .errors import ConfigFileError

module_logger = logging.getLogger(__name__)

# CLI dest -> settings key
CLI_SETTING_KEYS: Dict[str, str] = {
    "username": "username",
    "match_mode": "user_match_mode",
    "dry_run": "dry_run",
}


def _deep_update(
    source: Dict[str, Any], overrides: Dict[str, Any]
) -> Dict[str, Any]:
    """
    Recursively updates a dictionary `source` with values from `overrides`.
    Nested dictionaries are merged; None values never replace existing keys.

    Parameters:
        source: Dict[str, Any]
            The dictionary to be updated. It is modified in place.
        overrides: Dict[str, Any]
            The dictionary containing values to update or add to `source`.

    Returns:
        Dict[str, Any]: The updated `source` dictionary.
    """
    for key, value in overrides.items():
        if (
            isinstance(value, dict)
            and key in source
            and isinstance(source[key], dict)
        ):
            source[key] = _deep_update(source[key], value)
        elif value is not None:
            source[key] = value
    return source


def _read_yaml_config(
    yaml_config_path: Path, logger_to_use: logging.Logger
) -> Dict[str, Any]:
    """
    Read a YAML mapping from `yaml_config_path`.

    Raises:
        ConfigFileError: The file is missing, unreadable, not valid YAML,
            or does not hold a mapping.
    """
    if not yaml_config_path.is_file():
        raise ConfigFileError(
            f"Configuration file '{yaml_config_path}' not found.",
            str(yaml_config_path),
        )
    try:
        with open(yaml_config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError(
            f"Could not parse YAML config file '{yaml_config_path}': {e}",
            str(yaml_config_path),
        ) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigFileError(
            f"Could not read config file '{yaml_config_path}': {e}",
            str(yaml_config_path),
        ) from e

    if yaml_data is None:
        yaml_data = {}
    if not isinstance(yaml_data, dict):
        raise ConfigFileError(
            f"Config file '{yaml_config_path}' does not contain a YAML mapping.",
            str(yaml_config_path),
        )
    logger_to_use.info(f"Loaded configuration from {yaml_config_path}")
    return yaml_data


def load_app_settings(
    cli_args: Optional[argparse.Namespace] = None,
    config_file_path: Optional[str] = None,
    current_logger: Optional[logging.Logger] = None,
) -> AppSettings:
    """
    Resolve the provisioner settings.

    Args:
        cli_args: Parsed command-line arguments (from argparse).
        config_file_path: YAML file to apply over the defaults. None means
            no file is read.
        current_logger: Optional logger to use instead of the module logger.

    Returns:
        An instance of AppSettings with the fully resolved configuration.

    Raises:
        ConfigFileError: `config_file_path` was given but cannot be used.
        pydantic.ValidationError: If the merged values do not validate.
    """
    logger_to_use = current_logger if current_logger else module_logger

    current_values_dict = AppSettings().model_dump(exclude_defaults=False)

    if config_file_path is not None:
        yaml_data = _read_yaml_config(Path(config_file_path), logger_to_use)
        current_values_dict = _deep_update(current_values_dict, yaml_data)

    if cli_args:
        mapped_cli_values: Dict[str, Any] = {}
        for cli_key, cli_value in vars(cli_args).items():
            setting_key = CLI_SETTING_KEYS.get(cli_key)
            if setting_key is None or cli_value is None:
                continue
            # store_true flags only override when actually given
            if cli_value is False and isinstance(
                current_values_dict.get(setting_key), bool
            ):
                continue
            mapped_cli_values[setting_key] = cli_value
        current_values_dict = _deep_update(
            current_values_dict, mapped_cli_values
        )

    return AppSettings.model_validate(current_values_dict)
