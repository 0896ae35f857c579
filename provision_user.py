#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Entry point for the solana user provisioner.

Run as root with no arguments to create the account, grant it password-less
sudo and install the pre-staged SSH key pair.
"""

import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from common.core_utils import setup_logging
from common.system_state import build_system_state
from provisioning.config_loader import load_app_settings
from provisioning.errors import ConfigFileError
from provisioning.orchestrator import ProvisioningOrchestrator
from provisioning.status import report_status

logger = logging.getLogger("user_provisioner")


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="Create the solana service account and install its SSH key pair."
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument(
        "--config",
        default=None,
        help="YAML configuration file applied over the built-in defaults",
    )
    parser.add_argument(
        "--log-file", default=None, help="Also append log output to this file"
    )
    parser.add_argument(
        "--username", default=None, help="Account to provision"
    )
    parser.add_argument(
        "--match-mode",
        choices=["exact", "substring"],
        default=None,
        help="How an existing account is detected in the user registry",
    )
    mode_group = parser.add_mutually_exclusive_group()
    mode_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Log the actions that would be taken without changing the host",
    )
    mode_group.add_argument(
        "--status",
        action="store_true",
        help="Report what is already provisioned and exit",
    )
    return parser.parse_args(args)


def main(args: Optional[List[str]] = None) -> int:
    parsed_args = parse_args(args)

    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=parsed_args.log_file,
    )

    try:
        app_settings = load_app_settings(
            parsed_args, parsed_args.config, current_logger=logger
        )
    except ConfigFileError as e:
        logger.error(str(e))
        return e.exit_code
    except ValidationError as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    setup_logging(
        log_level=logging.DEBUG if parsed_args.verbose else logging.INFO,
        log_file=parsed_args.log_file,
        log_prefix=app_settings.log_prefix,
        symbols=app_settings.symbols,
    )

    state = build_system_state(app_settings, logger)

    try:
        if parsed_args.status:
            return report_status(state, app_settings, logger)
        return ProvisioningOrchestrator(state, app_settings, logger).run()
    except Exception as e:
        action = "status check" if parsed_args.status else "provisioning"
        logger.critical(f"Unexpected error during {action}: {e}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
