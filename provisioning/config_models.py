# provisioning/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for provisioner configuration.

This module defines the structured settings for the user provisioner,
including defaults, type annotations, and descriptions.
It utilizes Pydantic for data validation and settings management.
"""

from typing import Dict, List, Literal, Tuple, Type

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

# --- Default Static Values (can be overridden by config file/env/cli) ---
USERNAME_DEFAULT: str = "solana"
GROUPS_DEFAULT: List[str] = ["sudo", "adm"]
PASSWD_PATH_DEFAULT: str = "/etc/passwd"
SUDOERS_PATH_DEFAULT: str = "/etc/sudoers"
HOME_BASE_DIR_DEFAULT: str = "/home"
LOG_PREFIX_DEFAULT: str = "[USER-PROVISION]"

PRIVATE_KEY_SOURCE_DEFAULT: str = "/solana-id_ecdsa"
PUBLIC_KEY_SOURCE_DEFAULT: str = "/solana-id_ecdsa.pub"
PRIVATE_KEY_NAME_DEFAULT: str = "id_ecdsa"
AUTHORIZED_KEYS_NAME_DEFAULT: str = "authorized_keys"
SSH_CONFIG_NAME_DEFAULT: str = "config"
PRIVATE_KEY_UMASK_DEFAULT: int = 0o377

SUDOERS_RULE_TEMPLATE_DEFAULT: str = "{username} ALL=(ALL) NOPASSWD:ALL"

SSH_CLIENT_CONFIG_TEMPLATE_DEFAULT: str = """\
Host *
    BatchMode yes
    IdentityFile ~/.ssh/{private_key_name}
    StrictHostKeyChecking no
"""

SYMBOLS_DEFAULT: Dict[str, str] = {
    "success": "✅",
    "error": "❌",
    "warning": "⚠️",
    "info": "ℹ️",
    "step": "➡️",
    "gear": "⚙️",
    "key": "🔑",
    "user": "👤",
    "rocket": "🚀",
    "critical": "🔥",
    "debug": "🐛",
}


class SshSettings(BaseModel):
    """SSH key material and client configuration settings."""

    private_key_source: str = Field(
        default=PRIVATE_KEY_SOURCE_DEFAULT,
        description="Pre-staged private key copied into the account.",
    )
    public_key_source: str = Field(
        default=PUBLIC_KEY_SOURCE_DEFAULT,
        description="Pre-staged public key installed as authorized_keys.",
    )
    private_key_name: str = Field(
        default=PRIVATE_KEY_NAME_DEFAULT,
        description="File name of the private key inside ~/.ssh.",
    )
    authorized_keys_name: str = Field(
        default=AUTHORIZED_KEYS_NAME_DEFAULT,
        description="File name of the authorized keys file inside ~/.ssh.",
    )
    config_name: str = Field(
        default=SSH_CONFIG_NAME_DEFAULT,
        description="File name of the SSH client configuration inside ~/.ssh.",
    )
    private_key_umask: int = Field(
        default=PRIVATE_KEY_UMASK_DEFAULT,
        ge=0,
        le=0o777,
        description="Umask applied while installing the private key and the client configuration.",
    )
    client_config_template: str = Field(
        default=SSH_CLIENT_CONFIG_TEMPLATE_DEFAULT,
        description="Template for ~/.ssh/config. Supports placeholders {private_key_name} and {username}.",
    )


class AppSettings(BaseSettings):
    """Main provisioner settings."""

    model_config = SettingsConfigDict(extra="ignore")

    username: str = Field(
        default=USERNAME_DEFAULT, description="Service account to create."
    )
    groups: List[str] = Field(
        default_factory=lambda: list(GROUPS_DEFAULT),
        description="Supplementary groups the account is added to.",
    )
    passwd_path: str = Field(
        default=PASSWD_PATH_DEFAULT,
        description="User registry consulted by the idempotency check.",
    )
    sudoers_path: str = Field(
        default=SUDOERS_PATH_DEFAULT,
        description="Sudoers file the NOPASSWD rule is appended to.",
    )
    sudoers_rule_template: str = Field(
        default=SUDOERS_RULE_TEMPLATE_DEFAULT,
        description="Template for the appended sudoers line. Supports placeholder {username}.",
    )
    home_base_dir: str = Field(
        default=HOME_BASE_DIR_DEFAULT,
        description="Parent directory of the account's home directory.",
    )
    user_match_mode: Literal["exact", "substring"] = Field(
        default="exact",
        description="How an existing account is detected in the user registry. "
        "'substring' reproduces the legacy grep behaviour.",
    )
    dry_run: bool = Field(
        default=False,
        description="Log planned mutations instead of executing them.",
    )
    log_prefix: str = Field(
        default=LOG_PREFIX_DEFAULT,
        description="Prefix for log messages from the provisioner.",
    )

    ssh: SshSettings = Field(default_factory=SshSettings)

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        # Only explicit values (config file, CLI); no environment or .env.
        return (init_settings,)

    @field_validator("username")
    @classmethod
    def _username_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value or ":" in value or "/" in value:
            raise ValueError(f"Invalid username: {value!r}")
        return value

    @property
    def home_dir(self) -> str:
        return f"{self.home_base_dir.rstrip('/')}/{self.username}"

    @property
    def ssh_dir(self) -> str:
        return f"{self.home_dir}/.ssh"

    @property
    def sudoers_rule(self) -> str:
        return self.sudoers_rule_template.format(username=self.username)

    def render_ssh_client_config(self) -> str:
        return self.ssh.client_config_template.format(
            private_key_name=self.ssh.private_key_name,
            username=self.username,
        )
