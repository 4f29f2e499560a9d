"""
Toolkit settings domain model.

Controls the local PowerShell host, WinRM session parameters, credentials
used when the CLI opens sessions, and logging.
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

from ccmclient.domain.targets import TransportPreference

logger = logging.getLogger(__name__)


class WinRMSettings(BaseModel):
    """
    WinRM session parameters used by PSRemoteClient.

    Timeouts are handed to pywinrm; the execution layer enforces none itself.
    """

    port_http: int = Field(default=5985, ge=1, le=65535, description="WinRM HTTP port")
    port_https: int = Field(default=5986, ge=1, le=65535, description="WinRM HTTPS port")
    verify_ssl: bool = Field(default=True, description="Validate server certificates over HTTPS")
    allow_unverified_https: bool = Field(
        default=True, description="Fall back to HTTPS without certificate validation"
    )
    allow_http: bool = Field(default=True, description="Fall back to plain HTTP (message-encrypted auth only)")
    operation_timeout_sec: int = Field(default=120, ge=5, le=3600, description="WS-Man operation timeout")
    read_timeout_sec: int = Field(default=130, ge=10, le=3700, description="HTTP read timeout")
    max_retries_per_combo: int = Field(default=1, ge=1, le=5, description="Attempts per transport/auth pair")

    @field_validator("read_timeout_sec")
    @classmethod
    def read_exceeds_operation(cls, v: int, info) -> int:
        """pywinrm requires read timeout > operation timeout."""
        operation = info.data.get("operation_timeout_sec", 120)
        if v <= operation:
            logger.warning(
                "read_timeout_sec %s must exceed operation_timeout_sec %s - adjusting", v, operation
            )
            return operation + 10
        return v


class ToolkitSettings(BaseModel):
    """
    Settings for the whole toolkit.

    Loaded from ccmclient.json(c) in the config directory; every field has a
    usable default so a missing file is not an error.
    """

    powershell_executable: str = Field(
        default="powershell.exe", description="Local PowerShell host used for local and CIM calls"
    )
    local_timeout_seconds: Optional[int] = Field(
        default=None, ge=1, description="Timeout for the local PowerShell host; none by default"
    )
    default_preference: Optional[TransportPreference] = Field(
        default=None, description="Transport preference applied when the caller gives none"
    )
    winrm: WinRMSettings = Field(default_factory=WinRMSettings)
    username: Optional[str] = Field(default=None, description="Account for sessions opened by the CLI")
    password: Optional[SecretStr] = Field(default=None, description="Password for `username`")
    password_env: str = Field(
        default="CCMCLIENT_PASSWORD", description="Environment variable consulted when password is unset"
    )
    log_level: str = Field(default="INFO", description="Console log level")
    log_file: Optional[str] = Field(default=None, description="Optional DEBUG log file")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def resolve_password(self) -> Optional[str]:
        """Configured password, else the one from `password_env`."""
        if self.password is not None:
            return self.password.get_secret_value()
        return os.environ.get(self.password_env) or None
