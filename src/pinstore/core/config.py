# src/pinstore/core/config.py
"""
Configuration schema and loading for the pinstore service.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_GRPC_PORT = 9093
DEFAULT_BLOCKFROST_BASE_URL = "https://ipfs.blockfrost.io/api/v0"
DEFAULT_GATEWAY_URL = "https://ipfs.blockfrost.dev/ipfs"
# Large media uploads travel in a single unary message
DEFAULT_MAX_MESSAGE_BYTES = 150 * 1024 * 1024

ENV_PREFIX = "PINSTORE"

# Unprefixed names read by earlier deployments of this service
LEGACY_ENV_VARS: dict[str, str] = {
    "BLOCKFROST_IPFS_PROJECT_ID": "PINSTORE_BLOCKFROST_PROJECT_ID",
    "GRPC_PORT": "PINSTORE_GRPC_PORT",
    "IPFS_GATEWAY_URL": "PINSTORE_GATEWAY_URL",
}


class ServiceSettings(BaseModel):
    """Top-level pinstore service configuration.

    The presence of ``blockfrost_project_id`` selects the remote Blockfrost
    backend; without it the service runs in mock mode on process memory.

    Example YAML:
        grpc_port: 9093
        blockfrost_project_id: ipfsAbC123
        gateway_url: https://ipfs.blockfrost.dev/ipfs
        log_json: true
    """

    model_config = {"frozen": True}

    grpc_port: int = Field(
        default=DEFAULT_GRPC_PORT,
        ge=0,
        le=65535,
        description="gRPC listen port (0 binds an ephemeral port)",
    )
    blockfrost_project_id: str | None = Field(
        default=None,
        description="Blockfrost IPFS project credential; unset selects mock mode",
    )
    blockfrost_base_url: str = Field(
        default=DEFAULT_BLOCKFROST_BASE_URL,
        description="Blockfrost IPFS API base URL",
    )
    gateway_url: str = Field(
        default=DEFAULT_GATEWAY_URL,
        description="Public gateway base used for fetches and gateway URLs",
    )
    request_timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        description="Upper bound on any single remote HTTP call",
    )
    max_message_bytes: int = Field(
        default=DEFAULT_MAX_MESSAGE_BYTES,
        gt=0,
        description="Maximum gRPC send/receive message size",
    )
    max_workers: int = Field(
        default=10,
        gt=0,
        description="Worker threads serving concurrent RPCs",
    )
    shutdown_grace_seconds: float = Field(
        default=5.0,
        ge=0,
        description="Time in-flight RPCs get to finish on shutdown",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_json: bool = False

    @field_validator("blockfrost_project_id", mode="before")
    @classmethod
    def normalize_project_id(cls, v: Any) -> str | None:
        """Blank credentials mean "not configured"; numeric env values become strings."""
        if v is None:
            return None
        text = str(v).strip()
        return text or None

    @field_validator("blockfrost_base_url", "gateway_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"must be an http(s) URL, got {v!r}")
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @property
    def use_remote_backend(self) -> bool:
        """Whether Blockfrost credentials are configured."""
        return self.blockfrost_project_id is not None


def load_settings(config_path: Path | None = None) -> ServiceSettings:
    """Load settings from an optional file with environment variable overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (PINSTORE_*) - highest priority
    2. Config file (YAML/TOML), when given
    3. Defaults from Pydantic schema - lowest priority

    Args:
        config_path: Optional path to a settings file

    Returns:
        Validated ServiceSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix=ENV_PREFIX,
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
    )

    # Dynaconf returns uppercase keys and mixes in its own settings
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return ServiceSettings(**raw_config)


def redacted_settings(settings: ServiceSettings) -> dict[str, Any]:
    """Settings as a JSON-safe dict with the project credential masked.

    Safe to log at startup; never use the result to build clients.
    """
    config_dict = settings.model_dump(mode="json")
    if config_dict["blockfrost_project_id"] is not None:
        config_dict["blockfrost_project_id"] = "***"
    return config_dict


def ignored_legacy_env(environ: Mapping[str, str] | None = None) -> dict[str, str]:
    """Legacy variables that are set while their PINSTORE_* replacement is not.

    load_settings never reads these; the caller should warn so an operator
    carrying an old environment does not silently fall back to mock mode.

    Returns:
        Mapping of legacy name -> variable load_settings actually reads
    """
    env = os.environ if environ is None else environ
    return {old: new for old, new in LEGACY_ENV_VARS.items() if env.get(old) and new not in env}
