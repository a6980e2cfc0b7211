"""
Configuration models for the Emoji Mint system.
Uses Pydantic for validation and environment variable support.
"""

import os
import re
from pathlib import Path
from typing import Optional, Union
from pydantic import BaseModel, Field, field_validator
import yaml
import json
from dotenv import load_dotenv

from utils.constants import (
    CONFIRMATION_MAX_ATTEMPTS,
    CONFIRMATION_POLL_INTERVAL,
    DEFAULT_CHAIN_ID,
    DEFAULT_EXPLORER_URL,
    DEFAULT_FOOTER,
    DEFAULT_IPFS_API_URL,
    DEFAULT_IPFS_GATEWAY,
    DEFAULT_MAX_SUPPLY,
    DEFAULT_MINT_PRICE_WEI,
    DEFAULT_TIMEOUT,
    DEFAULT_TITLE_PREFIX,
    ZERO_ADDRESS,
)

# Load environment variables from .env file if present
load_dotenv()

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


def _env(name: str, default: str) -> str:
    return os.environ.get(name, default)


class StorageConfig(BaseModel):
    """Configuration for the content-addressed storage publisher."""
    backend: str = Field(
        default_factory=lambda: _env("STORAGE_BACKEND", "ipfs"),
        description="Storage backend (ipfs, memory)"
    )
    api_url: str = Field(
        default_factory=lambda: _env("IPFS_API_URL", DEFAULT_IPFS_API_URL),
        description="Base URL of the IPFS HTTP API"
    )
    api_token: Optional[str] = Field(
        default_factory=lambda: os.environ.get("IPFS_API_TOKEN") or None,
        description="Bearer token for the storage API"
    )
    gateway_url: str = Field(
        default_factory=lambda: _env("IPFS_GATEWAY_URL", DEFAULT_IPFS_GATEWAY),
        description="HTTP gateway used to display ipfs:// locators"
    )
    timeout: float = Field(
        default_factory=lambda: float(_env("STORAGE_TIMEOUT", str(DEFAULT_TIMEOUT))),
        description="Upload request timeout in seconds"
    )

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v):
        """Validate backend setting."""
        if v not in ["ipfs", "memory"]:
            raise ValueError(f"Storage backend must be one of: ipfs, memory. Got: {v}")
        return v

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("Storage timeout must be positive")
        return v


class LedgerConfig(BaseModel):
    """Configuration for the on-chain contract."""
    contract_address: str = Field(
        default_factory=lambda: _env("EMOJI_NFT_CONTRACT", ZERO_ADDRESS),
        description="Address of the EmojiNFT contract"
    )
    chain_id: int = Field(
        default_factory=lambda: int(_env("CHAIN_ID", str(DEFAULT_CHAIN_ID))),
        description="Chain id of the target network"
    )
    explorer_url: str = Field(
        default_factory=lambda: _env("EXPLORER_URL", DEFAULT_EXPLORER_URL),
        description="Block explorer base URL"
    )
    default_mint_price_wei: int = Field(
        default_factory=lambda: int(_env("DEFAULT_MINT_PRICE_WEI", str(DEFAULT_MINT_PRICE_WEI))),
        description="Mint price used when the on-chain price cannot be read"
    )
    default_max_supply: int = Field(
        default_factory=lambda: int(_env("DEFAULT_MAX_SUPPLY", str(DEFAULT_MAX_SUPPLY))),
        description="Max supply of the local ledger emulator"
    )

    @field_validator("contract_address")
    @classmethod
    def validate_contract_address(cls, v):
        """Validate contract address."""
        if not ADDRESS_PATTERN.match(v):
            raise ValueError(f"Contract address must be a 0x-prefixed 20-byte hex string. Got: {v}")
        return v

    @field_validator("default_mint_price_wei", "default_max_supply")
    @classmethod
    def validate_non_negative(cls, v):
        if v < 0:
            raise ValueError("Value must not be negative")
        return v

    @property
    def is_deployed(self) -> bool:
        return self.contract_address.lower() != ZERO_ADDRESS

    def transaction_url(self, transaction_hash: str) -> str:
        return f"{self.explorer_url.rstrip('/')}/tx/{transaction_hash}"


class PipelineConfig(BaseModel):
    """Configuration for the mint pipeline."""
    confirmation_max_attempts: int = Field(
        default_factory=lambda: int(_env("MINT_CONFIRMATION_ATTEMPTS", str(CONFIRMATION_MAX_ATTEMPTS))),
        description="Receipt polls before the confirmation wait times out"
    )
    confirmation_poll_interval: float = Field(
        default_factory=lambda: float(_env("MINT_CONFIRMATION_POLL_INTERVAL", str(CONFIRMATION_POLL_INTERVAL))),
        description="Seconds each receipt poll may wait"
    )

    @field_validator("confirmation_max_attempts")
    @classmethod
    def validate_attempts(cls, v):
        if v < 1:
            raise ValueError("At least one confirmation attempt is required")
        return v

    @field_validator("confirmation_poll_interval")
    @classmethod
    def validate_interval(cls, v):
        if v < 0:
            raise ValueError("Poll interval must not be negative")
        return v

    @property
    def max_confirmation_wait(self) -> float:
        """Upper bound of the confirmation wait in seconds"""
        return self.confirmation_max_attempts * self.confirmation_poll_interval


class ArtifactConfig(BaseModel):
    """Configuration for artifact metadata and preview."""
    title_prefix: str = Field(
        default_factory=lambda: _env("ARTIFACT_TITLE_PREFIX", DEFAULT_TITLE_PREFIX),
        description="Prefix of the artifact title"
    )
    theme: str = Field(
        default_factory=lambda: _env("ARTIFACT_THEME", "light"),
        description="Default preview theme (light, dark)"
    )
    footer: str = Field(
        default_factory=lambda: _env("ARTIFACT_FOOTER", DEFAULT_FOOTER),
        description="Footer line of the preview image"
    )

    @field_validator("theme")
    @classmethod
    def validate_theme(cls, v):
        """Validate theme setting."""
        v = v.lower()
        if v not in ["light", "dark"]:
            raise ValueError(f"Theme must be one of: light, dark. Got: {v}")
        return v


class MonitoringConfig(BaseModel):
    """Configuration for logging and metrics."""
    log_dir: str = Field(
        default_factory=lambda: _env("LOG_DIR", "logs"),
        description="Directory for log files"
    )
    log_level: str = Field(
        default_factory=lambda: _env("LOG_LEVEL", "INFO"),
        description="Log level"
    )
    metrics_port: Optional[int] = Field(
        default_factory=lambda: int(os.environ["METRICS_PORT"]) if os.environ.get("METRICS_PORT") else None,
        description="Port to expose Prometheus metrics on"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        v = v.upper()
        if v not in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
            raise ValueError(f"Log level must be one of: DEBUG, INFO, WARNING, ERROR, CRITICAL. Got: {v}")
        return v


class SystemConfig(BaseModel):
    """Complete system configuration."""
    dictionary_path: Optional[str] = Field(
        default_factory=lambda: os.environ.get("DICTIONARY_PATH") or None,
        description="Dictionary pack file; the bundled pack is used when unset"
    )
    storage: StorageConfig = Field(default_factory=StorageConfig)
    ledger: LedgerConfig = Field(default_factory=LedgerConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    artifact: ArtifactConfig = Field(default_factory=ArtifactConfig)
    monitoring: MonitoringConfig = Field(default_factory=MonitoringConfig)

    @classmethod
    def from_yaml(cls, file_path: Union[str, Path]) -> "SystemConfig":
        """Load configuration from YAML file."""
        with open(file_path, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f) or {}
        return cls.model_validate(config_dict)

    @classmethod
    def from_json(cls, file_path: Union[str, Path]) -> "SystemConfig":
        """Load configuration from JSON file."""
        with open(file_path, "r", encoding="utf-8") as f:
            config_dict = json.load(f)
        return cls.model_validate(config_dict)

    def to_yaml(self, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        with open(file_path, "w", encoding="utf-8") as f:
            yaml.dump(self.model_dump(), f, default_flow_style=False)

    def to_json(self, file_path: Union[str, Path]) -> None:
        """Save configuration to JSON file."""
        with open(file_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(), f, indent=2)


def load_config(config_path: Optional[Union[str, Path]] = None) -> SystemConfig:
    """
    Load system configuration from file or environment variables.

    Sections missing from the file fall back to their environment-driven
    defaults.

    Args:
        config_path: Path to configuration file (YAML or JSON)

    Returns:
        SystemConfig: Complete system configuration
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        if path.suffix.lower() in [".yaml", ".yml"]:
            return SystemConfig.from_yaml(path)
        elif path.suffix.lower() == ".json":
            return SystemConfig.from_json(path)
        else:
            raise ValueError(f"Unsupported configuration file format: {path.suffix}")

    return SystemConfig()
