"""
Config package for the Emoji Mint system.

Import from config.config_models for the consolidated SystemConfig and the
load_config helper.
"""
from .config_models import (
    ArtifactConfig,
    LedgerConfig,
    MonitoringConfig,
    PipelineConfig,
    StorageConfig,
    SystemConfig,
    load_config,
)

__all__ = [
    "ArtifactConfig",
    "LedgerConfig",
    "MonitoringConfig",
    "PipelineConfig",
    "StorageConfig",
    "SystemConfig",
    "load_config",
]
