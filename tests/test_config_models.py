"""
Tests for the configuration models.
"""

import os
import pytest
import tempfile
from pathlib import Path
import yaml
import json

from config.config_models import (
    StorageConfig,
    LedgerConfig,
    PipelineConfig,
    ArtifactConfig,
    MonitoringConfig,
    SystemConfig,
    load_config
)
from utils.constants import (
    CONFIRMATION_MAX_ATTEMPTS,
    DEFAULT_IPFS_API_URL,
    DEFAULT_MINT_PRICE_WEI,
    ZERO_ADDRESS,
)

CONTRACT = "0x" + "ab" * 20


class TestStorageConfig:
    """Tests for StorageConfig."""

    def test_default_values(self):
        """Test default values."""
        config = StorageConfig()
        assert config.backend == "ipfs"
        assert config.api_url == DEFAULT_IPFS_API_URL
        assert config.api_token is None
        assert config.timeout > 0

    def test_environment_variables(self, monkeypatch):
        """Test environment variable overrides."""
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        monkeypatch.setenv("IPFS_API_URL", "https://pin.example")
        monkeypatch.setenv("IPFS_API_TOKEN", "token-123")
        monkeypatch.setenv("STORAGE_TIMEOUT", "12.5")

        config = StorageConfig()
        assert config.backend == "memory"
        assert config.api_url == "https://pin.example"
        assert config.api_token == "token-123"
        assert config.timeout == 12.5

    def test_backend_validation(self):
        """Test backend validation."""
        with pytest.raises(ValueError):
            StorageConfig(backend="s3")

        with pytest.raises(ValueError):
            StorageConfig(timeout=0)


class TestLedgerConfig:
    """Tests for LedgerConfig."""

    def test_default_values(self):
        """Test default values."""
        config = LedgerConfig()
        assert config.contract_address == ZERO_ADDRESS
        assert not config.is_deployed
        assert config.default_mint_price_wei == DEFAULT_MINT_PRICE_WEI

    def test_environment_variables(self, monkeypatch):
        """Test environment variable overrides."""
        monkeypatch.setenv("EMOJI_NFT_CONTRACT", CONTRACT)
        monkeypatch.setenv("CHAIN_ID", "42220")
        monkeypatch.setenv("EXPLORER_URL", "https://celoscan.io/")

        config = LedgerConfig()
        assert config.is_deployed
        assert config.chain_id == 42220
        assert config.transaction_url("0xfeed") == "https://celoscan.io/tx/0xfeed"

    def test_contract_address_validation(self):
        """Test contract address validation."""
        with pytest.raises(ValueError):
            LedgerConfig(contract_address="0x1234")

        with pytest.raises(ValueError):
            LedgerConfig(contract_address="ab" * 21)

        with pytest.raises(ValueError):
            LedgerConfig(default_mint_price_wei=-1)


class TestPipelineConfig:
    """Tests for PipelineConfig."""

    def test_default_values(self):
        """Test default values."""
        config = PipelineConfig()
        assert config.confirmation_max_attempts == CONFIRMATION_MAX_ATTEMPTS
        assert config.max_confirmation_wait == config.confirmation_max_attempts * config.confirmation_poll_interval

    def test_validation(self):
        """Test attempt and interval validation."""
        with pytest.raises(ValueError):
            PipelineConfig(confirmation_max_attempts=0)

        with pytest.raises(ValueError):
            PipelineConfig(confirmation_poll_interval=-1.0)


class TestArtifactConfig:
    """Tests for ArtifactConfig."""

    def test_theme_is_normalized(self, monkeypatch):
        monkeypatch.setenv("ARTIFACT_THEME", "DARK")
        assert ArtifactConfig().theme == "dark"

    def test_theme_validation(self):
        with pytest.raises(ValueError):
            ArtifactConfig(theme="sepia")


class TestMonitoringConfig:
    """Tests for MonitoringConfig."""

    def test_default_values(self):
        config = MonitoringConfig()
        assert config.log_dir == "logs"
        assert config.log_level == "INFO"
        assert config.metrics_port is None

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        monkeypatch.setenv("METRICS_PORT", "9100")
        config = MonitoringConfig()
        assert config.log_level == "DEBUG"
        assert config.metrics_port == 9100

    def test_log_level_validation(self):
        with pytest.raises(ValueError):
            MonitoringConfig(log_level="VERBOSE")


class TestSystemConfig:
    """Tests for SystemConfig."""

    def test_default_values(self):
        """Test default values."""
        config = SystemConfig()
        assert config.dictionary_path is None
        assert isinstance(config.storage, StorageConfig)
        assert isinstance(config.ledger, LedgerConfig)
        assert isinstance(config.pipeline, PipelineConfig)

    def test_from_yaml(self):
        """Test loading from YAML."""
        with tempfile.NamedTemporaryFile(suffix=".yaml", delete=False, mode="w") as f:
            yaml.dump({
                "storage": {"backend": "memory"},
                "ledger": {"contract_address": CONTRACT},
            }, f)
            path = f.name

        try:
            config = SystemConfig.from_yaml(path)
            assert config.storage.backend == "memory"
            assert config.ledger.contract_address == CONTRACT
        finally:
            os.unlink(path)

    def test_from_json(self):
        """Test loading from JSON."""
        with tempfile.NamedTemporaryFile(suffix=".json", delete=False, mode="w") as f:
            json.dump({"pipeline": {"confirmation_max_attempts": 5}}, f)
            path = f.name

        try:
            config = SystemConfig.from_json(path)
            assert config.pipeline.confirmation_max_attempts == 5
        finally:
            os.unlink(path)

    def test_yaml_round_trip(self, tmp_path):
        """Test saving to YAML and loading back."""
        config = SystemConfig(artifact=ArtifactConfig(title_prefix="Test Emoji", theme="dark"))
        path = tmp_path / "config.yaml"

        config.to_yaml(path)

        assert SystemConfig.from_yaml(path) == config

    def test_to_json(self, tmp_path):
        """Test saving to JSON."""
        path = tmp_path / "config.json"
        SystemConfig(monitoring=MonitoringConfig(log_level="warning")).to_json(path)

        with open(path, "r") as f:
            data = json.load(f)
        assert data["monitoring"]["log_level"] == "WARNING"


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_from_yaml(self, tmp_path):
        """Test loading from YAML file."""
        path = tmp_path / "config.yml"
        path.write_text(yaml.dump({"artifact": {"footer": "Minted locally"}}), encoding="utf-8")

        config = load_config(path)
        assert config.artifact.footer == "Minted locally"

    def test_missing_sections_use_environment(self, tmp_path, monkeypatch):
        """Sections absent from the file keep their environment defaults."""
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"ledger": {"chain_id": 42220}}), encoding="utf-8")

        config = load_config(str(path))
        assert config.ledger.chain_id == 42220
        assert config.storage.backend == "memory"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_config(path) == SystemConfig()

    def test_load_from_environment(self, monkeypatch):
        """Test loading from environment variables."""
        monkeypatch.setenv("EMOJI_NFT_CONTRACT", CONTRACT)
        config = load_config()
        assert config.ledger.contract_address == CONTRACT

    def test_file_not_found(self):
        """Test file not found error."""
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_unsupported_format(self, tmp_path):
        """Test unsupported file format."""
        path = tmp_path / "config.txt"
        path.write_text("test", encoding="utf-8")
        with pytest.raises(ValueError):
            load_config(Path(path))
