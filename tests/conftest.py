"""
Shared fixtures for the test suite.
"""
from datetime import datetime, timezone
from typing import List

import pytest

from artifact.builder import ArtifactBuilder
from artifact.layout import PreviewLayout
from config.config_models import ArtifactConfig, LedgerConfig, PipelineConfig
from connector.local_ledger import LOCAL_CONTRACT_ADDRESS, LocalLedger, LocalWallet
from vocabulary.symbol_dictionary import default_dictionary

CONFIG_ENV_VARS = (
    "STORAGE_BACKEND", "IPFS_API_URL", "IPFS_API_TOKEN", "IPFS_GATEWAY_URL", "STORAGE_TIMEOUT",
    "EMOJI_NFT_CONTRACT", "CHAIN_ID", "EXPLORER_URL", "DEFAULT_MINT_PRICE_WEI", "DEFAULT_MAX_SUPPLY",
    "MINT_CONFIRMATION_ATTEMPTS", "MINT_CONFIRMATION_POLL_INTERVAL",
    "ARTIFACT_TITLE_PREFIX", "ARTIFACT_THEME", "ARTIFACT_FOOTER",
    "LOG_DIR", "LOG_LEVEL", "METRICS_PORT", "DICTIONARY_PATH",
)

FIXED_TIME = datetime(2024, 5, 17, 12, 30, 45, 123000, tzinfo=timezone.utc)


class StubRenderer:
    """Records layouts instead of drawing them"""

    def __init__(self, image: bytes = b"\x89PNG\r\n\x1a\nstub"):
        self.image = image
        self.layouts: List[PreviewLayout] = []

    def render(self, layout: PreviewLayout) -> bytes:
        self.layouts.append(layout)
        return self.image


@pytest.fixture(autouse=True)
def clean_config_env(monkeypatch):
    """Keep host environment variables out of config defaults"""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def dictionary():
    return default_dictionary()


@pytest.fixture
def renderer():
    return StubRenderer()


@pytest.fixture
def builder(renderer):
    return ArtifactBuilder(
        renderer=renderer,
        config=ArtifactConfig(theme="light"),
        clock=lambda: FIXED_TIME,
    )


@pytest.fixture
def ledger():
    return LocalLedger(clock=lambda: 1715949045.0)


@pytest.fixture
def wallet(ledger):
    return LocalWallet(ledger)


@pytest.fixture
def pipeline_config():
    return PipelineConfig(confirmation_max_attempts=3, confirmation_poll_interval=0.0)


@pytest.fixture
def ledger_config():
    return LedgerConfig(contract_address=LOCAL_CONTRACT_ADDRESS)
