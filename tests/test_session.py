"""
Tests for MintSession and the contract snapshot.
"""
from unittest.mock import AsyncMock, MagicMock

import pytest

from connector.contract import ContractSnapshot, format_ether, read_contract_snapshot
from connector.local_ledger import LOCAL_ACCOUNT_ADDRESS, LocalLedger
from coordinator.mint_pipeline import MintStatus
from coordinator.session import MintSession
from encoder.emoji_translator import EmojiTranslator
from utils.artifact_store import InMemoryArtifactStore
from utils.constants import ZERO_ADDRESS
from utils.exceptions import FailureStage, UploadError


@pytest.fixture
def session(builder, ledger, wallet, dictionary):
    return MintSession(
        translator=EmojiTranslator(dictionary),
        builder=builder,
        storage=InMemoryArtifactStore(),
        ledger=ledger,
        wallet=wallet,
    )


class TestContractSnapshot:
    """Tests for ContractSnapshot and read_contract_snapshot."""

    def test_format_ether(self):
        assert format_ether(10 ** 15) == "0.001"
        assert format_ether(10 ** 18) == "1"
        assert format_ether(0) == "0"
        assert format_ether(1) == "0.000000000000000001"

    def test_derived_fields(self):
        snapshot = ContractSnapshot("0xabc", mint_price_wei=10 ** 15, total_supply=9998, max_supply=10000)
        assert snapshot.remaining_supply == 2
        assert snapshot.mint_price_display == "0.001"
        assert not snapshot.is_sold_out

    def test_unavailable_fields(self):
        snapshot = ContractSnapshot("0xabc", total_supply=5)
        assert snapshot.remaining_supply is None
        assert snapshot.mint_price_display is None

    @pytest.mark.asyncio
    async def test_reads_are_independent(self):
        ledger = MagicMock()
        ledger.contract_address = "0xabc"
        ledger.read_mint_price = AsyncMock(side_effect=RuntimeError("rpc down"))
        ledger.read_total_supply = AsyncMock(return_value=3)
        ledger.read_max_supply = AsyncMock(return_value=10)

        snapshot = await read_contract_snapshot(ledger)

        assert snapshot.mint_price_wei is None
        assert snapshot.total_supply == 3
        assert snapshot.remaining_supply == 7


class TestMintSession:
    """Tests for MintSession."""

    def test_translate(self, session):
        assert session.translate("CELO").encoded_text == "💚🌳💰🌟"

    @pytest.mark.asyncio
    async def test_refresh_contract_info(self, session):
        snapshot = await session.refresh_contract_info()
        assert session.contract_info is snapshot
        assert snapshot.mint_price_display == "0.001"
        assert snapshot.total_supply == 0
        assert snapshot.remaining_supply == 10000

    @pytest.mark.asyncio
    async def test_refresh_without_contract(self, builder, wallet, dictionary):
        session = MintSession(
            EmojiTranslator(dictionary), builder, InMemoryArtifactStore(),
            LocalLedger(contract_address=ZERO_ADDRESS), wallet,
        )
        assert await session.refresh_contract_info() is None
        assert await session.gallery() == []

    @pytest.mark.asyncio
    async def test_pipeline_gets_snapshot_price(self, session):
        await session.refresh_contract_info()
        assert session.new_pipeline().mint_price_wei == 10 ** 15

    @pytest.mark.asyncio
    async def test_mint_and_refresh(self, session, ledger):
        outcome = await session.mint("hello celo")

        assert outcome.ok
        assert session.contract_info.total_supply == 1
        assert ledger.total_supply == 1

    @pytest.mark.asyncio
    async def test_new_pipeline_after_success(self, session):
        await session.mint("gm")
        first = session.pipeline
        await session.mint("gn")

        assert session.pipeline is not first
        assert first.status is MintStatus.SUCCESS
        assert session.pipeline.status is MintStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_failed_pipeline_is_reused(self, session):
        session.storage.upload = AsyncMock(side_effect=UploadError("offline"))
        failed = await session.mint("gm")
        pipeline = session.pipeline
        assert failed.stage is FailureStage.UPLOAD

        session.storage.upload = AsyncMock(return_value="ipfs://abc")
        retried = await session.mint("gm")

        assert retried.ok
        assert session.pipeline is pipeline

    @pytest.mark.asyncio
    async def test_session_listeners_follow_new_pipelines(self, session):
        seen = []
        session.add_listener(lambda status, pipeline: seen.append((status, pipeline)))

        await session.mint("gm")
        await session.mint("gn")

        pipelines = {pipeline for _, pipeline in seen}
        assert len(pipelines) == 2
        assert [status for status, _ in seen].count(MintStatus.SUCCESS) == 2

    @pytest.mark.asyncio
    async def test_gallery(self, session):
        assert await session.gallery() == []
        await session.mint("hello")
        await session.mint("celo")

        tokens = await session.gallery()

        assert [t.original_text for t in tokens] == ["hello", "celo"]
        assert all(t.owner == LOCAL_ACCOUNT_ADDRESS for t in tokens)
        assert await session.gallery("0x" + "2" * 40) == []

    @pytest.mark.asyncio
    async def test_gallery_read_failure(self, session, ledger):
        await session.mint("hello")
        ledger.read_tokens_batch = AsyncMock(side_effect=RuntimeError("rpc down"))
        assert await session.gallery() is None

    @pytest.mark.asyncio
    async def test_retry_uses_refreshed_price(self, session, ledger):
        await session.refresh_contract_info()
        ledger.mint_price_wei = 2 * 10 ** 15

        failed = await session.mint("gm")
        pipeline = session.pipeline
        assert failed.stage is FailureStage.SIMULATION
        assert failed.reason == "Insufficient payment"

        await session.refresh_contract_info()
        retried = await session.mint("gm")

        assert retried.ok
        assert session.pipeline is pipeline
        assert pipeline.mint_price_wei == 2 * 10 ** 15
        assert ledger.collected_wei == 2 * 10 ** 15
