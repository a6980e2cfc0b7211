# coordinator/session.py
"""
Mint session: the translator, the shared contract snapshot and the current
pipeline for one connected wallet.
"""
import logging
from typing import List, Optional

from artifact.builder import ArtifactBuilder
from config.config_models import SystemConfig
from connector.contract import ContractSnapshot, TokenRecord, read_contract_snapshot
from coordinator.mint_pipeline import MintOutcome, MintPipeline, MintStatus, StatusListener
from encoder.emoji_translator import EmojiTranslator, Translation
from utils.interfaces import LedgerClient, StoragePublisher, WalletCapability

logger = logging.getLogger(__name__)


class MintSession:
    """
    Owns the read-only ContractSnapshot and hands out pipelines.

    The snapshot is only changed by refresh_contract_info(); pipelines get the
    snapshot's mint price when one is known.
    """

    def __init__(
        self,
        translator: EmojiTranslator,
        builder: ArtifactBuilder,
        storage: StoragePublisher,
        ledger: LedgerClient,
        wallet: WalletCapability,
        config: Optional[SystemConfig] = None,
    ):
        self.translator = translator
        self.builder = builder
        self.storage = storage
        self.ledger = ledger
        self.wallet = wallet
        self.config = config if config is not None else SystemConfig()
        self._contract_info: Optional[ContractSnapshot] = None
        self._pipeline: Optional[MintPipeline] = None
        self._listeners: List[StatusListener] = []

    @property
    def contract_info(self) -> Optional[ContractSnapshot]:
        return self._contract_info

    @property
    def pipeline(self) -> Optional[MintPipeline]:
        return self._pipeline

    def add_listener(self, listener: StatusListener) -> None:
        """Listen to status changes of every pipeline this session creates"""
        self._listeners.append(listener)
        if self._pipeline is not None:
            self._pipeline.add_listener(listener)

    def translate(self, text: str) -> Translation:
        return self.translator.translate(text)

    async def refresh_contract_info(self) -> Optional[ContractSnapshot]:
        """Re-read price and supply; None when no contract is deployed"""
        if not self.ledger.is_deployed:
            logger.warning("Contract not deployed, no contract info available")
            self._contract_info = None
            return None
        self._contract_info = await read_contract_snapshot(self.ledger)
        logger.info(
            f"Contract info: price={self._contract_info.mint_price_display} "
            f"supply={self._contract_info.total_supply}/{self._contract_info.max_supply}"
        )
        return self._contract_info

    def _snapshot_price(self) -> Optional[int]:
        snapshot = self._contract_info
        return snapshot.mint_price_wei if snapshot is not None else None

    def new_pipeline(self) -> MintPipeline:
        pipeline = MintPipeline(
            builder=self.builder,
            storage=self.storage,
            ledger=self.ledger,
            wallet=self.wallet,
            config=self.config.pipeline,
            ledger_config=self.config.ledger,
            mint_price_wei=self._snapshot_price(),
        )
        for listener in self._listeners:
            pipeline.add_listener(listener)
        self._pipeline = pipeline
        return pipeline

    async def mint(self, text: str, theme=None) -> MintOutcome:
        """
        Translate ``text`` and mint it with the current pipeline.

        A pipeline that already succeeded is replaced by a new one; a failed
        pipeline is reused.
        """
        translation = self.translate(text)
        pipeline = self._pipeline
        if pipeline is None or pipeline.status is MintStatus.SUCCESS:
            pipeline = self.new_pipeline()
        elif not pipeline.is_busy:
            # A reused pipeline prices its next attempt from the current snapshot
            pipeline.mint_price_wei = self._snapshot_price()
        outcome = await pipeline.start(
            translation.original_text,
            translation.encoded_text,
            self.wallet.get_address(),
            theme,
        )
        if outcome.ok:
            await self.refresh_contract_info()
        return outcome

    async def gallery(self, owner: Optional[str] = None) -> Optional[List[TokenRecord]]:
        """
        Tokens owned by ``owner`` (the connected wallet by default).

        Returns an empty list when no contract is deployed and None when the
        ledger could not be read.
        """
        owner = owner or self.wallet.get_address()
        if not owner:
            logger.warning("No address to list tokens for")
            return []
        if not self.ledger.is_deployed:
            return []
        try:
            token_ids = await self.ledger.read_token_ids_by_owner(owner)
            if not token_ids:
                return []
            return await self.ledger.read_tokens_batch(token_ids)
        except Exception as e:
            logger.error(f"Could not read tokens for {owner}: {e}")
            return None
