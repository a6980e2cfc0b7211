# coordinator/mint_pipeline.py
"""
Mint pipeline state machine.

One pipeline drives a single MintRequest at a time through

    IDLE -> UPLOADING -> MINTING -> SUCCESS
                 |           |
                 +-> FAILED <+

UPLOADING covers building the artifact and publishing it to storage. MINTING
covers reading the price, simulating the mint call, submitting it and waiting
for confirmation. Stages are strictly sequential and never retried; a failed
pipeline can be started again, a successful one cannot (the session creates a
new pipeline instead).

Stages raise MintPipelineError subclasses internally. start() converts them
into MintFailure results, so callers never see stage exceptions. Unexpected
errors are attributed to the stage that was running. A cancelled start()
still leaves the pipeline FAILED before the cancellation propagates.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Union

from artifact.builder import ArtifactBuilder
from artifact.layout import Theme
from artifact.metadata import ArtifactMetadata
from config.config_models import LedgerConfig, PipelineConfig
from connector.contract import MintCall, TransactionReceipt
from monitoring.metrics import (
    CONFIRMATION_POLLS,
    MINT_ATTEMPTS,
    MINT_PIPELINES_IN_FLIGHT,
    MINT_STAGE_LATENCY,
)
from utils.exceptions import (
    ConfirmationTimeout,
    FailureStage,
    MintPipelineError,
    PreconditionError,
    RenderError,
    SimulationError,
    SubmissionError,
    TransactionRevertedError,
    UploadError,
)
from utils.interfaces import LedgerClient, StoragePublisher, WalletCapability

logger = logging.getLogger(__name__)

# Error raised on behalf of a stage that failed with a foreign exception
STAGE_ERRORS = {
    FailureStage.RENDER: RenderError,
    FailureStage.UPLOAD: UploadError,
    FailureStage.SIMULATION: SimulationError,
    FailureStage.SUBMISSION: SubmissionError,
    FailureStage.CONFIRMATION: ConfirmationTimeout,
}


class MintStatus(Enum):
    """Pipeline states"""
    IDLE = "idle"
    UPLOADING = "uploading"
    MINTING = "minting"
    SUCCESS = "success"
    FAILED = "failed"

    @property
    def in_flight(self) -> bool:
        return self in (MintStatus.UPLOADING, MintStatus.MINTING)


@dataclass
class MintRequest:
    """The attempt being driven; the pipeline fills in the locator and hash as it goes"""
    original_text: str
    encoded_text: str
    creator_address: str
    theme: Theme = Theme.LIGHT
    storage_locator: Optional[str] = None
    transaction_hash: Optional[str] = None


@dataclass(frozen=True)
class MintSuccess:
    transaction_hash: str
    storage_locator: str
    token_id: Optional[int] = None

    ok = True


@dataclass(frozen=True)
class MintFailure:
    stage: FailureStage
    reason: str
    error_type: str
    transaction_hash: Optional[str] = None
    funds_may_be_spent: bool = False
    fate_unknown: bool = False

    ok = False

    @classmethod
    def from_error(cls, error: MintPipelineError) -> "MintFailure":
        return cls(
            stage=error.stage,
            reason=error.message,
            error_type=type(error).__name__,
            transaction_hash=error.transaction_hash,
            funds_may_be_spent=error.funds_may_be_spent,
            fate_unknown=isinstance(error, ConfirmationTimeout),
        )


MintOutcome = Union[MintSuccess, MintFailure]
StatusListener = Callable[[MintStatus, "MintPipeline"], None]


class MintPipeline:
    """
    Drives one mint attempt from artifact build to confirmed transaction.

    Args:
        builder: Builds the artifact and its preview image
        storage: Content-addressed storage publisher
        ledger: Contract read/simulate access
        wallet: Connected identity that signs and sends
        config: Confirmation wait settings
        ledger_config: Contract settings (default price, explorer)
        mint_price_wei: Price already read by the session; read once per attempt when None
    """

    def __init__(
        self,
        builder: ArtifactBuilder,
        storage: StoragePublisher,
        ledger: LedgerClient,
        wallet: WalletCapability,
        config: Optional[PipelineConfig] = None,
        ledger_config: Optional[LedgerConfig] = None,
        mint_price_wei: Optional[int] = None,
    ):
        self.builder = builder
        self.storage = storage
        self.ledger = ledger
        self.wallet = wallet
        self.config = config if config is not None else PipelineConfig()
        self.ledger_config = ledger_config if ledger_config is not None else LedgerConfig()
        self.mint_price_wei = mint_price_wei

        self._status = MintStatus.IDLE
        self._request: Optional[MintRequest] = None
        self._outcome: Optional[MintOutcome] = None
        self._stage = FailureStage.RENDER
        self._listeners: List[StatusListener] = []

    @property
    def status(self) -> MintStatus:
        return self._status

    @property
    def request(self) -> Optional[MintRequest]:
        return self._request

    @property
    def outcome(self) -> Optional[MintOutcome]:
        return self._outcome

    @property
    def is_busy(self) -> bool:
        return self._status.in_flight

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _set_status(self, status: MintStatus) -> None:
        previous, self._status = self._status, status
        logger.info(f"Mint pipeline {previous.value} -> {status.value}")
        for listener in list(self._listeners):
            try:
                listener(status, self)
            except Exception:
                logger.exception(f"Status listener {listener!r} failed")

    def _check_preconditions(
        self,
        original_text: str,
        emoji_message: str,
        creator_address: Optional[str],
        theme,
    ) -> Union[PreconditionError, tuple]:
        """Return the resolved (address, theme) or the PreconditionError to reject with"""
        if self._status.in_flight:
            return PreconditionError("A mint is already in progress")
        if self._status is MintStatus.SUCCESS:
            return PreconditionError("This pipeline already minted its request; start a new pipeline")
        if not original_text:
            return PreconditionError("Original text is required")
        if not emoji_message:
            return PreconditionError("Emoji translation is required")

        wallet_address = self.wallet.get_address()
        if not wallet_address:
            return PreconditionError("Connect a wallet to mint")
        if creator_address and creator_address.lower() != wallet_address.lower():
            return PreconditionError(
                f"Creator address {creator_address} does not match the connected wallet {wallet_address}"
            )
        if not self.storage.is_configured:
            return PreconditionError("Storage upload is not configured")
        if not self.ledger.is_deployed:
            return PreconditionError("Contract not deployed")
        try:
            resolved_theme = self.builder.resolve_theme(theme)
        except ValueError as e:
            return PreconditionError(str(e))
        return wallet_address, resolved_theme

    async def start(
        self,
        original_text: str,
        emoji_message: str,
        creator_address: Optional[str] = None,
        theme=None,
    ) -> MintOutcome:
        """
        Mint ``emoji_message`` as a token owned by the connected wallet.

        Rejections (already in flight, already succeeded, unmet preconditions)
        return a precondition MintFailure and leave the pipeline untouched.

        Returns:
            MintSuccess or MintFailure
        """
        checked = self._check_preconditions(original_text, emoji_message, creator_address, theme)
        if isinstance(checked, PreconditionError):
            logger.warning(f"Mint rejected: {checked.message}")
            MINT_ATTEMPTS.labels(outcome="rejected", stage=checked.stage.value).inc()
            return MintFailure.from_error(checked)
        address, resolved_theme = checked

        # Claimed before the first await so a concurrent start() is rejected
        if self._status is MintStatus.FAILED:
            self._set_status(MintStatus.IDLE)
        self._request = MintRequest(
            original_text=original_text,
            encoded_text=emoji_message,
            creator_address=address,
            theme=resolved_theme,
        )
        self._outcome = None
        self._stage = FailureStage.RENDER
        self._set_status(MintStatus.UPLOADING)

        MINT_PIPELINES_IN_FLIGHT.inc()
        try:
            outcome = await self._run(self._request)
        except MintPipelineError as e:
            outcome = self._fail(e)
        except asyncio.CancelledError:
            self._fail(self._stage_error(f"Mint cancelled during {self._stage.value}"))
            raise
        except Exception as e:
            logger.exception(f"Unexpected error during {self._stage.value}")
            outcome = self._fail(self._stage_error(f"Unexpected error during {self._stage.value}: {e}"))
        finally:
            MINT_PIPELINES_IN_FLIGHT.dec()
        return outcome

    def _stage_error(self, message: str) -> MintPipelineError:
        tx_hash = self._request.transaction_hash if self._request is not None else None
        return STAGE_ERRORS[self._stage](message, transaction_hash=tx_hash)

    async def _run(self, request: MintRequest) -> MintSuccess:
        artifact = self._build(request)
        locator = await self._upload(artifact)

        request.storage_locator = locator
        self._set_status(MintStatus.MINTING)

        price = await self._resolve_mint_price()
        call = MintCall(
            to=request.creator_address,
            original_text=request.original_text,
            emoji_message=request.encoded_text,
            token_uri=locator,
            value=price,
            sender=request.creator_address,
        )
        await self._simulate(call)
        request.transaction_hash = await self._submit(call)
        receipt = await self._wait_for_confirmation(request.transaction_hash)

        outcome = MintSuccess(
            transaction_hash=request.transaction_hash,
            storage_locator=locator,
            token_id=receipt.token_id,
        )
        self._outcome = outcome
        MINT_ATTEMPTS.labels(outcome="success", stage=FailureStage.CONFIRMATION.value).inc()
        logger.info(f"Mint confirmed: tx={outcome.transaction_hash} token={outcome.token_id} uri={locator}")
        self._set_status(MintStatus.SUCCESS)
        return outcome

    def _fail(self, error: MintPipelineError) -> MintFailure:
        outcome = MintFailure.from_error(error)
        self._outcome = outcome
        MINT_ATTEMPTS.labels(outcome="failed", stage=outcome.stage.value).inc()
        if outcome.fate_unknown:
            logger.warning(f"Mint status unknown at {outcome.stage.value}: {outcome.reason}")
        elif outcome.funds_may_be_spent:
            logger.error(f"Mint failed at {outcome.stage.value} (funds may be spent): {outcome.reason}")
        else:
            logger.error(f"Mint failed at {outcome.stage.value}: {outcome.reason}")
        self._set_status(MintStatus.FAILED)
        return outcome

    def _build(self, request: MintRequest) -> ArtifactMetadata:
        self._stage = FailureStage.RENDER
        start = time.time()
        try:
            return self.builder.build(
                request.original_text,
                request.encoded_text,
                request.creator_address,
                request.theme,
            )
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"Could not build artifact: {e}") from e
        finally:
            MINT_STAGE_LATENCY.labels(stage=FailureStage.RENDER.value).observe(time.time() - start)

    async def _upload(self, artifact: ArtifactMetadata) -> str:
        self._stage = FailureStage.UPLOAD
        start = time.time()
        try:
            locator = await self.storage.upload(artifact)
        except UploadError:
            raise
        except Exception as e:
            raise UploadError(f"Upload failed: {e}") from e
        finally:
            MINT_STAGE_LATENCY.labels(stage=FailureStage.UPLOAD.value).observe(time.time() - start)
        if not locator:
            raise UploadError("Storage returned an empty locator")
        logger.info(f"Artifact uploaded: {locator}")
        return locator

    async def _resolve_mint_price(self) -> int:
        self._stage = FailureStage.SIMULATION
        if self.mint_price_wei is not None:
            return self.mint_price_wei
        try:
            return await self.ledger.read_mint_price()
        except Exception as e:
            fallback = self.ledger_config.default_mint_price_wei
            logger.warning(f"Could not read mint price ({e}); using default of {fallback} wei")
            return fallback

    async def _simulate(self, call: MintCall) -> None:
        start = time.time()
        try:
            result = await self.ledger.simulate(call)
        except Exception as e:
            raise SimulationError(f"Transaction simulation failed: {e}") from e
        finally:
            MINT_STAGE_LATENCY.labels(stage=FailureStage.SIMULATION.value).observe(time.time() - start)
        if not result.success:
            raise SimulationError(result.revert_reason or "Transaction simulation failed")
        logger.debug(f"Simulation passed for {call.token_uri}")

    async def _submit(self, call: MintCall) -> str:
        self._stage = FailureStage.SUBMISSION
        if not call.token_uri:
            raise PreconditionError("Refusing to submit a mint without a storage locator")
        start = time.time()
        try:
            tx_hash = await self.wallet.sign_and_send(call)
        except Exception as e:
            raise SubmissionError(f"Transaction submission failed: {e}") from e
        finally:
            MINT_STAGE_LATENCY.labels(stage=FailureStage.SUBMISSION.value).observe(time.time() - start)
        logger.info(f"Transaction submitted: {tx_hash}")
        return tx_hash

    async def _wait_for_confirmation(self, tx_hash: str) -> TransactionReceipt:
        self._stage = FailureStage.CONFIRMATION
        attempts = self.config.confirmation_max_attempts
        interval = self.config.confirmation_poll_interval
        start = time.time()
        try:
            for attempt in range(1, attempts + 1):
                try:
                    receipt = await self.wallet.wait_for_receipt(tx_hash, timeout=interval)
                except Exception as e:
                    CONFIRMATION_POLLS.labels(result="error").inc()
                    logger.warning(f"Receipt poll {attempt}/{attempts} for {tx_hash} failed: {e}")
                    continue
                if receipt is None:
                    CONFIRMATION_POLLS.labels(result="pending").inc()
                    logger.debug(f"Transaction {tx_hash} pending ({attempt}/{attempts})")
                    continue

                CONFIRMATION_POLLS.labels(result="confirmed").inc()
                if not receipt.status:
                    reason = receipt.revert_reason or "no reason given"
                    raise TransactionRevertedError(f"Transaction reverted: {reason}", transaction_hash=tx_hash)
                return receipt
        finally:
            MINT_STAGE_LATENCY.labels(stage=FailureStage.CONFIRMATION.value).observe(time.time() - start)

        raise ConfirmationTimeout(
            f"Transaction status unknown, check explorer: {self.ledger_config.transaction_url(tx_hash)}",
            transaction_hash=tx_hash,
        )
