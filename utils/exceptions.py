# utils/exceptions.py
"""
Custom exceptions for the Emoji Mint system
"""
from enum import Enum
from typing import Optional


class FailureStage(Enum):
    """Stage of the mint pipeline at which an attempt stopped"""
    PRECONDITION = "precondition"
    RENDER = "render"
    UPLOAD = "upload"
    SIMULATION = "simulation"
    SUBMISSION = "submission"
    CONFIRMATION = "confirmation"


class EmojiMintError(Exception):
    """Base exception for all emoji mint system errors"""
    pass


class VocabularyError(EmojiMintError):
    """Raised when symbol dictionary data is invalid"""
    pass


class ConfigurationError(EmojiMintError):
    """Raised when there are configuration issues"""
    pass


class LedgerReadError(EmojiMintError):
    """Raised when a read-only ledger query fails"""
    pass


class MintPipelineError(EmojiMintError):
    """Base for every error that ends a mint attempt"""

    stage: FailureStage = FailureStage.PRECONDITION
    # Whether the external effect of the attempt may have happened
    funds_may_be_spent: bool = False

    def __init__(self, message: str, transaction_hash: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.transaction_hash = transaction_hash


class PreconditionError(MintPipelineError):
    """Missing input, identity or capability; nothing was attempted"""
    stage = FailureStage.PRECONDITION


class RenderError(MintPipelineError):
    """Local artifact or preview image generation failed"""
    stage = FailureStage.RENDER


class UploadError(MintPipelineError):
    """Content-addressed storage unreachable, over quota, or token rejected"""
    stage = FailureStage.UPLOAD


class SimulationError(MintPipelineError):
    """Dry run of the mint call predicted a revert"""
    stage = FailureStage.SIMULATION


class SubmissionError(MintPipelineError):
    """Signing declined or the network refused the transaction"""
    stage = FailureStage.SUBMISSION
    funds_may_be_spent = True


class TransactionRevertedError(SubmissionError):
    """Transaction was included but the receipt reports a revert"""
    stage = FailureStage.CONFIRMATION


class ConfirmationTimeout(MintPipelineError):
    """Confirmation wait exhausted; the transaction's fate is unknown"""
    stage = FailureStage.CONFIRMATION
    funds_may_be_spent = True
