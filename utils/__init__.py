# utils/__init__.py
"""
Common utilities for the Emoji Mint system.

Provides shared constants, the exception hierarchy and logging setup.
Storage publishers live in utils.artifact_store and are imported from there.
"""
# Import constants
from .constants import *

# Import exceptions
from .exceptions import (
    EmojiMintError, VocabularyError, ConfigurationError, LedgerReadError,
    FailureStage, MintPipelineError, PreconditionError, RenderError, UploadError,
    SimulationError, SubmissionError, TransactionRevertedError, ConfirmationTimeout
)

from .logging_config import setup_logging

__all__ = [
    "EmojiMintError",
    "VocabularyError",
    "ConfigurationError",
    "LedgerReadError",
    "FailureStage",
    "MintPipelineError",
    "PreconditionError",
    "RenderError",
    "UploadError",
    "SimulationError",
    "SubmissionError",
    "TransactionRevertedError",
    "ConfirmationTimeout",
    "setup_logging",
]
