# coordinator/__init__.py
"""
Coordinator package: the mint pipeline state machine and the session that
shares contract info across pipelines.
"""
from .mint_pipeline import (
    MintFailure,
    MintOutcome,
    MintPipeline,
    MintRequest,
    MintStatus,
    MintSuccess,
)
from .session import MintSession

__all__ = [
    "MintFailure",
    "MintOutcome",
    "MintPipeline",
    "MintRequest",
    "MintSession",
    "MintStatus",
    "MintSuccess",
]
