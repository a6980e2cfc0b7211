# connector/__init__.py
"""
Connector package exposing the ledger boundary: contract value types, the
snapshot reader and the in-process ledger/wallet emulator.
"""
from .contract import (
    ContractSnapshot,
    MintCall,
    SimulationResult,
    TokenRecord,
    TransactionReceipt,
    format_ether,
    read_contract_snapshot,
)
from .local_ledger import LocalLedger, LocalWallet

__all__ = [
    "ContractSnapshot",
    "LocalLedger",
    "LocalWallet",
    "MintCall",
    "SimulationResult",
    "TokenRecord",
    "TransactionReceipt",
    "format_ether",
    "read_contract_snapshot",
]
