# connector/local_ledger.py
"""
In-process emulation of the EmojiNFT contract and a wallet bound to it.

LocalLedger enforces the contract's mint rules (price, supply cap, non-empty
text and token URI) and keeps token records; LocalWallet signs and "mines"
transactions against it instantly. Together they let the CLI and the test
suite drive the full mint pipeline without a network.

State can be persisted to a JSON file so successive CLI runs share a ledger.
"""
import asyncio
import hashlib
import json
import logging
import time
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from connector.contract import MintCall, SimulationResult, TokenRecord, TransactionReceipt
from utils.constants import DEFAULT_MAX_SUPPLY, DEFAULT_MINT_PRICE_WEI, ZERO_ADDRESS
from utils.exceptions import LedgerReadError

logger = logging.getLogger(__name__)

LOCAL_CONTRACT_ADDRESS = "0x00000000000000000000000000000000000e0011"
LOCAL_ACCOUNT_ADDRESS = "0x00000000000000000000000000000000000a11ce"

REVERT_INSUFFICIENT_PAYMENT = "Insufficient payment"
REVERT_MAX_SUPPLY = "Max supply reached"
REVERT_EMPTY_TEXT = "Empty text"
REVERT_EMPTY_TOKEN_URI = "Empty token URI"


class LocalLedger:
    """EmojiNFT contract rules and storage, held in memory"""

    def __init__(
        self,
        contract_address: str = LOCAL_CONTRACT_ADDRESS,
        mint_price_wei: int = DEFAULT_MINT_PRICE_WEI,
        max_supply: int = DEFAULT_MAX_SUPPLY,
        clock: Callable[[], float] = time.time,
    ):
        self.contract_address = contract_address
        self.mint_price_wei = mint_price_wei
        self.max_supply = max_supply
        self.clock = clock
        self.collected_wei = 0
        self.block_number = 0
        self._tokens: Dict[int, TokenRecord] = {}
        self._receipts: Dict[str, TransactionReceipt] = {}
        self._nonce = 0

    @property
    def is_deployed(self) -> bool:
        return self.contract_address.lower() != ZERO_ADDRESS

    @property
    def total_supply(self) -> int:
        return len(self._tokens)

    async def read_mint_price(self) -> int:
        return self.mint_price_wei

    async def read_total_supply(self) -> int:
        return self.total_supply

    async def read_max_supply(self) -> int:
        return self.max_supply

    async def read_token_ids_by_owner(self, owner: str) -> List[int]:
        owner = owner.lower()
        return [tid for tid, record in self._tokens.items() if (record.owner or "").lower() == owner]

    async def read_tokens_batch(self, token_ids: Sequence[int]) -> List[TokenRecord]:
        missing = [tid for tid in token_ids if tid not in self._tokens]
        if missing:
            raise LedgerReadError(f"Unknown token id(s): {', '.join(str(t) for t in missing)}")
        return [self._tokens[tid] for tid in token_ids]

    def _revert_reason(self, call: MintCall) -> Optional[str]:
        if self.total_supply >= self.max_supply:
            return REVERT_MAX_SUPPLY
        if call.value < self.mint_price_wei:
            return REVERT_INSUFFICIENT_PAYMENT
        if not call.original_text or not call.emoji_message:
            return REVERT_EMPTY_TEXT
        if not call.token_uri:
            return REVERT_EMPTY_TOKEN_URI
        return None

    async def simulate(self, call: MintCall) -> SimulationResult:
        reason = self._revert_reason(call)
        if reason:
            return SimulationResult.reverted(reason)
        return SimulationResult.ok()

    def _next_hash(self, call: MintCall) -> str:
        self._nonce += 1
        seed = f"{self.contract_address}:{call.sender}:{self._nonce}:{call.token_uri}"
        return "0x" + hashlib.sha256(seed.encode("utf-8")).hexdigest()

    def execute(self, call: MintCall) -> str:
        """Include a mint transaction in a new block; returns its hash"""
        tx_hash = self._next_hash(call)
        self.block_number += 1
        reason = self._revert_reason(call)
        if reason:
            logger.info(f"Transaction {tx_hash} reverted: {reason}")
            receipt = TransactionReceipt(tx_hash, False, block_number=self.block_number, revert_reason=reason)
        else:
            token_id = self.total_supply
            self._tokens[token_id] = TokenRecord(
                token_id=token_id,
                storage_locator=call.token_uri,
                original_text=call.original_text,
                encoded_text=call.emoji_message,
                minted_at=int(self.clock()),
                owner=call.to,
            )
            self.collected_wei += call.value
            receipt = TransactionReceipt(tx_hash, True, token_id=token_id, block_number=self.block_number)
            logger.info(f"Minted token #{token_id} to {call.to} in block {self.block_number}")
        self._receipts[tx_hash] = receipt
        return tx_hash

    def receipt(self, tx_hash: str) -> Optional[TransactionReceipt]:
        return self._receipts.get(tx_hash)

    def to_dict(self) -> dict:
        return {
            "contract_address": self.contract_address,
            "mint_price_wei": self.mint_price_wei,
            "max_supply": self.max_supply,
            "collected_wei": self.collected_wei,
            "block_number": self.block_number,
            "nonce": self._nonce,
            "tokens": [
                {
                    "token_id": r.token_id,
                    "storage_locator": r.storage_locator,
                    "original_text": r.original_text,
                    "encoded_text": r.encoded_text,
                    "minted_at": r.minted_at,
                    "owner": r.owner,
                }
                for r in self._tokens.values()
            ],
            "receipts": [
                {
                    "tx_hash": r.tx_hash,
                    "status": r.status,
                    "token_id": r.token_id,
                    "block_number": r.block_number,
                    "revert_reason": r.revert_reason,
                }
                for r in self._receipts.values()
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LocalLedger":
        ledger = cls(
            contract_address=data.get("contract_address", LOCAL_CONTRACT_ADDRESS),
            mint_price_wei=int(data.get("mint_price_wei", DEFAULT_MINT_PRICE_WEI)),
            max_supply=int(data.get("max_supply", DEFAULT_MAX_SUPPLY)),
        )
        ledger.collected_wei = int(data.get("collected_wei", 0))
        ledger.block_number = int(data.get("block_number", 0))
        ledger._nonce = int(data.get("nonce", 0))
        for item in data.get("tokens", []):
            record = TokenRecord(**item)
            ledger._tokens[record.token_id] = record
        for item in data.get("receipts", []):
            receipt = TransactionReceipt(**item)
            ledger._receipts[receipt.tx_hash] = receipt
        return ledger

    def save(self, path: Union[str, Path]) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, ensure_ascii=False, indent=2)

    @classmethod
    def load(cls, path: Union[str, Path], **defaults) -> "LocalLedger":
        """Load a saved ledger, or start a fresh one if the file does not exist"""
        path = Path(path)
        if not path.exists():
            logger.info(f"No ledger state at {path}, starting a new local ledger")
            return cls(**defaults)
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))


class LocalWallet:
    """
    Wallet capability bound to a LocalLedger.

    Args:
        ledger: Ledger the transactions are executed against
        address: Connected account; None models a disconnected wallet
        reject_signing: Decline every signature request
        pending_polls: Receipt polls that report "pending" before the receipt shows up
    """

    def __init__(
        self,
        ledger: LocalLedger,
        address: Optional[str] = LOCAL_ACCOUNT_ADDRESS,
        reject_signing: bool = False,
        pending_polls: int = 0,
    ):
        self.ledger = ledger
        self.address = address
        self.reject_signing = reject_signing
        self.pending_polls = pending_polls
        self._polls: Dict[str, int] = {}

    def get_address(self) -> Optional[str]:
        return self.address

    async def sign_and_send(self, call: MintCall) -> str:
        if self.address is None:
            raise PermissionError("Wallet is not connected")
        if self.reject_signing:
            raise PermissionError("User rejected the request")
        await asyncio.sleep(0)
        return self.ledger.execute(call)

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> Optional[TransactionReceipt]:
        polls = self._polls.get(tx_hash, 0)
        self._polls[tx_hash] = polls + 1
        await asyncio.sleep(0)
        if polls < self.pending_polls:
            return None
        return self.ledger.receipt(tx_hash)
