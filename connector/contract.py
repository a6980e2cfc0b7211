# connector/contract.py
"""
Value types exchanged with the EmojiNFT contract and the snapshot reader.

Reads are retry-free: a failed read leaves its field as None ("info
unavailable") and is counted, it never aborts the other reads.
"""
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from monitoring.metrics import LEDGER_READ_FAILURES
from utils.constants import WEI_PER_ETHER

if TYPE_CHECKING:
    from utils.interfaces import LedgerClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MintCall:
    """Arguments of ``mintEmojiNFT(to, originalText, emojiMessage, tokenURI)`` plus payment"""
    to: str
    original_text: str
    emoji_message: str
    token_uri: str
    value: int
    sender: Optional[str] = None


@dataclass(frozen=True)
class SimulationResult:
    success: bool
    revert_reason: Optional[str] = None

    @classmethod
    def ok(cls) -> "SimulationResult":
        return cls(True)

    @classmethod
    def reverted(cls, reason: str) -> "SimulationResult":
        return cls(False, reason)


@dataclass(frozen=True)
class TransactionReceipt:
    tx_hash: str
    status: bool
    token_id: Optional[int] = None
    block_number: Optional[int] = None
    revert_reason: Optional[str] = None


@dataclass(frozen=True)
class TokenRecord:
    token_id: int
    storage_locator: str
    original_text: str
    encoded_text: str
    minted_at: int  # unix seconds
    owner: Optional[str] = None


def format_ether(wei: int) -> str:
    """Render a wei amount in ether units without trailing zeros"""
    whole, fraction = divmod(wei, WEI_PER_ETHER)
    digits = f"{fraction:018d}".rstrip("0")
    return f"{whole}.{digits}" if digits else str(whole)


@dataclass(frozen=True)
class ContractSnapshot:
    """Read-only figures shared by every pipeline in a session"""
    contract_address: str
    mint_price_wei: Optional[int] = None
    total_supply: Optional[int] = None
    max_supply: Optional[int] = None
    fetched_at: float = field(default_factory=time.time)

    @property
    def remaining_supply(self) -> Optional[int]:
        if self.total_supply is None or self.max_supply is None:
            return None
        return max(self.max_supply - self.total_supply, 0)

    @property
    def mint_price_display(self) -> Optional[str]:
        if self.mint_price_wei is None:
            return None
        return format_ether(self.mint_price_wei)

    @property
    def is_sold_out(self) -> bool:
        return self.remaining_supply == 0


async def _read(field_name: str, reader) -> Optional[int]:
    try:
        return await reader()
    except Exception as e:
        LEDGER_READ_FAILURES.labels(field=field_name).inc()
        logger.warning(f"Could not read {field_name} from the contract: {e}")
        return None


async def read_contract_snapshot(ledger: "LedgerClient") -> ContractSnapshot:
    """Read mint price and supply figures; each read succeeds or fails on its own"""
    return ContractSnapshot(
        contract_address=ledger.contract_address,
        mint_price_wei=await _read("mint_price", ledger.read_mint_price),
        total_supply=await _read("total_supply", ledger.read_total_supply),
        max_supply=await _read("max_supply", ledger.read_max_supply),
    )
