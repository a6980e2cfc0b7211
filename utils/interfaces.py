# utils/interfaces.py
"""
Interfaces to break circular dependencies
Uses Protocol classes for type hints without imports
"""
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from artifact.metadata import ArtifactMetadata
    from connector.contract import MintCall, SimulationResult, TokenRecord, TransactionReceipt


class WalletCapability(Protocol):
    """Connected identity able to sign and send transactions"""

    def get_address(self) -> Optional[str]:
        """Address of the connected account, or None when disconnected"""
        ...

    async def sign_and_send(self, call: "MintCall") -> str:
        """Sign the call (paying ``call.value``) and broadcast it; returns the hash"""
        ...

    async def wait_for_receipt(self, tx_hash: str, timeout: float) -> Optional["TransactionReceipt"]:
        """Wait up to ``timeout`` seconds; None if the transaction is still pending"""
        ...


class LedgerClient(Protocol):
    """Read and dry-run access to the token contract"""

    contract_address: str

    @property
    def is_deployed(self) -> bool:
        ...

    async def read_mint_price(self) -> int:
        ...

    async def read_total_supply(self) -> int:
        ...

    async def read_max_supply(self) -> int:
        ...

    async def read_token_ids_by_owner(self, owner: str) -> List[int]:
        ...

    async def read_tokens_batch(self, token_ids: Sequence[int]) -> List["TokenRecord"]:
        """Read several token records in one round trip"""
        ...

    async def simulate(self, call: "MintCall") -> "SimulationResult":
        ...


class StoragePublisher(Protocol):
    """Content-addressed storage for artifacts"""

    @property
    def is_configured(self) -> bool:
        ...

    async def upload(self, artifact: "ArtifactMetadata") -> str:
        """Publish the artifact and return its storage locator"""
        ...
