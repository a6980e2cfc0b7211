# utils/constants.py
"""
Centralized constants for the Emoji Mint system with environment overrides.

Values here can be overridden via environment variables. We check both
EMT_<NAME> and <NAME> so the constants integrate with different env setups.

Example:
- EMT_PREVIEW_CANVAS_SIZE=1024
- PREVIEW_CANVAS_SIZE=1024

Parsing rules:
- int/float are cast safely; on failure the default is kept
- strings are taken verbatim
"""

from __future__ import annotations
import os
from typing import Any


def _get_env_raw(key: str, default: Any = None) -> Any:
    """Get raw env value, checking EMT_<KEY> first, then <KEY>."""
    return os.environ.get(f"EMT_{key}", os.environ.get(key, default))


def _as_str(key: str, default: str) -> str:
    val = _get_env_raw(key)
    return default if val is None else str(val)


def _as_int(key: str, default: int) -> int:
    val = _get_env_raw(key)
    if val is None:
        return default
    try:
        return int(str(val).strip())
    except ValueError:
        return default


def _as_float(key: str, default: float) -> float:
    val = _get_env_raw(key)
    if val is None:
        return default
    try:
        return float(str(val).strip())
    except ValueError:
        return default


# General constants
DEFAULT_ENCODING = _as_str("DEFAULT_ENCODING", "utf-8")
DEFAULT_TIMEOUT = _as_int("DEFAULT_TIMEOUT", 30)  # seconds

# Ledger constants
ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
WEI_PER_ETHER = 10 ** 18
DEFAULT_MINT_PRICE_WEI = _as_int("DEFAULT_MINT_PRICE_WEI", 10 ** 15)  # 0.001 CELO
DEFAULT_MAX_SUPPLY = _as_int("DEFAULT_MAX_SUPPLY", 10000)
DEFAULT_CHAIN_ID = _as_int("DEFAULT_CHAIN_ID", 44787)  # Celo Alfajores
DEFAULT_EXPLORER_URL = _as_str("DEFAULT_EXPLORER_URL", "https://alfajores.celoscan.io")

# Confirmation wait
CONFIRMATION_MAX_ATTEMPTS = _as_int("CONFIRMATION_MAX_ATTEMPTS", 30)
CONFIRMATION_POLL_INTERVAL = _as_float("CONFIRMATION_POLL_INTERVAL", 2.0)  # seconds

# Preview image layout
PREVIEW_CANVAS_SIZE = _as_int("PREVIEW_CANVAS_SIZE", 800)  # px, square
PREVIEW_TRUNCATE_AT = _as_int("PREVIEW_TRUNCATE_AT", 50)  # chars before truncation kicks in
PREVIEW_VISIBLE_CHARS = _as_int("PREVIEW_VISIBLE_CHARS", 47)
PREVIEW_SYMBOLS_PER_LINE = _as_int("PREVIEW_SYMBOLS_PER_LINE", 10)
PREVIEW_DPI = _as_int("PREVIEW_DPI", 100)
ELLIPSIS = "..."

# Artifact metadata
DEFAULT_TITLE_PREFIX = _as_str("DEFAULT_TITLE_PREFIX", "Celo Emoji")
DEFAULT_FOOTER = _as_str("DEFAULT_FOOTER", "Minted on Celo Blockchain")
PREVIEW_IMAGE_FILENAME = "emoji-nft.png"
METADATA_FILENAME = "metadata.json"

# Storage
DEFAULT_IPFS_API_URL = _as_str("DEFAULT_IPFS_API_URL", "http://127.0.0.1:5001")
DEFAULT_IPFS_GATEWAY = _as_str("DEFAULT_IPFS_GATEWAY", "https://ipfs.io/ipfs/")

# Dictionary packs
DEFAULT_DICTIONARY_PACK = _as_str("DEFAULT_DICTIONARY_PACK", "celo")

# HTTP status codes (fixed, not expected to override)
HTTP_UNAUTHORIZED = 401
HTTP_PAYMENT_REQUIRED = 402
HTTP_FORBIDDEN = 403
HTTP_PAYLOAD_TOO_LARGE = 413
HTTP_TOO_MANY_REQUESTS = 429
