# vocabulary/__init__.py
"""
Symbol dictionary module for the Emoji Mint system.

Provides the immutable SymbolDictionary value and loaders for the bundled
and user-supplied dictionary packs.
"""

from .symbol_dictionary import (
    SymbolDictionary,
    SymbolEntry,
    default_dictionary,
    load_dictionary,
    load_pack,
)

__all__ = [
    "SymbolDictionary",
    "SymbolEntry",
    "default_dictionary",
    "load_dictionary",
    "load_pack",
]
