# encoder/__init__.py
"""
Encoder module for the Emoji Mint system.

Provides the deterministic text-to-symbol translation engine.
"""

from .emoji_translator import EmojiTranslator, Translation, translate

__all__ = [
    "EmojiTranslator",
    "Translation",
    "translate",
]
