# encoder/emoji_translator.py
"""
Text-to-symbol translation engine.

translate() lowercases the input, claims phrase spans longest key first,
then assembles the output in a single left-to-right pass. Symbols inserted
for a phrase are never re-scanned, so multi-character symbol sequences are
not corrupted by the character pass.

The engine is synchronous and allocation-light; it runs on every text
change to feed live feedback.
"""
from dataclasses import dataclass
from typing import List, Optional
import logging

from vocabulary.symbol_dictionary import SymbolDictionary, default_dictionary
from monitoring.metrics import TRANSLATIONS, TRANSLATION_TEXT_LENGTH

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Translation:
    """Immutable (original, encoded) pair; recomputed, never mutated"""
    original_text: str
    encoded_text: str

    @property
    def is_empty(self) -> bool:
        return self.encoded_text == ""


def _claim_phrase_spans(text: str, dictionary: SymbolDictionary) -> List[Optional[str]]:
    """
    Map each start index of a claimed phrase span to its symbols.

    Returns a list the length of ``text``; slot i holds the symbols of the
    phrase starting at i, or None. Positions covered by a phrase (other than
    its start) are marked with the empty string.
    """
    spans: List[Optional[str]] = [None] * len(text)
    for entry in dictionary.phrases:
        key = entry.key
        width = len(key)
        start = text.find(key)
        while start != -1:
            end = start + width
            if all(slot is None for slot in spans[start:end]):
                spans[start] = entry.symbols
                for covered in range(start + 1, end):
                    spans[covered] = ""
                start = text.find(key, end)
            else:
                # overlaps a longer phrase already claimed
                start = text.find(key, start + 1)
    return spans


def translate(text: str, dictionary: SymbolDictionary) -> str:
    """
    Translate text into its symbol encoding.

    Args:
        text: Free-form input; case is not preserved
        dictionary: Symbol dictionary snapshot

    Returns:
        Encoded string; unknown characters pass through unchanged
    """
    if not text:
        return ""

    normalized = text.lower()
    spans = _claim_phrase_spans(normalized, dictionary) if dictionary.phrases else [None] * len(normalized)
    characters = dictionary.characters

    parts: List[str] = []
    for index, char in enumerate(normalized):
        claimed = spans[index]
        if claimed is None:
            parts.append(characters.get(char, char))
        elif claimed:
            parts.append(claimed)
    return "".join(parts)


class EmojiTranslator:
    """Binds a dictionary and produces Translation values"""

    def __init__(self, dictionary: Optional[SymbolDictionary] = None):
        self.dictionary = dictionary if dictionary is not None else default_dictionary()
        logger.debug(f"EmojiTranslator using {self.dictionary!r}")

    def translate(self, text: str) -> Translation:
        encoded = translate(text, self.dictionary)
        TRANSLATIONS.labels(dictionary=self.dictionary.name).inc()
        TRANSLATION_TEXT_LENGTH.labels(dictionary=self.dictionary.name).observe(len(text))
        return Translation(original_text=text, encoded_text=encoded)

    def with_dictionary(self, dictionary: SymbolDictionary) -> "EmojiTranslator":
        return EmojiTranslator(dictionary)
