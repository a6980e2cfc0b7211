# vocabulary/symbol_dictionary.py
"""
Symbol dictionary for the Emoji Mint system.

A SymbolDictionary is an immutable mapping from lowercase text keys (single
characters and multi-character phrases) to symbol sequences. It is passed
explicitly to the translation engine, so alternate dictionaries can be used
side by side without shared state.

Dictionary packs are static YAML or JSON files. Two shapes are accepted:

    entries:                      # ordered list of entries
      - {key: "celo", symbols: "💚🌳💰🌟"}
      - {key: "a", symbols: "🌳"}

    celo: "💚🌳💰🌟"               # or a plain mapping
    a: "🌳"
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union

import yaml

from utils.constants import DEFAULT_DICTIONARY_PACK, DEFAULT_ENCODING
from utils.exceptions import VocabularyError

logger = logging.getLogger(__name__)

PACKS_DIR = Path(__file__).parent / "packs"


@dataclass(frozen=True)
class SymbolEntry:
    """One dictionary entry: a lowercase key and its replacement symbols"""
    key: str
    symbols: str

    @property
    def is_phrase(self) -> bool:
        return len(self.key) > 1


class SymbolDictionary(Mapping):
    """
    Immutable text-to-symbol mapping.

    Keys are normalized to lowercase on construction. Insertion order is
    preserved and is the tie-break between phrases of equal length.
    """

    __slots__ = ("_name", "_version", "_entries", "_lookup", "_phrases", "_characters")

    def __init__(
        self,
        entries: Iterable[Union[SymbolEntry, Tuple[str, str]]],
        name: str = "custom",
        version: str = "1.0",
    ):
        normalized = []
        lookup: Dict[str, str] = {}
        for position, raw in enumerate(entries):
            key, symbols = (raw.key, raw.symbols) if isinstance(raw, SymbolEntry) else raw
            if not isinstance(key, str) or key == "":
                raise VocabularyError(f"Entry {position} in '{name}' has an empty or non-string key")
            if not isinstance(symbols, str) or symbols == "":
                raise VocabularyError(f"Entry '{key}' in '{name}' has no symbols")
            key = key.lower()
            if key in lookup:
                raise VocabularyError(f"Duplicate key '{key}' in dictionary '{name}'")
            lookup[key] = symbols
            normalized.append(SymbolEntry(key, symbols))

        self._name = name
        self._version = version
        self._entries: Tuple[SymbolEntry, ...] = tuple(normalized)
        self._lookup = MappingProxyType(lookup)
        # sorted() is stable: equal lengths keep insertion order
        self._phrases: Tuple[SymbolEntry, ...] = tuple(
            sorted((e for e in normalized if e.is_phrase), key=lambda e: len(e.key), reverse=True)
        )
        self._characters = MappingProxyType(
            {e.key: e.symbols for e in normalized if not e.is_phrase}
        )

    @classmethod
    def from_mapping(cls, mapping: Mapping, name: str = "custom", version: str = "1.0") -> "SymbolDictionary":
        return cls(mapping.items(), name=name, version=version)

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> str:
        return self._version

    @property
    def entries(self) -> Tuple[SymbolEntry, ...]:
        """All entries in insertion order"""
        return self._entries

    @property
    def phrases(self) -> Tuple[SymbolEntry, ...]:
        """Multi-character entries, longest first"""
        return self._phrases

    @property
    def characters(self) -> Mapping:
        """Single-character keys and their symbols"""
        return self._characters

    def lookup(self, key: str) -> Optional[str]:
        return self._lookup.get(key.lower())

    def extend(self, entries: Iterable[Union[SymbolEntry, Tuple[str, str]]], name: Optional[str] = None) -> "SymbolDictionary":
        """Return a new dictionary with entries added or overridden (existing order kept)"""
        merged: Dict[str, str] = dict(self._lookup)
        for raw in entries:
            key, symbols = (raw.key, raw.symbols) if isinstance(raw, SymbolEntry) else raw
            merged[key.lower()] = symbols
        return SymbolDictionary(merged.items(), name=name or self._name, version=self._version)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self._name,
            "version": self._version,
            "entries": [{"key": e.key, "symbols": e.symbols} for e in self._entries],
        }

    def __getitem__(self, key: str) -> str:
        return self._lookup[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return iter(self._lookup)

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SymbolDictionary):
            return self._entries == other._entries
        return super().__eq__(other)

    def __hash__(self) -> int:
        return hash(self._entries)

    def __repr__(self) -> str:
        return f"SymbolDictionary(name={self._name!r}, entries={len(self._entries)}, phrases={len(self._phrases)})"


def _entries_from_data(data: Any, source: str) -> Tuple[list, str, str]:
    if not isinstance(data, dict):
        raise VocabularyError(f"Dictionary data in {source} must be a mapping")

    if "entries" in data:
        raw_entries = data["entries"]
        if not isinstance(raw_entries, list):
            raise VocabularyError(f"'entries' in {source} must be a list")
        entries = []
        for i, item in enumerate(raw_entries):
            if not isinstance(item, dict) or "key" not in item or "symbols" not in item:
                raise VocabularyError(f"Entry {i} in {source} must have 'key' and 'symbols'")
            entries.append((str(item["key"]), str(item["symbols"])))
        return entries, str(data.get("name", Path(source).stem)), str(data.get("version", "1.0"))

    return [(str(k), str(v)) for k, v in data.items()], Path(source).stem, "1.0"


def load_dictionary(path: Union[str, Path]) -> SymbolDictionary:
    """
    Load a dictionary pack from a YAML or JSON file.

    Args:
        path: Path to a .yaml/.yml or .json pack

    Returns:
        Validated SymbolDictionary

    Raises:
        VocabularyError: If the file is missing or malformed
    """
    pack_path = Path(path)
    if not pack_path.exists():
        raise VocabularyError(f"Dictionary pack not found: {pack_path}")

    try:
        with open(pack_path, "r", encoding=DEFAULT_ENCODING) as f:
            if pack_path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        logger.error(f"Failed to parse dictionary pack {pack_path}: {e}")
        raise VocabularyError(f"Failed to parse dictionary pack {pack_path}: {e}") from e

    entries, name, version = _entries_from_data(data, str(pack_path))
    dictionary = SymbolDictionary(entries, name=name, version=version)
    logger.info(f"Loaded dictionary '{name}' v{version}: {len(dictionary)} entries, {len(dictionary.phrases)} phrases")
    return dictionary


@lru_cache(maxsize=8)
def load_pack(pack_name: str = DEFAULT_DICTIONARY_PACK) -> SymbolDictionary:
    """Load a bundled pack by name (cached; dictionaries are immutable)"""
    for suffix in (".yaml", ".yml", ".json"):
        candidate = PACKS_DIR / f"{pack_name}{suffix}"
        if candidate.exists():
            return load_dictionary(candidate)
    raise VocabularyError(f"No bundled dictionary pack named '{pack_name}'")


def default_dictionary() -> SymbolDictionary:
    return load_pack(DEFAULT_DICTIONARY_PACK)
