"""
Tests for the symbol dictionary and pack loading.
"""
import json

import pytest
import yaml

from utils.exceptions import VocabularyError
from vocabulary.symbol_dictionary import (
    SymbolDictionary,
    SymbolEntry,
    default_dictionary,
    load_dictionary,
    load_pack,
)


class TestSymbolDictionary:
    """Tests for SymbolDictionary."""

    def test_keys_are_lowercased(self):
        d = SymbolDictionary([("CeLo", "X"), ("A", "Y")])
        assert "celo" in d
        assert d["CELO"] == "X"
        assert d.lookup("a") == "Y"

    def test_phrases_sorted_longest_first_stable(self):
        d = SymbolDictionary([("ab", "1"), ("abcd", "2"), ("cd", "3"), ("x", "4")])
        assert [e.key for e in d.phrases] == ["abcd", "ab", "cd"]
        assert dict(d.characters) == {"x": "4"}

    def test_duplicate_keys_rejected(self):
        with pytest.raises(VocabularyError):
            SymbolDictionary([("a", "1"), ("A", "2")])

    def test_empty_key_or_symbols_rejected(self):
        with pytest.raises(VocabularyError):
            SymbolDictionary([("", "1")])
        with pytest.raises(VocabularyError):
            SymbolDictionary([("a", "")])

    def test_immutable(self):
        d = SymbolDictionary([("a", "1")])
        with pytest.raises(TypeError):
            d["b"] = "2"
        with pytest.raises(TypeError):
            d.characters["b"] = "2"

    def test_extend_returns_new_dictionary(self):
        d = SymbolDictionary([("a", "1")], name="base")
        extended = d.extend([("b", "2"), SymbolEntry("a", "9")])
        assert "b" not in d
        assert extended["a"] == "9"
        assert extended["b"] == "2"
        assert extended.name == "base"

    def test_equality_and_hash(self):
        first = SymbolDictionary([("a", "1"), ("bc", "2")])
        second = SymbolDictionary.from_mapping({"a": "1", "bc": "2"})
        assert first == second
        assert hash(first) == hash(second)

    def test_to_dict(self):
        d = SymbolDictionary([("a", "1")], name="tiny", version="2.0")
        assert d.to_dict() == {"name": "tiny", "version": "2.0", "entries": [{"key": "a", "symbols": "1"}]}


class TestPackLoading:
    """Tests for load_dictionary and the bundled pack."""

    def test_default_pack_contents(self):
        d = default_dictionary()
        assert d.name == "celo"
        assert d["celo"] == "💚🌳💰🌟"
        assert d["hello"] == "👋🌎"
        assert d[" "] == "\u3030\ufe0f"
        assert len(d.characters) == 26 + 10 + 5
        assert [e.key for e in d.phrases][0] == "blockchain"

    def test_load_pack_is_cached(self):
        assert load_pack("celo") is load_pack("celo")

    def test_unknown_pack(self):
        with pytest.raises(VocabularyError):
            load_pack("does-not-exist")

    def test_load_yaml_entries(self, tmp_path):
        path = tmp_path / "tiny.yaml"
        path.write_text(yaml.safe_dump({
            "name": "tiny",
            "version": "0.1",
            "entries": [{"key": "hi", "symbols": "👋"}, {"key": "x", "symbols": "❌"}],
        }, allow_unicode=True), encoding="utf-8")

        d = load_dictionary(path)
        assert d.name == "tiny"
        assert d.version == "0.1"
        assert d["hi"] == "👋"

    def test_load_json_mapping(self, tmp_path):
        path = tmp_path / "plain.json"
        path.write_text(json.dumps({"hi": "👋", "x": "❌"}), encoding="utf-8")

        d = load_dictionary(path)
        assert d.name == "plain"
        assert len(d) == 2

    def test_missing_file(self, tmp_path):
        with pytest.raises(VocabularyError):
            load_dictionary(tmp_path / "missing.yaml")

    def test_malformed_entries(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("entries:\n  - {key: a}\n", encoding="utf-8")
        with pytest.raises(VocabularyError):
            load_dictionary(path)

    def test_unparseable_file(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(VocabularyError):
            load_dictionary(path)
