#!/usr/bin/env python3
"""
Tests for cached dictionary loading.
"""

import json
from unittest.mock import patch

import pytest

from release_tokenizer.dictionary_loader import DEFAULT_DICTIONARY, DictionaryLoader


@pytest.fixture(autouse=True)
def clean_cache():
    """Each test starts and ends with an empty cache."""
    DictionaryLoader.clear_cache()
    yield
    DictionaryLoader.clear_cache()


def test_packaged_dictionary_path():
    path = DictionaryLoader.get_dictionary_path()

    assert path.name == DEFAULT_DICTIONARY
    assert path.parent.name == "dictionaries"
    assert path.is_file()
    assert DictionaryLoader.available_dictionaries() == [DEFAULT_DICTIONARY]


def test_load_packaged_dictionary_is_cached():
    first = DictionaryLoader.load_dictionary()
    second = DictionaryLoader.load_dictionary()

    assert isinstance(first, dict)
    assert "keywords" in first and "peek" in first
    assert first is second


def test_use_cache_false_reads_again():
    first = DictionaryLoader.load_dictionary()
    fresh = DictionaryLoader.load_dictionary(use_cache=False)

    assert fresh == first
    assert fresh is not first


def test_explicit_path_and_clear_cache(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"keywords": [], "peek": []}), encoding="utf-8")

    assert DictionaryLoader.load_dictionary(path) == {"keywords": [], "peek": []}

    path.write_text(json.dumps({"keywords": [{"category": "source", "keywords": ["WEB"]}]}), encoding="utf-8")
    assert DictionaryLoader.load_dictionary(path) == {"keywords": [], "peek": []}

    DictionaryLoader.clear_cache(path)
    assert DictionaryLoader.get_section("keywords", path) == [{"category": "source", "keywords": ["WEB"]}]


def test_missing_or_broken_dictionary(tmp_path, caplog):
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    assert DictionaryLoader.load_dictionary("does-not-exist.json") is None
    assert DictionaryLoader.load_dictionary(broken) is None
    assert DictionaryLoader.get_section("keywords", "does-not-exist.json") is None
    assert "Could not load dictionary" in caplog.text


def test_unreadable_file_returns_none():
    """Permission problems degrade to None like a missing file."""
    with patch('builtins.open', side_effect=PermissionError):
        assert DictionaryLoader.load_dictionary() is None


def test_get_section_of_packaged_dictionary():
    peek = DictionaryLoader.get_section("peek")
    assert {"category": "audio_term", "phrases": ["Dual Audio"]} in peek
    assert DictionaryLoader.get_section("no_such_section") is None


def test_clear_cache_accepts_name_or_path(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"peek": []}), encoding="utf-8")
    first = DictionaryLoader.load_dictionary(path)

    DictionaryLoader.clear_cache(str(path))
    second = DictionaryLoader.load_dictionary(path)
    assert second is not first

    DictionaryLoader.clear_cache(path)
    assert DictionaryLoader.load_dictionary(path) is not second
