#!/usr/bin/env python3
"""
Tests for keyword dictionary validation.
"""

import json

from release_tokenizer.dictionary_loader import DictionaryLoader
from release_tokenizer.dictionary_validator import (
    check_categories,
    check_keyword_groups,
    validate_dictionary,
    validate_dictionary_file,
)


def test_packaged_dictionary_is_valid():
    assert validate_dictionary_file(DictionaryLoader.get_dictionary_path()) == []


def test_schema_errors_are_reported():
    errors = validate_dictionary({"keywords": [{"category": "source"}], "extra": 1})

    assert errors
    assert all(error.startswith("keywords: ") for error in errors)
    assert any("'keywords' is a required property" in error for error in errors)


def test_non_object_document():
    assert validate_dictionary(["not", "an", "object"])


def test_unknown_and_unregistrable_categories():
    data = {
        "keywords": [
            {"category": "not_a_category", "keywords": ["FOO"]},
            {"category": "unknown", "keywords": ["BAR"]},
        ],
        "peek": [{"category": "bogus", "phrases": ["x"]}],
    }

    errors = check_categories(data)

    assert errors == [
        "keywords[0]: unknown category 'not_a_category'",
        "keywords[1]: 'unknown' is not a registrable category",
        "peek[0]: unknown category 'bogus'",
    ]


def test_duplicates_are_per_table():
    data = {
        "keywords": [
            {"category": "audio_term", "keywords": ["AAC", "flac"]},
            {"category": "file_extension", "options": "invalid", "keywords": ["AAC"]},
            {"category": "source", "keywords": ["FLAC"]},
        ]
    }

    errors = check_keyword_groups(data)

    assert errors == ["keywords[2]: duplicate keyword 'FLAC' already registered under 'audio_term'"]


def test_unknown_preset_and_empty_keyword():
    data = {"keywords": [{"category": "source", "options": "sometimes", "keywords": ["", "WEB"]}]}

    errors = validate_dictionary(data)

    assert "keywords[0]: unknown options preset 'sometimes'" in errors
    assert "keywords[0]: empty keyword" in errors


def test_unreadable_file(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")

    errors = validate_dictionary_file(path)

    assert len(errors) == 1
    assert "could not be read" in errors[0]


def test_valid_custom_file(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({
        "keywords": [{"category": "source", "options": "unidentifiable", "keywords": ["WEB"]}],
        "peek": [{"category": "video_term", "phrases": ["x264"]}],
    }), encoding="utf-8")

    assert validate_dictionary_file(path) == []


def test_whole_word_flag_must_be_boolean():
    data = {
        "keywords": [],
        "peek": [{"category": "release_group", "phrases": ["Thora"], "whole_word": "yes"}],
    }

    errors = validate_dictionary(data)

    assert any("peek > 0 > whole_word" in error for error in errors)
