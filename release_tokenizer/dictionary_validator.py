#!/usr/bin/env python3
"""Validate keyword dictionaries against the JSON Schema and custom rules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Tuple

from jsonschema import Draft7Validator

from .element import ElementCategory
from .keyword import OPTION_PRESETS, KeywordManager

SCHEMA_DIR = Path(__file__).resolve().parent / "schemas"
KEYWORDS_SCHEMA = SCHEMA_DIR / "keywords.schema.json"


def load_json(path: Path):
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def validate_with_schema(data, schema_path: Path, label: str) -> List[str]:
    schema = load_json(schema_path)
    validator = Draft7Validator(schema)
    errors = sorted(validator.iter_errors(data), key=lambda e: list(e.path))

    messages = []
    for error in errors:
        location = " > ".join(str(p) for p in error.absolute_path) or "root"
        messages.append(f"{label}: {location}: {error.message}")
    return messages


def check_categories(data: Dict[str, Any]) -> List[str]:
    errors: List[str] = []
    known = {category.value for category in ElementCategory}
    for section in ("keywords", "peek"):
        for idx, group in enumerate(data.get(section) or []):
            category = group.get("category")
            if category not in known:
                errors.append(f"{section}[{idx}]: unknown category '{category}'")
            elif category == ElementCategory.UNKNOWN.value:
                errors.append(f"{section}[{idx}]: 'unknown' is not a registrable category")
    return errors


def check_keyword_groups(data: Dict[str, Any]) -> List[str]:
    """Check option presets, empty keywords and duplicates within a table."""
    errors: List[str] = []
    # Same partitioning as KeywordManager: file extensions vs everything else
    seen: Dict[Tuple[bool, str], str] = {}

    for idx, group in enumerate(data.get("keywords") or []):
        preset = group.get("options", "default")
        if preset not in OPTION_PRESETS:
            errors.append(f"keywords[{idx}]: unknown options preset '{preset}'")

        category = group.get("category")
        is_extension = category == ElementCategory.FILE_EXTENSION.value
        for keyword in group.get("keywords") or []:
            if not keyword:
                errors.append(f"keywords[{idx}]: empty keyword")
                continue
            key = (is_extension, KeywordManager.normalize(keyword))
            if key in seen:
                errors.append(
                    f"keywords[{idx}]: duplicate keyword '{keyword}' already registered under '{seen[key]}'"
                )
            else:
                seen[key] = category
    return errors


def validate_dictionary(data: Any) -> List[str]:
    """
    Validate a keyword dictionary document.

    Args:
        data: Parsed JSON document

    Returns:
        List of error messages (empty when the dictionary is valid)
    """
    errors = validate_with_schema(data, KEYWORDS_SCHEMA, "keywords")
    if errors or not isinstance(data, dict):
        return errors

    errors.extend(check_categories(data))
    errors.extend(check_keyword_groups(data))
    return errors


def validate_dictionary_file(path: Path) -> List[str]:
    try:
        data = load_json(path)
    except (OSError, json.JSONDecodeError) as exc:
        return [f"{path}: could not be read ({exc})"]
    return validate_dictionary(data)
