#!/usr/bin/env python3
"""
Parser options and their loading.

Options are merged from three sources, lowest priority first:
1. Built-in defaults
2. An optional JSON config file
3. Explicit overrides (e.g. from the command line)

The tokenizer itself only reads allowed_delimiters. The remaining fields are
carried through unchanged for later extraction stages.
"""

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

logger = logging.getLogger(__name__)

DEFAULT_DELIMITERS = " _.&+,|"


@dataclass(frozen=True)
class ParserOptions:
    allowed_delimiters: str = DEFAULT_DELIMITERS
    ignored_strings: Tuple[str, ...] = ()

    parse_episode_number: bool = True
    parse_episode_title: bool = True
    parse_file_extension: bool = True
    parse_release_group: bool = True

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "ParserOptions":
        """Build options from a plain mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            if key not in known:
                logger.warning("Ignoring unknown parser option %r", key)
                continue
            values[key] = value

        if "ignored_strings" in values:
            ignored = values["ignored_strings"] or ()
            if isinstance(ignored, str):
                ignored = (ignored,)
            values["ignored_strings"] = tuple(str(s) for s in ignored)
        if "allowed_delimiters" in values:
            values["allowed_delimiters"] = str(values["allowed_delimiters"] or "")
        for key in ("parse_episode_number", "parse_episode_title",
                    "parse_file_extension", "parse_release_group"):
            if key in values:
                values[key] = bool(values[key])

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["ignored_strings"] = list(self.ignored_strings)
        return data


def load_options(
    config_path: Optional[Union[str, Path]] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> ParserOptions:
    """
    Load parser options with precedence defaults < config file < overrides.

    A config file may hold the options at the top level or under a "parser"
    section. Missing or unreadable files are logged and ignored.

    Args:
        config_path: Optional path to a JSON config file
        overrides: Optional explicit values (None values are ignored)

    Returns:
        Merged ParserOptions
    """
    merged: Dict[str, Any] = ParserOptions().to_dict()

    if config_path:
        path = Path(config_path)
        try:
            file_config = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Could not read config file %s: %s", path, exc)
            file_config = {}

        if isinstance(file_config, dict):
            section = file_config.get("parser", file_config)
            if isinstance(section, dict):
                merged.update(section)
        else:
            logger.warning("Config file %s must contain a JSON object", path)

    for key, value in (overrides or {}).items():
        if value is not None:
            merged[key] = value

    return ParserOptions.from_mapping(merged)
