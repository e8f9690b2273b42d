#!/usr/bin/env python3
"""
Cached access to the JSON dictionaries shipped inside the package.

Dictionaries are addressed by file name (resolved against the package's
dictionaries/ folder) or by an explicit path. Each one is parsed at most once
per process unless the caller opts out of the cache.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

DEFAULT_DICTIONARY = "keywords.json"
DICTIONARY_DIR = Path(__file__).resolve().parent / "dictionaries"


class DictionaryLoader:
    """Loads packaged dictionaries and keeps the parsed documents in memory."""

    _cache: Dict[str, Any] = {}
    _lock = threading.Lock()

    @staticmethod
    def get_dictionary_path(dictionary_name: str = DEFAULT_DICTIONARY) -> Path:
        """Absolute path of a dictionary file inside the package."""
        return DICTIONARY_DIR / dictionary_name

    @staticmethod
    def available_dictionaries() -> List[str]:
        return sorted(path.name for path in DICTIONARY_DIR.glob("*.json"))

    @classmethod
    def _resolve(cls, dictionary: Union[str, Path]) -> Path:
        path = Path(dictionary)
        if path.parent == Path("."):
            return cls.get_dictionary_path(path.name)
        return path

    @classmethod
    def load_dictionary(
        cls,
        dictionary_name: Union[str, Path] = DEFAULT_DICTIONARY,
        use_cache: bool = True
    ) -> Optional[Any]:
        """
        Parse a dictionary, serving it from the cache when possible.

        Bare file names are looked up in the packaged dictionaries folder;
        anything with a directory part is opened as given.

        Args:
            dictionary_name: File name or path of the dictionary
            use_cache: Reuse (and store) the parsed document

        Returns:
            The parsed JSON document, or None when the file is missing,
            unreadable or not valid JSON (the problem is logged)
        """
        key = str(dictionary_name)
        path = cls._resolve(dictionary_name)

        with cls._lock:
            if use_cache and key in cls._cache:
                return cls._cache[key]

            try:
                with open(path, 'r', encoding='utf-8') as handle:
                    document = json.load(handle)
            except (OSError, json.JSONDecodeError) as exc:
                logger.warning("Could not load dictionary %s: %s", path, exc)
                return None

            if use_cache:
                cls._cache[key] = document
            logger.debug("Loaded dictionary %s", path)
            return document

    @classmethod
    def get_section(
        cls,
        section_name: str,
        dictionary_name: Union[str, Path] = DEFAULT_DICTIONARY,
        use_cache: bool = True
    ) -> Any:
        """Return one top-level section of a dictionary, or None."""
        document = cls.load_dictionary(dictionary_name, use_cache)
        if isinstance(document, dict):
            return document.get(section_name)
        return None

    @classmethod
    def clear_cache(cls, dictionary_name: Optional[Union[str, Path]] = None) -> None:
        """Forget one cached dictionary, or all of them when no name is given."""
        with cls._lock:
            if dictionary_name is None:
                cls._cache.clear()
            else:
                cls._cache.pop(str(dictionary_name), None)
