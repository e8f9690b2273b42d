#!/usr/bin/env python3
"""
Keyword dictionary for classifying filename fragments.

Keywords are stored upper-cased in category-partitioned tables. File
extensions get a table of their own so that names such as "AAC" or "ASS" can
be both an extension and an audio/subtitle term. A small table of literal
phrases is scanned with exact casing before any splitting happens (see
KeywordManager.peek).

The dictionary is built once from the packaged JSON and frozen; tokenizers
share it by reference and never modify it.
"""

import logging
import threading
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .dictionary_loader import DEFAULT_DICTIONARY, DictionaryLoader
from .element import ElementCategory, Elements
from .token import TokenRange, is_alphanumeric

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordOptions:
    """Matching options attached to a keyword."""
    identifiable: bool = True
    searchable: bool = True
    valid: bool = True


OPTION_PRESETS: Mapping[str, KeywordOptions] = MappingProxyType({
    "default": KeywordOptions(),
    "invalid": KeywordOptions(True, True, False),
    "unidentifiable": KeywordOptions(False, True, True),
    "unidentifiable_invalid": KeywordOptions(False, True, False),
    "unidentifiable_unsearchable": KeywordOptions(False, False, True),
})


@dataclass(frozen=True)
class Keyword:
    """Dictionary entry: the category owning a keyword and its options."""
    category: ElementCategory
    options: KeywordOptions


@dataclass(frozen=True)
class PeekEntry:
    """
    Literal phrases (exact casing) recognized before delimiter splitting.

    A whole-word entry only matches where the phrase is not glued to other
    letters or digits, so "Thora" is found in "[Thora]" but not in "Thorax".
    """
    category: ElementCategory
    phrases: Tuple[str, ...]
    whole_word: bool = False


class KeywordManager:
    """Categorized keyword tables plus the literal-phrase table used by peek."""

    def __init__(self, peek_entries: Iterable[PeekEntry] = ()) -> None:
        self._keys: Mapping[str, Keyword] = {}
        self._file_extensions: Mapping[str, Keyword] = {}
        self._peek_entries: Tuple[PeekEntry, ...] = tuple(peek_entries)
        self._frozen = False

    def __len__(self) -> int:
        return len(self._keys) + len(self._file_extensions)

    def __contains__(self, word: object) -> bool:
        if not isinstance(word, str):
            return False
        key = self.normalize(word)
        return key in self._keys or key in self._file_extensions

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def peek_entries(self) -> Tuple[PeekEntry, ...]:
        return self._peek_entries

    def freeze(self) -> "KeywordManager":
        """Seal the tables. Further calls to add() raise RuntimeError."""
        if not self._frozen:
            self._keys = MappingProxyType(dict(self._keys))
            self._file_extensions = MappingProxyType(dict(self._file_extensions))
            self._frozen = True
        return self

    def add(self, category: ElementCategory, options: KeywordOptions, keywords: Iterable[str]) -> None:
        """
        Register keywords under a category.

        Empty keywords are skipped; a keyword already present in the target
        table keeps its first registration.

        Args:
            category: Category owning the keywords
            options: Matching options shared by all keywords of this call
            keywords: Keywords to register (normalized before storing)
        """
        if self._frozen:
            raise RuntimeError("Keyword dictionary is frozen and cannot be modified")

        table: Dict[str, Keyword] = dict(self._table(category))
        for keyword in keywords:
            if not keyword:
                continue
            table.setdefault(self.normalize(keyword), Keyword(category, options))

        if category is ElementCategory.FILE_EXTENSION:
            self._file_extensions = table
        else:
            self._keys = table

    def find(self, category: ElementCategory, word: str) -> bool:
        """Check whether a word is registered under exactly this category."""
        keyword = self._table(category).get(self.normalize(word))
        return keyword is not None and keyword.category == category

    def lookup(self, word: str, category: ElementCategory = ElementCategory.UNKNOWN) -> Optional[Keyword]:
        """
        Resolve a word to its dictionary entry.

        With the UNKNOWN sentinel the general table is searched and whatever
        category owns the word is returned. With a concrete category the
        entry must belong to it.

        Args:
            word: Word to look up (normalized before the lookup)
            category: Expected category, or UNKNOWN to resolve it

        Returns:
            The matching Keyword, or None on a miss or a category mismatch
        """
        keyword = self._table(category).get(self.normalize(word))
        if keyword is None:
            return None
        if category is not ElementCategory.UNKNOWN and keyword.category != category:
            return None
        return keyword

    @staticmethod
    def normalize(word: str) -> str:
        return word.upper()

    def peek(self, filename: str, token_range: TokenRange, elements: Elements) -> List[TokenRange]:
        """
        Find literal phrases inside a raw range of the filename.

        For the first occurrence of each configured phrase inside the range
        (for whole-word entries, the first one bounded by the range edges or
        by non-alphanumeric characters) an element is recorded and the
        absolute range of the phrase is returned, so the tokenizer can carve
        it out before splitting on delimiters.

        Args:
            filename: Complete filename
            token_range: Range of the filename to scan
            elements: Element store receiving one element per hit

        Returns:
            Ranges of the phrases found, in table order
        """
        found: List[TokenRange] = []
        for entry in self._peek_entries:
            for phrase in entry.phrases:
                if not phrase:
                    continue
                offset = self._find_phrase(filename, phrase, token_range, entry.whole_word)
                if offset == -1:
                    continue
                elements.insert(entry.category, phrase)
                found.append(TokenRange(offset, len(phrase)))
        return found

    @staticmethod
    def _find_phrase(filename: str, phrase: str, token_range: TokenRange, whole_word: bool) -> int:
        offset = filename.find(phrase, token_range.offset, token_range.end)
        while whole_word and offset != -1:
            end = offset + len(phrase)
            before = offset == token_range.offset or not is_alphanumeric(filename[offset - 1])
            after = end == token_range.end or not is_alphanumeric(filename[end])
            if before and after:
                break
            offset = filename.find(phrase, offset + 1, token_range.end)
        return offset

    def _table(self, category: ElementCategory) -> Mapping[str, Keyword]:
        if category is ElementCategory.FILE_EXTENSION:
            return self._file_extensions
        return self._keys

    @classmethod
    def from_dictionary(cls, data: Optional[Mapping[str, Any]]) -> "KeywordManager":
        """
        Build a frozen keyword dictionary from its JSON representation.

        Groups naming an unknown category or option preset are logged and
        skipped.

        Args:
            data: Parsed dictionary document with "keywords" and "peek" sections

        Returns:
            Frozen KeywordManager
        """
        data = data or {}

        peek_entries = []
        for group in data.get("peek") or []:
            category = _parse_category(group.get("category"))
            if category is None:
                continue
            phrases = tuple(group.get("phrases") or ())
            peek_entries.append(PeekEntry(category, phrases, bool(group.get("whole_word", False))))

        manager = cls(peek_entries)
        for group in data.get("keywords") or []:
            category = _parse_category(group.get("category"))
            if category is None:
                continue
            preset = group.get("options", "default")
            options = OPTION_PRESETS.get(preset)
            if options is None:
                logger.warning("Skipping keyword group with unknown options preset %r", preset)
                continue
            manager.add(category, options, group.get("keywords") or [])

        return manager.freeze()


def _parse_category(name: Any) -> Optional[ElementCategory]:
    try:
        return ElementCategory(name)
    except ValueError:
        logger.warning("Skipping dictionary group with unknown category %r", name)
        return None


_default_manager: Optional[KeywordManager] = None
_default_lock = threading.Lock()


def default_keyword_manager() -> KeywordManager:
    """Return the shared dictionary built from the packaged keywords.json."""
    global _default_manager
    with _default_lock:
        if _default_manager is None:
            data = DictionaryLoader.load_dictionary(DEFAULT_DICTIONARY)
            _default_manager = KeywordManager.from_dictionary(data)
            logger.debug("Loaded %d keywords", len(_default_manager))
        return _default_manager
