#!/usr/bin/env python3
"""
Element store for metadata extracted from release filenames.

An element is a (category, value) pair. The tokenizer records keyword hits
here, and later extraction stages append their own findings. Order of
insertion is preserved and a category may hold several values.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional


class ElementCategory(Enum):
    """Categories of metadata that can be extracted from a filename."""
    ANIME_SEASON = "anime_season"
    ANIME_SEASON_PREFIX = "anime_season_prefix"
    ANIME_TITLE = "anime_title"
    ANIME_TYPE = "anime_type"
    ANIME_YEAR = "anime_year"
    AUDIO_TERM = "audio_term"
    DEVICE_COMPATIBILITY = "device_compatibility"
    EPISODE_NUMBER = "episode_number"
    EPISODE_NUMBER_ALT = "episode_number_alt"
    EPISODE_PREFIX = "episode_prefix"
    EPISODE_TITLE = "episode_title"
    FILE_CHECKSUM = "file_checksum"
    FILE_EXTENSION = "file_extension"
    FILE_NAME = "file_name"
    LANGUAGE = "language"
    OTHER = "other"
    RELEASE_GROUP = "release_group"
    RELEASE_INFORMATION = "release_information"
    RELEASE_VERSION = "release_version"
    SOURCE = "source"
    SUBTITLES = "subtitles"
    VIDEO_RESOLUTION = "video_resolution"
    VIDEO_TERM = "video_term"
    VOLUME_NUMBER = "volume_number"
    VOLUME_PREFIX = "volume_prefix"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Element:
    """A single extracted metadata fact."""
    category: ElementCategory
    value: str


class Elements:
    """Ordered collection of elements; duplicates per category are allowed."""

    def __init__(self) -> None:
        self._elements: List[Element] = []

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Element]:
        return iter(self._elements)

    def __getitem__(self, position: int) -> Element:
        return self._elements[position]

    def __repr__(self) -> str:
        return f"Elements({self._elements!r})"

    def insert(self, category: ElementCategory, value: str) -> None:
        """Append an element. Empty values are silently dropped."""
        if value:
            self._elements.append(Element(category, value))

    def get(self, category: ElementCategory) -> str:
        """Return the first value recorded for a category, or an empty string."""
        element = self.find(category)
        return element.value if element else ""

    def get_all(self, category: ElementCategory) -> List[str]:
        """Return every value recorded for a category, in insertion order."""
        return [element.value for element in self._elements if element.category == category]

    def erase(self, category: ElementCategory) -> None:
        """Remove all elements of a category."""
        self._elements = [element for element in self._elements if element.category != category]

    def clear(self) -> None:
        self._elements.clear()

    def count(self, category: ElementCategory) -> int:
        return sum(1 for element in self._elements if element.category == category)

    def empty(self, category: Optional[ElementCategory] = None) -> bool:
        """
        Check whether the store (or a single category of it) holds nothing.

        Args:
            category: Category to check, or None to check the whole store

        Returns:
            True if no matching element exists
        """
        if category is None:
            return not self._elements
        return self.find(category) is None

    def find(self, category: ElementCategory) -> Optional[Element]:
        """Return the first element of a category, or None."""
        return next((element for element in self._elements if element.category == category), None)

    def to_list(self) -> List[Dict[str, Any]]:
        """Serialize elements as a list of plain dicts (for JSON output)."""
        return [
            {"category": element.category.value, "value": element.value}
            for element in self._elements
        ]
