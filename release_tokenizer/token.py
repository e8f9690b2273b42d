#!/usr/bin/env python3
"""
Token types and the token stream produced by the tokenizer.

The stream is an index-addressed list of Token slots. The merge pass never
removes slots while it walks them; it marks absorbed tokens as INVALID
(tombstones) and the stream is compacted afterwards in a single pass.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional


class TokenCategory(Enum):
    """Classification of a token."""
    BRACKET = "bracket"
    DELIMITER = "delimiter"
    IDENTIFIER = "identifier"
    UNKNOWN = "unknown"
    INVALID = "invalid"


@dataclass(frozen=True)
class TokenRange:
    """Half-open range (offset, size) over the filename."""
    offset: int
    size: int

    @property
    def end(self) -> int:
        return self.offset + self.size


@dataclass
class Token:
    """A classified substring of the filename."""
    category: TokenCategory
    content: str
    enclosed: bool = False

    @property
    def is_valid(self) -> bool:
        return self.category is not TokenCategory.INVALID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "content": self.content,
            "enclosed": self.enclosed,
        }


@dataclass(frozen=True)
class TokenFilter:
    """
    Predicate used to search the token stream.

    Attributes:
        enclosed: Required enclosure state, or None to accept both
        categories: Categories a token must belong to (empty accepts any)
        excluded: Categories a token must not belong to
    """
    enclosed: Optional[bool] = None
    categories: FrozenSet[TokenCategory] = field(default_factory=frozenset)
    excluded: FrozenSet[TokenCategory] = field(default_factory=frozenset)

    def matches(self, token: Token) -> bool:
        if self.enclosed is not None and token.enclosed != self.enclosed:
            return False
        if self.categories and token.category not in self.categories:
            return False
        return token.category not in self.excluded

    def live(self, **changes: Any) -> "TokenFilter":
        """Return a copy with some fields replaced, always excluding tombstones."""
        values = {
            "enclosed": self.enclosed,
            "categories": self.categories,
            "excluded": self.excluded,
        }
        values.update(changes)
        values["categories"] = frozenset(values["categories"])
        values["excluded"] = frozenset(values["excluded"]) | {TokenCategory.INVALID}
        return TokenFilter(**values)


ANY = TokenFilter()
VALID = TokenFilter(excluded=frozenset({TokenCategory.INVALID}))
BRACKET = TokenFilter(categories=frozenset({TokenCategory.BRACKET}))
DELIMITER = TokenFilter(categories=frozenset({TokenCategory.DELIMITER}))
IDENTIFIER = TokenFilter(categories=frozenset({TokenCategory.IDENTIFIER}))
UNKNOWN = TokenFilter(categories=frozenset({TokenCategory.UNKNOWN}))
ENCLOSED = VALID.live(enclosed=True)
NOT_ENCLOSED = VALID.live(enclosed=False)


class TokenStream:
    """Ordered, index-addressed sequence of tokens for one filename."""

    def __init__(self, tokens: Optional[List[Token]] = None) -> None:
        self._tokens: List[Token] = list(tokens or [])

    def __len__(self) -> int:
        return len(self._tokens)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def __bool__(self) -> bool:
        return bool(self._tokens)

    def __repr__(self) -> str:
        return f"TokenStream({self._tokens!r})"

    def append(self, token: Token) -> int:
        """Append a token and return its index."""
        self._tokens.append(token)
        return len(self._tokens) - 1

    def absorb(self, source: int, destination: int) -> None:
        """Append the content of one token to another and tombstone the source."""
        self._tokens[destination].content += self._tokens[source].content
        self._tokens[source].category = TokenCategory.INVALID

    def compact(self) -> int:
        """
        Physically remove tombstoned tokens, preserving the order of survivors.

        Returns:
            Number of tokens removed
        """
        before = len(self._tokens)
        self._tokens = [token for token in self._tokens if token.is_valid]
        return before - len(self._tokens)

    def tombstones(self) -> int:
        return sum(1 for token in self._tokens if not token.is_valid)

    def text(self) -> str:
        """Concatenate the content of all live tokens."""
        return "".join(token.content for token in self._tokens if token.is_valid)

    def find_token(self, start: int, stop: int, token_filter: TokenFilter = ANY) -> Optional[int]:
        """
        Find the first token matching a filter between two indices.

        The scan runs forward when start < stop and backward when start > stop;
        stop itself is never examined. Indices outside the stream are clamped.

        Args:
            start: Index of the first token to examine
            stop: Exclusive bound of the scan
            token_filter: Predicate the token must satisfy

        Returns:
            Index of the matching token, or None when the scan is exhausted
        """
        step = 1 if stop >= start else -1
        if step == 1:
            indices = range(max(start, 0), min(stop, len(self._tokens)))
        else:
            indices = range(min(start, len(self._tokens) - 1), max(stop, -1), -1)
        for index in indices:
            if token_filter.matches(self._tokens[index]):
                return index
        return None

    def find_previous_token(self, index: int, token_filter: TokenFilter = VALID) -> Optional[int]:
        """Search backwards from the token before `index`, skipping tombstones."""
        return self.find_token(index - 1, -1, token_filter.live())

    def find_next_token(self, index: int, token_filter: TokenFilter = VALID) -> Optional[int]:
        """Search forwards from the token after `index`, skipping tombstones."""
        return self.find_token(index + 1, len(self._tokens), token_filter.live())

    def to_list(self) -> List[Dict[str, Any]]:
        return [token.to_dict() for token in self._tokens]


def is_alphanumeric(char: str) -> bool:
    """ASCII letters and digits only; other scripts may still act as delimiters."""
    return char.isascii() and char.isalnum()
