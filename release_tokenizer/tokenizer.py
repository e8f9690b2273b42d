#!/usr/bin/env python3
"""
Tokenizer module for splitting release filenames into classified tokens.

Processing runs in three passes:
1. Bracket segmentation: every bracket character becomes its own token and
   the text between brackets is marked as enclosed or not.
2. Pre-identification and delimiter splitting: literal phrases known to the
   keyword dictionary are carved out as identifiers, the remaining text is
   cut at the delimiter characters it actually contains.
3. Merge/validation: over-fragmented pieces (single characters, delimiters
   followed by a different separator) are glued back together, then
   tombstoned tokens are removed.

Concatenating the content of the resulting tokens always reproduces the
input filename.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from .element import Elements
from .keyword import KeywordManager, default_keyword_manager
from .options import ParserOptions
from .token import Token, TokenCategory, TokenRange, TokenStream, is_alphanumeric

logger = logging.getLogger(__name__)

# Opening/closing pairs, searched in this order
BRACKET_PAIRS: Tuple[Tuple[str, str], ...] = (
    ("(", ")"),  # Parenthesis
    ("[", "]"),  # Square bracket
    ("{", "}"),  # Curly bracket
    ("「", "」"),  # Corner bracket
    ("『", "』"),  # White corner bracket
    ("【", "】"),  # Black lenticular bracket
    ("（", "）"),  # Fullwidth parenthesis
)

# Delimiters that always separate words; the single-character rule skips them
SEPARATORS = (" ", "_")


@dataclass
class TokenizationResult:
    """Result of tokenizing one filename."""
    filename: str
    tokens: TokenStream = field(default_factory=TokenStream)
    elements: Elements = field(default_factory=Elements)
    options: ParserOptions = field(default_factory=ParserOptions)

    @property
    def success(self) -> bool:
        """False only when no token was produced (e.g. empty input)."""
        return bool(self.tokens)

    @property
    def pattern(self) -> str:
        """
        Structural pattern of the token stream.

        Brackets and delimiters are kept literally, identifiers become
        {identifier} and unknown tokens are numbered {token0}, {token1}...
        """
        parts: List[str] = []
        unknown_idx = 0
        for token in self.tokens:
            if token.category is TokenCategory.IDENTIFIER:
                parts.append("{identifier}")
            elif token.category is TokenCategory.UNKNOWN:
                parts.append(f"{{token{unknown_idx}}}")
                unknown_idx += 1
            else:
                parts.append(token.content)
        return "".join(parts)

    def to_json(self) -> str:
        """Convert result to JSON format."""
        json_data = {
            "filename": self.filename,
            "success": self.success,
            "pattern": self.pattern,
            "tokens": self.tokens.to_list(),
            "elements": self.elements.to_list(),
        }
        return json.dumps(json_data, ensure_ascii=False)


class Tokenizer:
    """
    Tokenizer for release filenames.

    A Tokenizer keeps scratch state while a filename is processed, so one
    instance must not be used from several threads at once. The keyword
    dictionary is shared and read-only.
    """

    def __init__(
        self,
        keyword_manager: Optional[KeywordManager] = None,
        options: Optional[ParserOptions] = None,
        bracket_pairs: Sequence[Tuple[str, str]] = BRACKET_PAIRS,
    ):
        self.keyword_manager = keyword_manager if keyword_manager is not None else default_keyword_manager()
        self.options = options or ParserOptions()
        self.bracket_pairs = tuple(bracket_pairs)

        self._closing_brackets: Dict[str, str] = {}
        for opening, closing in self.bracket_pairs:
            self._closing_brackets.setdefault(opening, closing)

        # Delimiters of the range currently being split
        self._delimiters: List[str] = []

        self._filename = ""
        self._tokens = TokenStream()
        self._elements = Elements()

    def tokenize(self, filename: str, elements: Optional[Elements] = None) -> TokenizationResult:
        """
        Tokenize a filename.

        Args:
            filename: Raw filename (extension included)
            elements: Optional element store to fill; a new one is created otherwise

        Returns:
            TokenizationResult holding the token stream and the elements
            recorded by pre-identification
        """
        self._filename = filename
        self._tokens = TokenStream()
        self._elements = elements if elements is not None else Elements()

        self._tokenize_by_brackets()

        result = TokenizationResult(
            filename=filename,
            tokens=self._tokens,
            elements=self._elements,
            options=self.options,
        )
        logger.debug("Tokenized %r into %d tokens", filename, len(result.tokens))

        self._filename = ""
        self._tokens = TokenStream()
        self._elements = Elements()
        return result

    def _add_token(self, category: TokenCategory, enclosed: bool, token_range: TokenRange) -> int:
        content = self._filename[token_range.offset:token_range.end]
        return self._tokens.append(Token(category, content, enclosed))

    def _find_opening_bracket(self, start: int) -> Tuple[int, str]:
        """Return the index of the next opening bracket and its closing character."""
        for index in range(start, len(self._filename)):
            closing = self._closing_brackets.get(self._filename[index])
            if closing is not None:
                return index, closing
        return len(self._filename), ""

    def _tokenize_by_brackets(self) -> None:
        """
        Split the filename at bracket characters.

        While a bracket is open only its own closing character is searched
        for, so a second opener of the same kind does not nest: the first
        matching closer ends the enclosure. An opener that is never closed
        leaves the rest of the filename enclosed.
        """
        length = len(self._filename)
        position = 0
        enclosed = False
        closing = ""

        while position < length:
            if not enclosed:
                index, closing = self._find_opening_bracket(position)
            else:
                index = self._filename.find(closing, position)
                if index == -1:
                    index = length

            if index > position:
                self._tokenize_by_preidentified(enclosed, TokenRange(position, index - position))

            if index == length:
                break

            self._add_token(TokenCategory.BRACKET, enclosed, TokenRange(index, 1))
            enclosed = not enclosed
            position = index + 1

    def _tokenize_by_preidentified(self, enclosed: bool, token_range: TokenRange) -> None:
        """Emit identifiers for literal phrases and delimiter-split the gaps."""
        found = self.keyword_manager.peek(self._filename, token_range, self._elements)

        offset = token_range.offset
        for phrase_range in sorted(found, key=lambda r: r.offset):
            if phrase_range.offset < offset:
                # Overlaps a phrase that was already emitted
                continue
            if phrase_range.offset > offset:
                self._tokenize_by_delimiters(enclosed, TokenRange(offset, phrase_range.offset - offset))
            self._add_token(TokenCategory.IDENTIFIER, enclosed, phrase_range)
            offset = phrase_range.end

        if offset < token_range.end:
            self._tokenize_by_delimiters(enclosed, TokenRange(offset, token_range.end - offset))

    def _tokenize_by_delimiters(self, enclosed: bool, token_range: TokenRange) -> None:
        delimiters = self._get_delimiters(self._filename[token_range.offset:token_range.end])

        if not delimiters:
            self._add_token(TokenCategory.UNKNOWN, enclosed, token_range)
            return

        first_index = len(self._tokens)
        start = token_range.offset
        for index in range(token_range.offset, token_range.end):
            if self._filename[index] not in delimiters:
                continue
            if index > start:
                self._add_token(TokenCategory.UNKNOWN, enclosed, TokenRange(start, index - start))
            self._add_token(TokenCategory.DELIMITER, enclosed, TokenRange(index, 1))
            start = index + 1

        if start < token_range.end:
            self._add_token(TokenCategory.UNKNOWN, enclosed, TokenRange(start, token_range.end - start))

        # Absorbing can expose a new match for the adjacent-delimiter rule
        while self._validate_delimiter_tokens(first_index):
            pass

    def _get_delimiters(self, text: str) -> str:
        """
        Collect the allowed, non-alphanumeric characters present in a text.

        Returns:
            The delimiter characters, in order of first occurrence
        """
        self._delimiters.clear()
        allowed = self.options.allowed_delimiters
        for char in text:
            if char in self._delimiters or is_alphanumeric(char):
                continue
            if char in allowed:
                self._delimiters.append(char)
        return "".join(self._delimiters)

    def _is_delimiter_token(self, index: Optional[int]) -> bool:
        return index is not None and self._tokens[index].category is TokenCategory.DELIMITER

    def _is_unknown_token(self, index: Optional[int]) -> bool:
        return index is not None and self._tokens[index].category is TokenCategory.UNKNOWN

    def _is_single_character_token(self, index: Optional[int]) -> bool:
        return self._is_unknown_token(index) and len(self._tokens[index].content) == 1

    def _validate_delimiter_tokens(self, first_index: int) -> int:
        """
        Merge pass over the delimiters emitted since first_index.

        Single-character rule (not applied to space and underscore): a
        delimiter next to a one-character unknown token is glued to its
        neighbours, so "A.B" or "x.264" style fragments stay in one piece.

        Adjacent-delimiter rule: a delimiter between an unknown token and a
        different space/underscore delimiter (commas excepted) is appended to
        the unknown token.

        Returns:
            Number of tokens absorbed (and removed) by this pass
        """
        tokens = self._tokens

        for index in range(first_index, len(tokens)):
            token = tokens[index]
            if token.category is not TokenCategory.DELIMITER:
                continue

            delimiter = token.content[0]
            prev_index = tokens.find_previous_token(index)
            next_index = tokens.find_next_token(index)

            if delimiter not in SEPARATORS:
                if self._is_single_character_token(prev_index):
                    tokens.absorb(index, prev_index)
                    while self._is_unknown_token(next_index):
                        tokens.absorb(next_index, prev_index)
                        next_index = tokens.find_next_token(next_index)
                        if (self._is_delimiter_token(next_index)
                                and tokens[next_index].content[0] == delimiter):
                            tokens.absorb(next_index, prev_index)
                            next_index = tokens.find_next_token(next_index)
                    continue

                if prev_index is not None and self._is_single_character_token(next_index):
                    tokens.absorb(index, prev_index)
                    tokens.absorb(next_index, prev_index)
                    continue

            if self._is_unknown_token(prev_index) and self._is_delimiter_token(next_index):
                next_delimiter = tokens[next_index].content[0]
                if delimiter != next_delimiter and delimiter != ",":
                    if next_delimiter in SEPARATORS:
                        tokens.absorb(index, prev_index)

        return tokens.compact()
