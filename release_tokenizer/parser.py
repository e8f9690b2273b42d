#!/usr/bin/env python3
"""
Filename parser facade.

Usage as library:
    from release_tokenizer import FilenameParser
    parser = FilenameParser()
    result = parser.tokenize("[Thora] Show - 01 [720p].mkv")
    for token in result.tokens:
        print(token.category, token.content, token.enclosed)
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Union

from .keyword import KeywordManager, default_keyword_manager
from .options import ParserOptions
from .tokenizer import TokenizationResult, Tokenizer


class FilenameParser:
    """Parser for extracting tokens and metadata from release filenames."""

    def __init__(
        self,
        options: Optional[ParserOptions] = None,
        keyword_manager: Optional[KeywordManager] = None,
    ):
        """
        Initialize the filename parser.

        Args:
            options: Parser options; defaults are used when omitted.
            keyword_manager: Keyword dictionary to share. The packaged
                             dictionary is loaded (once per process) when omitted.
        """
        self.options = options or ParserOptions()
        self.keyword_manager = keyword_manager if keyword_manager is not None else default_keyword_manager()
        self.tokenizer = Tokenizer(self.keyword_manager, self.options)

    def tokenize(self, filename: Union[str, Path]) -> TokenizationResult:
        """Tokenize a single filename. Path-like inputs are used verbatim."""
        return self.tokenizer.tokenize(str(filename))

    def parse_many(self, filenames: Iterable[Union[str, Path]]) -> List[TokenizationResult]:
        return [self.tokenize(filename) for filename in filenames]
