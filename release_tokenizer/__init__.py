"""
Release filename tokenizer package.

This package contains the core processing modules:
- element: Element categories and the ordered element store
- keyword: Keyword dictionary and literal-phrase pre-identification
- token: Token types, search filters and the token stream
- tokenizer: Bracket/delimiter state machine and merge pass
- options: Parser options and layered config loading
- dictionary_loader: Cached loading of the packaged JSON dictionaries
- dictionary_validator: Schema and rule checks for keyword dictionaries
- parser: FilenameParser facade
"""

__version__ = "0.1.0"

# Explicit imports make the public API clear and prevent namespace pollution
from .element import Element, ElementCategory, Elements
from .keyword import (
    Keyword,
    KeywordManager,
    KeywordOptions,
    OPTION_PRESETS,
    PeekEntry,
    default_keyword_manager,
)
from .token import (
    Token,
    TokenCategory,
    TokenFilter,
    TokenRange,
    TokenStream,
)
from .options import DEFAULT_DELIMITERS, ParserOptions, load_options
from .tokenizer import BRACKET_PAIRS, TokenizationResult, Tokenizer
from .dictionary_loader import DictionaryLoader
from .parser import FilenameParser

__all__ = [
    'Element',
    'ElementCategory',
    'Elements',
    'Keyword',
    'KeywordManager',
    'KeywordOptions',
    'OPTION_PRESETS',
    'PeekEntry',
    'default_keyword_manager',
    'Token',
    'TokenCategory',
    'TokenFilter',
    'TokenRange',
    'TokenStream',
    'DEFAULT_DELIMITERS',
    'ParserOptions',
    'load_options',
    'BRACKET_PAIRS',
    'TokenizationResult',
    'Tokenizer',
    'DictionaryLoader',
    'FilenameParser',
]
