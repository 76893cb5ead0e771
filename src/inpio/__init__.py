import inpio.version
from _inpio.data import DataFormatError, data_array, data_rows
from _inpio.debug import dump_tokens, truncate_data_lines
from _inpio.reading import lazy_read, read
from _inpio.tokenizer import (
    Attribute,
    EndOfInput,
    MalformedTokenError,
    NoProgressError,
    Token,
    TokenizationError,
    TokenKind,
    Tokenizer,
    UnattachedTextWarning,
)

__author__ = """Equinor"""
__email__ = "fg_sib-scout@equinor.com"

__version__ = inpio.version.version

__all__ = [
    "Attribute",
    "DataFormatError",
    "EndOfInput",
    "MalformedTokenError",
    "NoProgressError",
    "Token",
    "TokenKind",
    "TokenizationError",
    "Tokenizer",
    "UnattachedTextWarning",
    "data_array",
    "data_rows",
    "dump_tokens",
    "lazy_read",
    "read",
    "truncate_data_lines",
]
