"""
In this module, a tokenizer is a pull based scanner that takes a stream of
inp file contents and produces one token for each call to advance():

* '*Keyword, key=value' lines followed by their data lines give a KEYWORD
  token,
* '*End Keyword' lines give an END_KEYWORD token,
* '** comment' lines give a COMMENT token.

When the stream is exhausted the tokenizer produces an ERROR token, and keeps
doing so for every subsequent call. Tokenizer.err tells why: EndOfInput when
tokenization completed normally.

The stream is read in chunks into a buffer which only holds the token
currently being scanned and the bytes read ahead of it, so files of any size
can be tokenized in bounded memory (as long as the data lines of a single
keyword fit).

Keyword lines continued on the next line by a trailing comma, eg.

    *ELASTIC, TYPE=ISOTROPIC,
    DEPENDENCIES=1

are not supported: the second line is taken as data. Files referenced by
INPUT or FILE parameters are not read.
"""

from .errors import (
    EndOfInput,
    MalformedTokenError,
    NoProgressError,
    TokenizationError,
    UnattachedTextWarning,
)
from .inp_tokenizer import Tokenizer
from .token import Attribute, Token
from .token_kind import TokenKind

__all__ = [
    "Attribute",
    "EndOfInput",
    "MalformedTokenError",
    "NoProgressError",
    "Token",
    "TokenKind",
    "TokenizationError",
    "Tokenizer",
    "UnattachedTextWarning",
]
